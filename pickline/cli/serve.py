"""Stdio server entry point.

The editor spawns ``pickline`` and talks to it over stdin/stdout. Settings
come from config files, then PICKLINE_* environment variables (a ``.env``
in the working directory is honoured), then command-line flags.
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from pickline.cli.arg_parser import parse_args
from pickline.cli.output import print_error, print_info
from pickline.config.loader import load_config
from pickline.config.schema import Config
from pickline.core.encoding import configure_stdio
from pickline.core.errors import ConfigError
from pickline.rpc.bootstrap import configure_logging, serve

logger = logging.getLogger(__name__)

ENV_CONFIG = "PICKLINE_CONFIG"
ENV_LOG_LEVEL = "PICKLINE_LOG_LEVEL"
ENV_LOG_FILE = "PICKLINE_LOG_FILE"


def resolve_config(args: argparse.Namespace) -> Config:
    """Load config and apply environment and flag overrides.

    Raises:
        ConfigError: If a config file is invalid or an override fails validation.
    """
    config_path = args.config or (Path(p) if (p := os.environ.get(ENV_CONFIG)) else None)
    config = load_config(config_path)

    overrides: dict[str, object] = {}
    log_level = args.log_level or os.environ.get(ENV_LOG_LEVEL)
    if log_level:
        overrides["log_level"] = log_level.upper()
    log_file = args.log_file or os.environ.get(ENV_LOG_FILE)
    if log_file:
        overrides["log_file"] = str(log_file)
    if args.max_tasks is not None:
        overrides["max_concurrent_tasks"] = args.max_tasks
    if not overrides:
        return config

    try:
        server = config.server.model_validate({**config.server.model_dump(), **overrides})
    except ValueError as e:
        raise ConfigError(f"Invalid command-line or environment setting: {e}") from e
    return config.model_copy(update={"server": server})


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    load_dotenv(find_dotenv(usecwd=True))
    configure_stdio()

    try:
        config = resolve_config(args)
    except ConfigError as e:
        print_error(e.message)
        return 1

    log_file = Path(config.server.log_file) if config.server.log_file else None
    configure_logging(getattr(logging, config.server.log_level), log_file)
    logger.debug("Resolved config: %s", config.model_dump())

    try:
        components = asyncio.run(serve(config, sys.stdin, sys.stdout.buffer))
    except KeyboardInterrupt:
        print_info("Interrupted")
        return 0

    if not components.reader.stopped:
        # Stopped by `exit` with stdin still open. The daemon reader holds the
        # stdin lock inside readline(), which aborts interpreter shutdown.
        logging.shutdown()
        sys.stderr.flush()
        os._exit(0)
    return 0
