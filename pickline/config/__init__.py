"""Configuration loading and validation."""

from pickline.config.loader import load_config
from pickline.config.schema import (
    CaseMatching,
    Config,
    MatcherConfig,
    PreviewConfig,
    ServerConfig,
    SourceConfig,
)

__all__ = [
    "CaseMatching",
    "Config",
    "MatcherConfig",
    "PreviewConfig",
    "ServerConfig",
    "SourceConfig",
    "load_config",
]
