"""Pydantic models for pickline configuration validation."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class CaseMatching(str, Enum):
    """How the matcher treats letter case."""

    SMART = "smart"  # sensitive only when the query has an uppercase letter
    RESPECT = "respect"
    IGNORE = "ignore"


class ServerConfig(BaseModel):
    """Dispatch server settings.

    Example in config.json:
        "server": {
            "log_level": "INFO",
            "log_file": "~/.pickline/logs/server.log",
            "max_concurrent_tasks": 8
        }
    """

    model_config = ConfigDict(extra="forbid")

    log_level: LogLevel = "WARNING"
    """Level for the stderr and file log handlers."""

    log_file: str | None = None
    """Rotating log file path. None disables file logging."""

    max_concurrent_tasks: int | None = Field(default=None, ge=1)
    """Upper bound on handlers running at once. None means unbounded."""

    drain_timeout: float = Field(default=5.0, ge=0)
    """Seconds to wait for in-flight tasks after input ends."""


class PreviewConfig(BaseModel):
    """Settings for the cursor-move preview."""

    model_config = ConfigDict(extra="forbid")

    size: int = Field(default=20, ge=1)
    """Number of lines returned per preview."""

    context_above: int = Field(default=5, ge=0)
    """Lines shown above the target line when the curline carries one."""


class MatcherConfig(BaseModel):
    """Settings for the default query matcher."""

    model_config = ConfigDict(extra="forbid")

    max_results: int = Field(default=100, ge=1)
    """Number of ranked lines sent back per typed response."""

    case_matching: CaseMatching = CaseMatching.SMART


class SourceConfig(BaseModel):
    """Settings for the default file source collected at init."""

    model_config = ConfigDict(extra="forbid")

    max_files: int = Field(default=50000, ge=1)
    skip_dirs: list[str] = Field(
        default_factory=lambda: [".git", ".hg", ".svn", "node_modules", "__pycache__", ".venv"]
    )
    show_hidden: bool = False


class Config(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(extra="forbid")

    server: ServerConfig = Field(default_factory=ServerConfig)
    preview: PreviewConfig = Field(default_factory=PreviewConfig)
    matcher: MatcherConfig = Field(default_factory=MatcherConfig)
    source: SourceConfig = Field(default_factory=SourceConfig)
