"""Environment-backed settings."""

import os
from dataclasses import dataclass
from typing import Literal, Optional, cast

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
_LOG_FORMATS = ("json", "console")


@dataclass(frozen=True)
class Settings:
    """Runtime settings.

    Read from LOTLEDGER_DB_PATH, LOTLEDGER_LOG_LEVEL and LOTLEDGER_LOG_FORMAT.
    Unknown log levels or formats fall back to the defaults.
    """

    db_path: Optional[str] = None
    log_level: LogLevel = "WARNING"
    log_format: LogFormat = "console"


def get_settings() -> Settings:
    """Build settings from the current environment."""
    level = os.environ.get("LOTLEDGER_LOG_LEVEL", "WARNING").upper()
    if level not in _LOG_LEVELS:
        level = "WARNING"
    log_format = os.environ.get("LOTLEDGER_LOG_FORMAT", "console").lower()
    if log_format not in _LOG_FORMATS:
        log_format = "console"
    return Settings(
        db_path=os.environ.get("LOTLEDGER_DB_PATH") or None,
        log_level=cast(LogLevel, level),
        log_format=cast(LogFormat, log_format),
    )
