"""Configuration for lotledger."""

from lotledger.config.logging import configure_logging, get_logger
from lotledger.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings", "configure_logging", "get_logger"]
