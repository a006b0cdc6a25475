"""Core module initialization."""

from .config_manager import CodecConfig, ConfigManager, LoggingConfig, ManagementConfig
from .logging_config import setup_logging, setup_logging_from_config
from .runtime import configure

__all__ = [
    "CodecConfig",
    "ConfigManager",
    "LoggingConfig",
    "ManagementConfig",
    "configure",
    "setup_logging",
    "setup_logging_from_config",
]
