"""
Start-up configuration for sbmanagement.

Loads the configuration and applies its logging section, in the same steps
every entry point needs before building a client.
"""

import logging
from typing import Any, Dict, Optional

from .config_manager import ConfigManager, ManagementConfig
from .logging_config import setup_logging_from_config

logger = logging.getLogger(__name__)


def configure(
    config_file: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None
) -> ManagementConfig:
    """
    Load configuration and configure package logging.

    Args:
        config_file: Path to configuration file (YAML or JSON)
        overrides: Dictionary of overrides applied over the file

    Returns:
        Validated ManagementConfig; pass its ``codec`` section to the client

    Raises:
        ValidationError: If configuration is invalid
        FileNotFoundError: If specified config file doesn't exist
    """
    # Step 1: Load and validate configuration
    config = ConfigManager().load(config_file=config_file, overrides=overrides)

    # Step 2: Setup logging
    setup_logging_from_config(config.logging)

    logger.info(
        f"sbmanagement configured: log_format={config.logging.format}, "
        f"xml_declaration={config.codec.xml_declaration}, encoding={config.codec.encoding}"
    )
    return config
