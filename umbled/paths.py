"""
Path configuration for umbled.
Centralizes file path handling with environment variable support.
"""

import os
from pathlib import Path
import logging

logger = logging.getLogger(__name__)

# Base paths from environment with sensible defaults
BASE_DIR = Path(os.getenv('BOT_BASE_DIR', Path(__file__).parent.parent))
DATA_DIR = Path(os.getenv('BOT_DATA_DIR', BASE_DIR / 'data'))

# Subdirectories
LOG_DIR = Path(os.getenv('BOT_LOG_DIR', DATA_DIR / 'logs'))
CONFIG_DIR = Path(os.getenv('BOT_CONFIG_DIR', BASE_DIR))

def ensure_log_directory() -> Path:
    """Create the log directory if it doesn't exist."""
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        logger.error(f"Permission denied creating directory: {LOG_DIR}")
        raise
    return LOG_DIR

def get_log_path(filename: str) -> Path:
    """Get absolute path for log file."""
    return LOG_DIR / filename

def get_config_path(filename: str) -> Path:
    """Get absolute path for config file."""
    return CONFIG_DIR / filename

def log_path_configuration():
    """Log current path configuration for debugging."""
    logger.debug("Path configuration:")
    logger.debug(f"  BASE_DIR: {BASE_DIR}")
    logger.debug(f"  DATA_DIR: {DATA_DIR}")
    logger.debug(f"  LOG_DIR: {LOG_DIR}")
    logger.debug(f"  CONFIG_DIR: {CONFIG_DIR}")
