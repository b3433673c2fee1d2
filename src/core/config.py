"""
Configuration loading for the ATA secure erase application
"""

import copy
import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "erase_config.json"

DEFAULT_CONFIG = {
    # Transient user password, set just before the erase and cleared by it
    "password": "123456",
    "min_kernel_version": "2.6.0",
    "required_tools": ["hdparm"],
    "partitions_file": "/proc/partitions",
    "dev_dir": "/dev",
    "log_dir": "logs",
}


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict:
    """Load configuration from a JSON file merged over the defaults"""
    default_config = copy.deepcopy(DEFAULT_CONFIG)
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    try:
        if path.exists():
            with open(path, 'r') as f:
                config = json.load(f)
            if not isinstance(config, dict):
                logger.error(f"Ignoring configuration in {path}: expected a JSON object")
                return default_config
            logger.info(f"Loaded configuration from {path}")
            return _deep_merge_config(default_config, config)
        if config_path:
            logger.warning(f"Configuration file {path} not found, using defaults")
        else:
            logger.debug("No configuration file found, using defaults")
        return default_config
    except (OSError, ValueError) as e:
        logger.error(f"Error loading configuration from {path}: {e}")
        return default_config


def _deep_merge_config(default: Dict, user: Dict) -> Dict:
    """Deep merge user configuration with defaults"""
    result = default.copy()
    for key, value in user.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge_config(result[key], value)
        else:
            result[key] = value
    return result
