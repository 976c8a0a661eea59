"""
Configuration loading for the Clinical Trials Query pipeline.

Settings come from config/config.json, with environment variables (read from
a .env file when present) taking precedence.
"""

import copy
import json
import logging
import os

from dotenv import load_dotenv

from trials_query.utils.paths import get_config_path, get_exports_dir

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "clinicaltrials": {
        "api_url": "https://clinicaltrials.gov/api/v2/studies",
        "timeout": 30,
        "default_result_limit": 100,
        "chunk_size": 65536
    },
    "logging": {
        "level": "INFO",
        "format": "%(asctime)s - %(levelname)s - %(name)s - %(funcName)s - %(message)s"
    },
    "exports": {
        "output_dir": None
    }
}

# Environment variable -> (section, key, type)
ENV_OVERRIDES = {
    "CT_API_URL": ("clinicaltrials", "api_url", str),
    "CT_REQUEST_TIMEOUT": ("clinicaltrials", "timeout", float),
    "LOG_LEVEL": ("logging", "level", str),
    "CT_EXPORT_DIR": ("exports", "output_dir", str),
}


def _merge(base, overrides):
    """Merge override sections into a copy of base, one level deep."""
    merged = copy.deepcopy(base)
    for section, values in overrides.items():
        if isinstance(values, dict) and isinstance(merged.get(section), dict):
            merged[section].update(values)
        else:
            merged[section] = values
    return merged


def load_config(config_path=None):
    """
    Load configuration from the config file and the environment.

    Args:
        config_path: Path to a JSON config file (defaults to config/config.json)

    Returns:
        Configuration dictionary with every default section present
    """
    load_dotenv()

    config_path = config_path or get_config_path()
    try:
        with open(config_path, "r") as f:
            config = _merge(DEFAULT_CONFIG, json.load(f))
    except (FileNotFoundError, json.JSONDecodeError):
        logger.warning(f"Could not load config from {config_path}. Using default values.")
        config = copy.deepcopy(DEFAULT_CONFIG)

    for env_var, (section, key, cast) in ENV_OVERRIDES.items():
        value = os.getenv(env_var)
        if not value:
            continue
        try:
            config[section][key] = cast(value)
        except ValueError:
            logger.warning(f"Ignoring invalid value for {env_var}: {value!r}")

    if not config["exports"]["output_dir"]:
        config["exports"]["output_dir"] = get_exports_dir()

    return config
