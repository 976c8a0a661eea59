"""
Logging configuration for the Clinical Trials Query pipeline.
"""

import logging


def setup_logging(config):
    """Configures global logging from the "logging" section of the config."""
    logging_config = config.get("logging", {})
    logging.basicConfig(
        level=getattr(logging, str(logging_config.get("level", "INFO")).upper(), logging.INFO),
        format=logging_config.get("format"),
        datefmt="%Y-%m-%d %H:%M:%S"
    )
