import logging
from typing import Optional

from promptdeck.config.logging_config import apply_logging_config, get_logging_config


def setup_logging(level: Optional[str] = None) -> dict:
    """Configure root logging from the environment profile.

    - Profile (production / development / debug) picks format and noisy modules
    - An explicit level overrides the profile's default level
    """
    config = get_logging_config()
    if level:
        config["default_level"] = str(level).upper()
    return apply_logging_config(config)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger after ensuring logging is initialized."""
    if not logging.getLogger().handlers:
        setup_logging()
    return logging.getLogger(name)
