"""
Environment-specific logging profiles.

ENV=production selects the quiet profile, DEBUG=true the verbose one, anything
else the development profile. LOG_LEVEL overrides the selected level.
"""
import logging
import os
from typing import Any, Dict, Optional

LOGGING_PROFILES: Dict[str, Dict[str, Any]] = {
    "production": {
        # Persistence fallbacks log at WARNING, so they still surface here
        "default_level": "WARNING",
        "console_format": "%(levelname)s - %(name)s - %(message)s",
        "suppress_modules": [
            "promptdeck.agents.generation.fallback_synthesizer",
            "promptdeck.services.slide_renderer",
            "httpx",
            "httpcore",
            "openai",
        ],
    },
    "development": {
        "default_level": "INFO",
        "console_format": "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        "suppress_modules": ["httpx", "httpcore"],
    },
    "debug": {
        "default_level": "DEBUG",
        "console_format": "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
        "suppress_modules": [],
    },
}


def select_profile_name() -> str:
    if os.getenv("DEBUG", "false").lower() == "true":
        return "debug"
    if os.getenv("ENV") == "production":
        return "production"
    return "development"


def get_logging_config() -> Dict[str, Any]:
    """Copy of the active profile with the LOG_LEVEL override applied."""
    name = select_profile_name()
    profile = dict(LOGGING_PROFILES[name])
    profile["suppress_modules"] = list(profile["suppress_modules"])
    profile["environment"] = name

    level_override = os.getenv("LOG_LEVEL")
    if level_override:
        profile["default_level"] = level_override.upper()
    return profile


def apply_logging_config(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Install a single console handler on the root logger per the profile."""
    config = config or get_logging_config()

    level = logging.getLevelName(config["default_level"])
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(config["console_format"]))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for module in config.get("suppress_modules", []):
        logging.getLogger(module).setLevel(logging.WARNING)
    return config
