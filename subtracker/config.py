"""Configuration management for SubTracker."""
import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from subtracker.errors import ConfigurationError

logger = logging.getLogger(__name__)

STORE_TYPES = ("memory", "json")
LOG_FORMATS = ("text", "json")


@dataclass(frozen=True)
class Settings:
    store: str = "memory"
    data_path: str = "data/subscriptions.json"
    seed_path: str = "data/seed.json"
    currency: str = "$"
    alert_threshold: float = 1000.0
    log_level: str = "INFO"
    log_format: str = "text"


def load_settings(env_file: str = None) -> Settings:
    """Build settings from the environment, reading ``.env`` first if present."""
    load_dotenv(env_file)

    store = os.getenv("SUBTRACKER_STORE", "memory").strip().lower()
    if store not in STORE_TYPES:
        raise ConfigurationError(
            f"SUBTRACKER_STORE must be one of {', '.join(STORE_TYPES)}, got {store!r}"
        )

    raw_threshold = os.getenv("SUBTRACKER_ALERT_THRESHOLD", "1000")
    try:
        threshold = float(raw_threshold)
    except ValueError as e:
        raise ConfigurationError(
            f"SUBTRACKER_ALERT_THRESHOLD must be a number, got {raw_threshold!r}"
        ) from e

    log_format = os.getenv("LOG_FORMAT", "text").strip().lower()
    if log_format not in LOG_FORMATS:
        raise ConfigurationError(f"LOG_FORMAT must be text or json, got {log_format!r}")

    settings = Settings(
        store=store,
        data_path=os.getenv("SUBTRACKER_DATA_PATH", Settings.data_path),
        seed_path=os.getenv("SUBTRACKER_SEED_PATH", Settings.seed_path),
        currency=os.getenv("SUBTRACKER_CURRENCY", Settings.currency),
        alert_threshold=threshold,
        log_level=os.getenv("LOG_LEVEL", Settings.log_level),
        log_format=log_format,
    )
    logger.debug("loaded settings: %s", settings)
    return settings
