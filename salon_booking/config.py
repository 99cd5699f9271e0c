"""
Centralized configuration with environment variable overrides.

Slot granularity, scan windows, and logging are configurable here.
Nothing is hardcoded in the scheduling or service logic.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from salon_booking.logging_context import RequestIdFilter

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class SalonConfig:
    """Salon identity shown in CLI output and logs."""

    name: str = os.getenv("SALON_NAME", "Salon")


@dataclass(frozen=True)
class SchedulingConfig:
    """Slot generation and date-range scan settings."""

    slot_step_minutes: int = _safe_int("SLOT_STEP_MINUTES", "30")
    open_dates_window_days: int = _safe_int("OPEN_DATES_WINDOW_DAYS", "30")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    salon: SalonConfig = field(default_factory=SalonConfig)
    scheduling: SchedulingConfig = field(default_factory=SchedulingConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.scheduling.slot_step_minutes < 1:
        raise ValueError(
            f"SLOT_STEP_MINUTES must be >= 1, got {config.scheduling.slot_step_minutes}"
        )
    if config.scheduling.open_dates_window_days < 1:
        raise ValueError(
            "OPEN_DATES_WINDOW_DAYS must be >= 1, "
            f"got {config.scheduling.open_dates_window_days}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s [%(request_id)s]: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # basicConfig is a no-op when the root logger already has handlers
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RequestIdFilter) for f in handler.filters):
            handler.addFilter(RequestIdFilter())
    logger.info("Configuration loaded for '%s'", config.salon.name)
    return config


# Singleton instance
settings = load_config()
