"""
Centralized configuration with environment variable overrides.

Booking policy (capacity, buffer, operating hours) and business settings
live here. Scheduling functions take a ``BookingRules`` explicitly and only
fall back to ``settings.booking_rules`` when none is passed.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from showbook.logging_context import RequestIdFilter

load_dotenv()

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(request_id)s] [%(name)s] %(levelname)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


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
class BookingRules:
    """Scheduling policy applied to every availability decision."""

    max_bookings_per_day: int = _safe_int("MAX_BOOKINGS_PER_DAY", "3")
    buffer_hours: int = _safe_int("BUFFER_HOURS", "2")
    operating_start: int = _safe_int("OPERATING_HOURS_START", "8")
    operating_end: int = _safe_int("OPERATING_HOURS_END", "16")  # last bookable start

    @property
    def operating_hours(self) -> range:
        """Every bookable start hour, both ends inclusive."""
        return range(self.operating_start, self.operating_end + 1)


@dataclass(frozen=True)
class BusinessConfig:
    """Business-specific settings loaded from environment or defaults."""

    name: str = os.getenv("BUSINESS_NAME", "Carls Newton Science Shows")
    currency: str = os.getenv("BUSINESS_CURRENCY", "AED")
    timezone: str = os.getenv("BUSINESS_TIMEZONE", "Asia/Dubai")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    business: BusinessConfig = field(default_factory=BusinessConfig)
    booking_rules: BookingRules = field(default_factory=BookingRules)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_rules(rules: BookingRules) -> None:
    """Validate scheduling policy values are within acceptable ranges."""
    if rules.max_bookings_per_day < 1:
        raise ValueError(
            f"MAX_BOOKINGS_PER_DAY must be >= 1, got {rules.max_bookings_per_day}"
        )
    if rules.buffer_hours < 0:
        raise ValueError(f"BUFFER_HOURS must be >= 0, got {rules.buffer_hours}")
    if not 0 <= rules.operating_start <= 23:
        raise ValueError(
            f"OPERATING_HOURS_START must be between 0 and 23, got {rules.operating_start}"
        )
    if not 0 <= rules.operating_end <= 23:
        raise ValueError(
            f"OPERATING_HOURS_END must be between 0 and 23, got {rules.operating_end}"
        )
    if rules.operating_start > rules.operating_end:
        raise ValueError(
            "OPERATING_HOURS_START must not be after OPERATING_HOURS_END, "
            f"got {rules.operating_start} > {rules.operating_end}"
        )


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    _validate_rules(config.booking_rules)
    if not config.business.currency.strip():
        raise ValueError("BUSINESS_CURRENCY must not be empty")


def build_log_handler() -> logging.Handler:
    """Stream handler whose records always carry a request_id.

    The filter sits on the handler, so records from plain
    ``logging.getLogger`` loggers get the current request id too.
    """
    handler = logging.StreamHandler()
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATEFMT))
    return handler


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        handlers=[build_log_handler()],
    )
    logger.info("Configuration loaded for '%s'", config.business.name)
    return config


# Singleton instance
settings = load_config()
