"""
Centralized configuration with environment variable overrides.

Calendar policy (reference timezone, default capacity, occupying booking
statuses) and backend settings live here. Nothing is hardcoded in the
aggregation or view logic.
"""

import logging
import os
from dataclasses import dataclass, field
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from vendor_calendar.logging_context import configure_logging

load_dotenv()

logger = logging.getLogger(__name__)

VALID_BOOKING_STATUSES = frozenset(
    {"pending", "confirmed", "in_progress", "completed", "cancelled", "refunded"}
)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


def _safe_bool(env_var: str, default: str) -> bool:
    """Parse a boolean flag (true/false, yes/no, on/off, 1/0) from an env var."""
    raw = os.getenv(env_var, default).strip().lower()
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off", ""):
        return False
    raise ValueError(f"Invalid boolean for {env_var}: {raw!r}")


def _csv(env_var: str, default: str) -> tuple[str, ...]:
    """Split a comma-separated env var into lowercased, non-empty parts."""
    raw = os.getenv(env_var, default)
    return tuple(part.strip().lower() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class CalendarConfig:
    """Availability policy shared by every calendar."""

    timezone: str = os.getenv("CALENDAR_TIMEZONE", "Asia/Manila")
    default_capacity: int = _safe_int("DEFAULT_MAX_BOOKINGS_PER_DAY", "1")
    occupying_statuses: tuple[str, ...] = _csv(
        "CALENDAR_OCCUPYING_STATUSES", "confirmed,in_progress"
    )
    debounce_ms: int = _safe_int("CALENDAR_DEBOUNCE_MS", "150")
    alternative_date_limit: int = _safe_int("ALTERNATIVE_DATE_LIMIT", "3")


@dataclass(frozen=True)
class BackendConfig:
    """REST backend connection settings."""

    api_base_url: str = os.getenv("API_BASE_URL", "http://localhost:3001")
    timeout_seconds: float = _safe_float("API_TIMEOUT_SECONDS", "10.0")
    use_mock_data: bool = _safe_bool("USE_MOCK_DATA", "false")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    calendar: CalendarConfig = field(default_factory=CalendarConfig)
    backend: BackendConfig = field(default_factory=BackendConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    try:
        ZoneInfo(config.calendar.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(
            f"CALENDAR_TIMEZONE is not a known timezone: {config.calendar.timezone!r}"
        ) from None
    if config.calendar.default_capacity < 1:
        raise ValueError(
            "DEFAULT_MAX_BOOKINGS_PER_DAY must be >= 1, "
            f"got {config.calendar.default_capacity}"
        )
    if not config.calendar.occupying_statuses:
        raise ValueError("CALENDAR_OCCUPYING_STATUSES must name at least one status")
    unknown = [s for s in config.calendar.occupying_statuses if s not in VALID_BOOKING_STATUSES]
    if unknown:
        raise ValueError(
            f"CALENDAR_OCCUPYING_STATUSES contains unknown statuses: {unknown}"
        )
    if config.calendar.debounce_ms < 0:
        raise ValueError(
            f"CALENDAR_DEBOUNCE_MS must be >= 0, got {config.calendar.debounce_ms}"
        )
    if config.calendar.alternative_date_limit < 0:
        raise ValueError(
            "ALTERNATIVE_DATE_LIMIT must be >= 0, "
            f"got {config.calendar.alternative_date_limit}"
        )
    if config.backend.timeout_seconds <= 0:
        raise ValueError(
            f"API_TIMEOUT_SECONDS must be > 0, got {config.backend.timeout_seconds}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    configure_logging(getattr(logging, config.log_level.upper(), logging.INFO))
    logger.info(
        "Configuration loaded (timezone=%s, backend=%s)",
        config.calendar.timezone,
        "mock" if config.backend.use_mock_data else config.backend.api_base_url,
    )
    return config


# Singleton instance
settings = load_config()
