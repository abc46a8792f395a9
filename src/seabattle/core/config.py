from __future__ import annotations

from typing import Final

from decouple import config


def _optional_int(name: str) -> int | None:
    """Return env var as int, or None if unset/blank."""
    value = config(name, default="", cast=str).strip()
    return int(value) if value else None


ENVIRONMENT: Final[str] = config("ENVIRONMENT", default="production")
DEBUG: Final[bool] = ENVIRONMENT != "production"

APP_VERSION: Final[str] = config("APP_VERSION", default="dev")

LOG_LEVEL: Final[str] = config("LOG_LEVEL", default="INFO").upper()

# --- Placement ---
PLACEMENT_MAX_ATTEMPTS: Final[int] = config(
    "PLACEMENT_MAX_ATTEMPTS", default=1000, cast=int
)
PLACEMENT_FLEET_RETRIES: Final[int] = config(
    "PLACEMENT_FLEET_RETRIES", default=10, cast=int
)

# --- Computer opponent ---
HUNT_MAX_ATTEMPTS: Final[int] = config("HUNT_MAX_ATTEMPTS", default=1000, cast=int)

# --- Sessions ---
MAX_SESSIONS: Final[int] = config("MAX_SESSIONS", default=1000, cast=int)
STATUS_LOG_LENGTH: Final[int] = config("STATUS_LOG_LENGTH", default=5, cast=int)

# Unset means every session draws from a fresh, unseeded generator.
RANDOM_SEED: Final[int | None] = _optional_int("RANDOM_SEED")
