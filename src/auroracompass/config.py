"""Settings from the environment (.env supported) and logging setup."""

import logging
import math
import os
from collections.abc import Mapping
from dataclasses import dataclass

from dotenv import load_dotenv

from auroracompass.geocode import DEFAULT_USER_AGENT, NOMINATIM_REVERSE_URL
from auroracompass.geometry import DEFAULT_AURORA_ALTITUDE_M


class ConfigError(Exception):
    """Invalid configuration value."""


@dataclass(frozen=True)
class Settings:
    """Tunables for one app instance."""

    aurora_altitude_m: float = DEFAULT_AURORA_ALTITUDE_M
    max_locations: int = 15  # Length of the diverse top list
    min_probability: float = 10.0  # Threshold for the top list
    visibility_threshold: float = 50.0  # Threshold for the equatorward edge
    geocode_batch: int = 5  # New reverse lookups per refresh
    nominatim_url: str = NOMINATIM_REVERSE_URL
    nominatim_user_agent: str = DEFAULT_USER_AGENT
    log_level: str = "WARNING"


def _number(env: Mapping[str, str], name: str, default, cast):
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a {cast.__name__}, got {raw!r}") from exc
    if not math.isfinite(value):
        raise ConfigError(f"{name} must be a finite number, got {raw!r}")
    if value < 0:
        raise ConfigError(f"{name} must not be negative, got {raw!r}")
    return value


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from environment variables.

    Args:
        env: Variables to read. Defaults to os.environ after loading .env.

    Returns:
        Settings with defaults for anything unset.

    Raises:
        ConfigError: When a value cannot be parsed or is out of range.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    min_probability = _number(env, "AURORA_MIN_PROBABILITY", 10.0, float)
    threshold = _number(env, "AURORA_VISIBILITY_THRESHOLD", 50.0, float)
    for name, value in (
        ("AURORA_MIN_PROBABILITY", min_probability),
        ("AURORA_VISIBILITY_THRESHOLD", threshold),
    ):
        if value > 100:
            raise ConfigError(f"{name} must be at most 100, got {value}")

    log_level = env.get("AURORA_LOG_LEVEL", "WARNING").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"AURORA_LOG_LEVEL is not a logging level: {log_level!r}")

    return Settings(
        aurora_altitude_m=_number(
            env, "AURORA_ALTITUDE_M", DEFAULT_AURORA_ALTITUDE_M, float
        ),
        max_locations=_number(env, "AURORA_MAX_LOCATIONS", 15, int),
        min_probability=min_probability,
        visibility_threshold=threshold,
        geocode_batch=_number(env, "AURORA_GEOCODE_BATCH", 5, int),
        nominatim_url=env.get("NOMINATIM_URL") or NOMINATIM_REVERSE_URL,
        nominatim_user_agent=env.get("NOMINATIM_USER_AGENT") or DEFAULT_USER_AGENT,
        log_level=log_level,
    )


def configure_logging(level: str | int = "WARNING") -> None:
    """Attach a console handler to the package logger. Safe to call twice."""
    logger = logging.getLogger("auroracompass")
    logger.setLevel(level)
    if not any(getattr(h, "_auroracompass", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s [%(levelname)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        handler._auroracompass = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
