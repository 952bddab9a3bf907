"""Runtime settings from the environment (and a local .env file)."""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from celestialclock.ephemeris import DEFAULT_EPHEMERIS, DEFAULT_RESOURCES_DIR
from celestialclock.location import DEFAULT_LOCATION
from celestialclock.models import GeoCoordinate

ENV_PREFIX = "CELESTIALCLOCK_"
DEFAULT_ALARM_STORE = Path.home() / ".config" / "celestialclock" / "alarm.json"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass(frozen=True)
class Settings:
    default_location: GeoCoordinate = DEFAULT_LOCATION
    resources_dir: Path = DEFAULT_RESOURCES_DIR  # Where the ephemeris kernel lives
    ephemeris_file: str = DEFAULT_EPHEMERIS
    alarm_store_path: Path = field(default=DEFAULT_ALARM_STORE)
    log_level: str = "info"
    lang: str | None = None  # Forces the UI language; browser language otherwise


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from e


def _path(env: Mapping[str, str], name: str, default: Path) -> Path:
    raw = env.get(ENV_PREFIX + name)
    if not raw:
        return default
    return Path(raw).expanduser()


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from CELESTIALCLOCK_* variables.

    Args:
        env: Variables to read. None loads `.env` and reads os.environ.

    Returns:
        Settings, with defaults for anything unset.

    Raises:
        ValueError: A numeric variable does not parse, or the default
            location is out of range.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    default_location = GeoCoordinate(
        latitude=_float(env, "DEFAULT_LAT", DEFAULT_LOCATION.latitude),
        longitude=_float(env, "DEFAULT_LON", DEFAULT_LOCATION.longitude),
    )
    return Settings(
        default_location=default_location,
        resources_dir=_path(env, "RESOURCES_DIR", DEFAULT_RESOURCES_DIR),
        ephemeris_file=env.get(ENV_PREFIX + "EPHEMERIS") or DEFAULT_EPHEMERIS,
        alarm_store_path=_path(env, "ALARM_STORE", DEFAULT_ALARM_STORE),
        log_level=(env.get(ENV_PREFIX + "LOG_LEVEL") or "info").lower(),
        lang=env.get(ENV_PREFIX + "LANG") or None,
    )


def configure_logging(level: str | None) -> None:
    if not level:
        return
    logging.basicConfig(
        level=_LEVELS.get(level.lower(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
