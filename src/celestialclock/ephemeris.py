"""Ephemeris layer: timezone lookup and skyfield sun/moon calculations."""

import logging
import math
from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache
from pathlib import Path
from typing import Protocol

from pytz import timezone as pytz_timezone, utc
from skyfield import almanac
from skyfield.api import Loader, wgs84
from timezonefinder import TimezoneFinder

from celestialclock.models import (
    BodyPosition,
    CelestialSnapshot,
    GeoCoordinate,
    MoonPosition,
)

_ROOT = Path(__file__).parent.parent.parent
DEFAULT_RESOURCES_DIR = _ROOT / "resources"
DEFAULT_EPHEMERIS = "de421.bsp"

log = logging.getLogger(__name__)


class EphemerisError(Exception):
    """Ephemeris kernel could not be loaded."""


class PositionProvider(Protocol):
    """Source of sun/moon positions and rise/set times for (instant, location)."""

    def snapshot(
        self, instant: datetime, coordinate: GeoCoordinate
    ) -> CelestialSnapshot: ...


@lru_cache(maxsize=1)
def _timezone_finder() -> TimezoneFinder:
    return TimezoneFinder()


@lru_cache(maxsize=256)
def timezone_name(coordinate: GeoCoordinate) -> str:
    """IANA timezone name at a coordinate, "UTC" where none is defined (open ocean)."""
    tz_str = _timezone_finder().timezone_at(
        lat=coordinate.latitude, lng=coordinate.longitude
    )
    if tz_str is None:
        log.info("No timezone at %s, using UTC", coordinate)
        return "UTC"
    return tz_str


def local_timezone(coordinate: GeoCoordinate):
    return pytz_timezone(timezone_name(coordinate))


def local_day_bounds(instant: datetime, tz_name: str) -> tuple[datetime, datetime]:
    """UTC start/end of the local calendar day containing `instant`."""
    tz = pytz_timezone(tz_name)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    local_date: date = instant.astimezone(tz).date()
    start = tz.localize(datetime.combine(local_date, time.min))
    end = tz.localize(datetime.combine(local_date + timedelta(days=1), time.min))
    return start.astimezone(utc), end.astimezone(utc)


def south_based_azimuth(azimuth_north: float) -> float:
    """Convert a north-based, eastward bearing to south-based, westward, in (-π, π]."""
    az = azimuth_north - math.pi
    return math.atan2(math.sin(az), math.cos(az))


def parallactic_angle(hour_angle: float, declination: float, latitude: float) -> float:
    """Orientation of a body's disk relative to the observer's vertical, radians."""
    return math.atan2(
        math.sin(hour_angle),
        math.tan(latitude) * math.cos(declination)
        - math.sin(declination) * math.cos(hour_angle),
    )


class SkyfieldPositionProvider:
    """PositionProvider backed by skyfield and a JPL development ephemeris.

    The kernel is loaded on first use from `resources_dir` (downloaded there
    by skyfield if missing).
    """

    def __init__(
        self,
        resources_dir: Path | None = None,
        ephemeris_file: str = DEFAULT_EPHEMERIS,
    ) -> None:
        self._loader = Loader(str(resources_dir or DEFAULT_RESOURCES_DIR))
        self._ephemeris_file = ephemeris_file
        self._eph = None
        self._ts = None

    def _load(self):
        if self._eph is None:
            try:
                self._eph = self._loader(self._ephemeris_file)
                self._ts = self._loader.timescale()
            except (OSError, ValueError) as e:
                raise EphemerisError(
                    f"Cannot load ephemeris {self._ephemeris_file}: {e}"
                ) from e
            log.info("Loaded ephemeris %s", self._ephemeris_file)
        return self._eph, self._ts

    def snapshot(
        self, instant: datetime, coordinate: GeoCoordinate
    ) -> CelestialSnapshot:
        """Compute the CelestialSnapshot for an instant at a coordinate.

        Rise/set/noon times are searched within the local calendar day of
        `instant` in the coordinate's timezone.

        Args:
            instant: Timezone-aware instant (naive is treated as UTC).
            coordinate: Observer latitude/longitude.

        Returns:
            CelestialSnapshot with angles in radians and UTC datetimes.

        Raises:
            EphemerisError: When the ephemeris kernel cannot be loaded.
        """
        eph, ts = self._load()
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)

        sun, moon = eph["sun"], eph["moon"]
        topos = wgs84.latlon(
            latitude_degrees=coordinate.latitude,
            longitude_degrees=coordinate.longitude,
        )
        observer = eph["earth"] + topos

        day_start, day_end = local_day_bounds(instant, timezone_name(coordinate))
        t0 = ts.from_datetime(day_start)
        t1 = ts.from_datetime(day_end)

        sunrise = _first_crossing(almanac.find_risings(observer, sun, t0, t1))
        sunset = _first_crossing(almanac.find_settings(observer, sun, t0, t1))
        moonrise = _first_crossing(almanac.find_risings(observer, moon, t0, t1))
        moonset = _first_crossing(almanac.find_settings(observer, moon, t0, t1))

        # Padded window: on 23-hour DST days the transit can sit just outside
        midday = day_start + (day_end - day_start) / 2
        transits = almanac.find_transits(
            observer,
            sun,
            ts.from_datetime(day_start - timedelta(hours=1)),
            ts.from_datetime(day_end + timedelta(hours=1)),
        )
        solar_noon = min(
            (tr.utc_datetime() for tr in transits),
            key=lambda dt: abs(dt - midday),
        )

        t = ts.from_datetime(instant)
        sun_app = observer.at(t).observe(sun).apparent()
        sun_alt, sun_az, _ = sun_app.altaz()

        moon_app = observer.at(t).observe(moon).apparent()
        moon_alt, moon_az, _ = moon_app.altaz()
        ha, dec, _ = moon_app.hadec()

        return CelestialSnapshot(
            sunrise=sunrise,
            sunset=sunset,
            solar_noon=solar_noon,
            moonrise=moonrise,
            moonset=moonset,
            moon_illumination=float(moon_app.fraction_illuminated(sun)),
            sun_position=BodyPosition(
                altitude=float(sun_alt.radians),
                azimuth=south_based_azimuth(float(sun_az.radians)),
            ),
            moon_position=MoonPosition(
                altitude=float(moon_alt.radians),
                azimuth=south_based_azimuth(float(moon_az.radians)),
                parallactic_angle=parallactic_angle(
                    float(ha.radians),
                    float(dec.radians),
                    math.radians(coordinate.latitude),
                ),
            ),
        )


def _first_crossing(result) -> datetime | None:
    """First event whose flag says the body really crossed the horizon."""
    times, flags = result
    for t, crossed in zip(times, flags):
        if crossed:
            return t.utc_datetime()
    return None
