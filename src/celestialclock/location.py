"""Observer location from browser geolocation, with a fixed fallback."""

import logging
from collections.abc import Callable

from celestialclock.ephemeris import timezone_name
from celestialclock.models import GeoCoordinate, ObserverContext

DEFAULT_LOCATION = GeoCoordinate(latitude=51.5074, longitude=-0.1278)  # London
LOCATION_ADVISORY = "Location access denied. Displaying generic data."

log = logging.getLogger(__name__)

LocationSource = Callable[[], GeoCoordinate]


class LocationError(Exception):
    """Location permission denied or position unavailable."""


def parse_geolocation(payload: dict | None) -> GeoCoordinate:
    """Turn a browser `navigator.geolocation` result into a GeoCoordinate.

    Accepts ``{"coords": {"latitude": .., "longitude": ..}}`` as produced by
    streamlit_js_eval's get_geolocation, or ``{"error": {...}}`` on failure.

    Raises:
        LocationError: On an error payload or missing/invalid coordinates.
    """
    if not payload:
        raise LocationError("No position returned")
    if "error" in payload:
        error = payload["error"]
        message = error.get("message") if isinstance(error, dict) else error
        raise LocationError(f"Geolocation failed: {message}")
    try:
        coords = payload["coords"]
        return GeoCoordinate(
            latitude=float(coords["latitude"]),
            longitude=float(coords["longitude"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise LocationError(f"Malformed geolocation payload: {payload!r}") from e


def resolve_location(
    source: LocationSource,
    default: GeoCoordinate = DEFAULT_LOCATION,
    tz_lookup: Callable[[GeoCoordinate], str] = timezone_name,
) -> ObserverContext:
    """Acquire the observer's location once, substituting `default` on failure.

    Failure is not fatal: the returned context carries an advisory for the
    user and computation carries on with the default coordinate.

    Args:
        source: One-shot location capability.
        default: Coordinate used when `source` fails.
        tz_lookup: Maps a coordinate to an IANA timezone name.

    Returns:
        ObserverContext with coordinate, timezone name and optional advisory.
    """
    advisory = None
    try:
        coordinate = source()
    except LocationError as e:
        log.warning("Geolocation error: %s; falling back to %s", e, default)
        coordinate = default
        advisory = LOCATION_ADVISORY
    return ObserverContext(
        coordinate=coordinate, tz_name=tz_lookup(coordinate), advisory=advisory
    )
