"""Moon phase from the mean synodic month, counted from a reference new moon."""

import math
from datetime import datetime, timezone

from celestialclock.models import MoonPhase, MoonPhaseState

LUNAR_MONTH = 29.530588853  # Mean synodic month, days
KNOWN_NEW_MOON = datetime(2000, 1, 6, 18, 14, tzinfo=timezone.utc)

# Upper bounds (exclusive) of each phase band; anything from .97 wraps to new moon.
_PHASE_BANDS: tuple[tuple[float, MoonPhase], ...] = (
    (0.03, MoonPhase.NEW_MOON),
    (0.23, MoonPhase.WAXING_CRESCENT),
    (0.27, MoonPhase.FIRST_QUARTER),
    (0.48, MoonPhase.WAXING_GIBBOUS),
    (0.52, MoonPhase.FULL_MOON),
    (0.73, MoonPhase.WANING_GIBBOUS),
    (0.77, MoonPhase.THIRD_QUARTER),
    (0.97, MoonPhase.WANING_CRESCENT),
)


def days_since_known_new_moon(instant: datetime) -> float:
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return (instant - KNOWN_NEW_MOON).total_seconds() / 86400.0


def classify_fraction(fraction: float) -> MoonPhase:
    """Map a cycle fraction in [0, 1) to one of the eight named phases."""
    for upper, phase in _PHASE_BANDS:
        if fraction < upper:
            return phase
    return MoonPhase.NEW_MOON


def compute_phase(instant: datetime) -> MoonPhaseState:
    """Compute the lunar phase for an instant.

    Instants before the reference new moon are folded forward with a floored
    modulo, so the age is never negative.

    Args:
        instant: Point in time. Naive datetimes are treated as UTC.

    Returns:
        MoonPhaseState with phase, age in days and cycle fraction.
    """
    age = math.fmod(days_since_known_new_moon(instant), LUNAR_MONTH)
    if age < 0:
        age += LUNAR_MONTH
    fraction = age / LUNAR_MONTH
    # A tiny negative remainder plus LUNAR_MONTH can round up to exactly 1.0
    if fraction >= 1.0:
        age, fraction = 0.0, 0.0
    return MoonPhaseState(phase=classify_fraction(fraction), age=age, fraction=fraction)
