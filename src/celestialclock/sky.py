"""Sky-state classification from the Sun's altitude, used for theming."""

import math

from celestialclock.models import SkyState

DAY_THRESHOLD_DEG = 5.0
NIGHT_THRESHOLD_DEG = -5.0

# Background gradient stops (top-left → bottom-right) per state
SKY_GRADIENTS: dict[SkyState, tuple[str, ...]] = {
    SkyState.DAY: ("#0ea5e9", "#1d4ed8"),
    SkyState.TWILIGHT: ("#a5b4fc", "#fb923c", "#ef4444"),
    SkyState.NIGHT: ("#111827", "#000000"),
}


def classify_sky_degrees(alt_deg: float) -> SkyState:
    """Day above 5°, twilight in (-5°, 5°], night otherwise."""
    if alt_deg > DAY_THRESHOLD_DEG:
        return SkyState.DAY
    if alt_deg > NIGHT_THRESHOLD_DEG:
        return SkyState.TWILIGHT
    return SkyState.NIGHT


def classify_sky(sun_altitude: float) -> SkyState:
    """Classify from the Sun's altitude in radians.

    No hysteresis: a Sun sitting on a threshold may alternate between states
    on successive reads.
    """
    return classify_sky_degrees(math.degrees(sun_altitude))
