"""Dial geometry: altitude/azimuth to dial placement, and the zoom/pan view transform."""

import math

from celestialclock.models import DialPlacement, ViewTransform

MIN_SCALE = 1.0
MAX_SCALE = 4.0
WHEEL_ZOOM_FACTOR = 0.05


def project(altitude: float, azimuth: float) -> DialPlacement:
    """Convert horizontal coordinates into a dial angle and radial offset.

    The offset is linear in sin(altitude), not in the angle itself: zenith maps
    to 0 %, the horizon to 50 %, nadir to 100 %.

    Args:
        altitude: Radians above the horizon.
        azimuth: Radians from south, positive toward west.

    Returns:
        DialPlacement. Azimuth 0 lands on screen angle 180.
    """
    angle = math.degrees(azimuth) + 180.0
    offset = (1.0 - math.sin(altitude)) * 50.0
    return DialPlacement(
        angle_degrees=angle,
        radial_offset_percent=max(0.0, min(100.0, offset)),
    )


def polar_to_screen(
    angle_degrees: float,
    distance: float,
    center: tuple[float, float] = (0.0, 0.0),
) -> tuple[float, float]:
    """Screen point at `distance` from `center` along `angle_degrees`.

    Angle 0 points up and grows clockwise; screen y grows downward.
    """
    theta = math.radians(angle_degrees)
    cx, cy = center
    return cx + distance * math.sin(theta), cy - distance * math.cos(theta)


def dial_point(
    placement: DialPlacement,
    radius: float,
    center: tuple[float, float] = (0.0, 0.0),
) -> tuple[float, float]:
    """Screen point for a body: zenith at the centre, nadir on the rim."""
    distance = radius * placement.radial_offset_percent / 100.0
    return polar_to_screen(placement.angle_degrees, distance, center)


def _clamp_scale(scale: float) -> float:
    return max(MIN_SCALE, min(MAX_SCALE, scale))


def zoom_by_wheel(view: ViewTransform, delta_y: float) -> ViewTransform:
    """Wheel zoom: scrolling up (negative delta) zooms in, proportional to scale."""
    scale = view.scale - delta_y * WHEEL_ZOOM_FACTOR * view.scale
    return ViewTransform(_clamp_scale(scale), view.x_offset, view.y_offset)


def zoom_by_pinch(view: ViewTransform, ratio: float) -> ViewTransform:
    """Pinch zoom: ratio is current finger distance over the initial distance."""
    return ViewTransform(_clamp_scale(view.scale * ratio), view.x_offset, view.y_offset)


def pan_to(view: ViewTransform, x_offset: float, y_offset: float) -> ViewTransform:
    return ViewTransform(_clamp_scale(view.scale), x_offset, y_offset)


def reset_view() -> ViewTransform:
    return ViewTransform()


def is_zoomed(view: ViewTransform) -> bool:
    return view.scale != 1.0 or view.x_offset != 0.0 or view.y_offset != 0.0
