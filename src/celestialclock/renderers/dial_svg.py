"""SVG clock-dial renderer.

Produces a self-contained SVG string for embedding via st.markdown() or
st.components.v1.html(). Pixel coordinates, origin top-left:

  dial centre = (size/2, size/2), dial radius = 0.4 * size
  body distance from centre = radius * radial_offset_percent / 100
  (zenith at the centre, horizon on the dashed ring, nadir on the rim)
"""

from __future__ import annotations

import html

from celestialclock.models import DialFrame
from celestialclock.projection import dial_point, polar_to_screen
from celestialclock.renderers.moon_icon import moon_icon_group
from celestialclock.sky import SKY_GRADIENTS

_RING_COLOR = "#ffffff"
_SUN_COLOR = "#facc15"
_TEXT_COLOR = "#ffffff"


def _gradient_defs(colors: tuple[str, ...]) -> str:
    last = max(len(colors) - 1, 1)
    stops = "".join(
        f'<stop offset="{i / last * 100:.0f}%" stop-color="{c}"/>'
        for i, c in enumerate(colors)
    )
    return (
        f'<linearGradient id="sky-bg" x1="0" y1="0" x2="1" y2="1">{stops}</linearGradient>'
        f'<radialGradient id="sun-glow" cx="50%" cy="50%" r="50%">'
        f'<stop offset="0%" stop-color="{_SUN_COLOR}" stop-opacity="0.7"/>'
        f'<stop offset="100%" stop-color="{_SUN_COLOR}" stop-opacity="0"/>'
        f"</radialGradient>"
    )


def _body_opacity(visible: bool, dimmed: bool = False) -> float:
    """Bodies below the horizon are hidden; the Moon fades by day."""
    if not visible:
        return 0.0
    return 0.4 if dimmed else 1.0


def _fact_callout(frame: DialFrame, center: tuple[float, float], radius: float) -> str:
    fact = frame.fact
    if fact is None:
        return ""
    # Callout sits just beyond the body, along the same bearing
    distance = radius * fact.radial_offset_percent / 100.0 + radius * 0.18
    x, y = polar_to_screen(fact.angle_degrees, distance, center)
    width, height = radius * 0.9, radius * 0.32
    return (
        f'<foreignObject class="fact" x="{x - width / 2:.1f}" y="{y - height / 2:.1f}"'
        f' width="{width:.1f}" height="{height:.1f}">'
        f'<div xmlns="http://www.w3.org/1999/xhtml" style="background:rgba(0,0,0,0.3);'
        f"border-radius:8px;padding:6px;color:{_TEXT_COLOR};font-size:11px;"
        f'text-align:center;font-family:sans-serif;">'
        f"{html.escape(fact.text)}</div></foreignObject>"
    )


def render_dial_svg(frame: DialFrame, size: int = 500) -> str:
    """Return an SVG dial for one frame.

    The sky gradient follows the sky state. The Sun is a glowing disk, the
    Moon its phase glyph; each is hidden below the horizon. The zoom/pan view
    transform wraps everything except the background.

    Args:
        frame: Fully computed display state.
        size: Width and height in pixels.

    Returns:
        SVG markup string.
    """
    center = (size / 2, size / 2)
    radius = size * 0.4
    body_r = size * 0.045
    cx, cy = center

    sun_x, sun_y = dial_point(frame.sun, radius, center)
    moon_x, moon_y = dial_point(frame.moon, radius, center)

    sun_op = _body_opacity(frame.sun_visible)
    moon_op = _body_opacity(frame.moon_visible, dimmed=frame.is_day)

    view = frame.view
    # Scale about the dial centre, then pan
    transform = (
        f"translate({view.x_offset:.1f} {view.y_offset:.1f}) "
        f"translate({cx:.1f} {cy:.1f}) scale({view.scale:.3f}) "
        f"translate({-cx:.1f} {-cy:.1f})"
    )

    sun_svg = (
        f'<g class="sun" opacity="{sun_op:.2f}">'
        f'<circle cx="{sun_x:.1f}" cy="{sun_y:.1f}" r="{body_r * 2:.1f}" fill="url(#sun-glow)"/>'
        f'<circle cx="{sun_x:.1f}" cy="{sun_y:.1f}" r="{body_r:.1f}" fill="{_SUN_COLOR}"/>'
        f"</g>"
    )
    moon_svg = moon_icon_group(
        frame.phase, round(moon_x, 1), round(moon_y, 1), round(body_r, 1), moon_op
    )

    return f"""<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" viewBox="0 0 {size} {size}" class="dial sky-{frame.sky_state.value}">
  <defs>{_gradient_defs(SKY_GRADIENTS[frame.sky_state])}</defs>
  <rect x="0" y="0" width="{size}" height="{size}" rx="{size * 0.04:.0f}" fill="url(#sky-bg)"/>
  <rect x="0" y="0" width="{size}" height="{size}" fill="#000000" opacity="0.1"/>
  <g id="scene" transform="{transform}">
    <circle cx="{cx:.1f}" cy="{cy:.1f}" r="{radius:.1f}" fill="none" stroke="{_RING_COLOR}" stroke-opacity="0.2"/>
    <circle class="horizon" cx="{cx:.1f}" cy="{cy:.1f}" r="{radius / 2:.1f}" fill="none" stroke="{_RING_COLOR}" stroke-opacity="0.35" stroke-dasharray="4 6"/>
    {sun_svg}
    {moon_svg}
    <text x="{cx:.1f}" y="{cy + size * 0.02:.1f}" text-anchor="middle" fill="{_TEXT_COLOR}" fill-opacity="0.9" font-size="{size * 0.14:.0f}" font-weight="bold" font-family="sans-serif">{html.escape(frame.time_text)}</text>
    <text x="{cx:.1f}" y="{cy + size * 0.08:.1f}" text-anchor="middle" fill="{_TEXT_COLOR}" fill-opacity="0.7" font-size="{size * 0.032:.0f}" font-family="sans-serif">{html.escape(frame.date_text)}</text>
    {_fact_callout(frame, center, radius)}
  </g>
</svg>"""
