"""SVG moon-phase glyphs, shared by the dial and the phase panel."""

from celestialclock.models import MoonPhase

_LIT = "#f1f5f9"
_DARK = "#334155"


def moon_phase_path(
    phase: MoonPhase, cx: float = 24, cy: float = 24, r: float = 22
) -> tuple[str, str, str | None]:
    """Lit-area path for a phase as (d, fill, fill-rule).

    Crescents and gibbous phases are drawn from two arcs sharing the disk's
    vertical diameter; the inner arc's x-radius sets how thick the light is.
    """
    top, bottom = f"{cx},{cy - r}", f"{cx},{cy + r}"
    disk = f"M {cx - r},{cy} a {r},{r} 0 1,0 {2 * r},0 a {r},{r} 0 1,0 -{2 * r},0"
    right_half = f"M{top} V{cy + r} A{r},{r} 0 0 1 {top}z"
    left_half = f"M{top} V{cy + r} A{r},{r} 0 0 0 {top}z"

    if phase is MoonPhase.NEW_MOON:
        return disk, _DARK, None
    if phase is MoonPhase.FULL_MOON:
        return disk, _LIT, None
    if phase is MoonPhase.FIRST_QUARTER:
        return right_half, _LIT, None
    if phase is MoonPhase.THIRD_QUARTER:
        return left_half, _LIT, None
    if phase is MoonPhase.WAXING_CRESCENT:
        return f"M{top} A{r / 1.5},{r} 0 0 0 {bottom} A{r},{r} 0 0 1 {top}z", _LIT, None
    if phase is MoonPhase.WANING_CRESCENT:
        return f"M{top} A{r / 1.5},{r} 0 0 1 {bottom} A{r},{r} 0 0 0 {top}z", _LIT, None
    if phase is MoonPhase.WAXING_GIBBOUS:
        inner = f"M{top} A{r / 2},{r} 0 0 0 {bottom} A{r},{r} 0 0 1 {top}z"
        return f"{right_half} {inner}", _LIT, "evenodd"
    # WANING_GIBBOUS
    inner = f"M{top} A{r / 2},{r} 0 0 1 {bottom} A{r},{r} 0 0 0 {top}z"
    return f"{left_half} {inner}", _LIT, "evenodd"


def moon_icon_group(
    phase: MoonPhase, cx: float, cy: float, r: float, opacity: float = 1.0
) -> str:
    """`<g>` with the dark disk and the lit area, centred on (cx, cy)."""
    d, fill, fill_rule = moon_phase_path(phase, cx, cy, r)
    bg_fill = "transparent" if phase is MoonPhase.NEW_MOON else _DARK
    rule = f' fill-rule="{fill_rule}"' if fill_rule else ""
    return (
        f'<g class="moon" opacity="{opacity:.2f}">'
        f'<circle cx="{cx}" cy="{cy}" r="{r}" fill="{bg_fill}"/>'
        f'<path d="{d}" fill="{fill}"{rule}/>'
        f"</g>"
    )


def render_moon_icon(phase: MoonPhase, size: int = 64) -> str:
    return (
        f'<svg width="{size}" height="{size}" viewBox="0 0 48 48" fill="none"'
        f' xmlns="http://www.w3.org/2000/svg">'
        f"{moon_icon_group(phase, 24, 24, 22)}"
        f"</svg>"
    )
