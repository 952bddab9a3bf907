"""Side-panel HTML: moon phase card, rise/set briefing, alarm status."""

import html
import math
from datetime import datetime

from pytz import timezone as pytz_timezone

from celestialclock.i18n import t
from celestialclock.models import CelestialSnapshot, MoonPhaseState
from celestialclock.renderers.moon_icon import render_moon_icon


def format_clock_time(dt: datetime, tz_name: str) -> str:
    return dt.astimezone(pytz_timezone(tz_name)).strftime("%H:%M")


def briefing_rows(
    snapshot: CelestialSnapshot, tz_name: str
) -> list[tuple[str, str | None]]:
    """(i18n key, "HH:MM" or None) rows. Moon rows are left out when absent that day."""
    rows: list[tuple[str, str | None]] = [
        ("sunrise", format_clock_time(snapshot.sunrise, tz_name) if snapshot.sunrise else None),
        ("sunset", format_clock_time(snapshot.sunset, tz_name) if snapshot.sunset else None),
    ]
    if snapshot.moonrise is not None:
        rows.append(("moonrise", format_clock_time(snapshot.moonrise, tz_name)))
    if snapshot.moonset is not None:
        rows.append(("moonset", format_clock_time(snapshot.moonset, tz_name)))
    return rows


def phase_caption(phase: MoonPhaseState, illumination: float | None, lang: str) -> str:
    """Illuminated percentage when known, otherwise the day of the cycle."""
    if illumination:
        return t("illuminated", lang).format(percent=f"{illumination * 100:.1f}")
    return t("cycle_day", lang).format(day=math.floor(phase.age))


def render_phase_card(phase: MoonPhaseState, illumination: float | None, lang: str) -> str:
    return (
        "<div class='panel phase-card'>"
        f"{render_moon_icon(phase.phase)}"
        "<div>"
        f"<h2>{html.escape(t(phase.phase.value, lang))}</h2>"
        f"<p>{html.escape(phase_caption(phase, illumination, lang))}</p>"
        "</div></div>"
    )


def render_briefing(
    snapshot: CelestialSnapshot, tz_name: str, lang: str, advisory: str | None = None
) -> str:
    items = "".join(
        f"<li><span>{html.escape(t(key, lang))}</span>"
        f"<span class='value'>{html.escape(value or t('none_today', lang))}</span></li>"
        for key, value in briefing_rows(snapshot, tz_name)
    )
    advisory_html = (
        f"<p class='advisory'>{html.escape(t('advisory_location', lang))}</p>"
        if advisory
        else ""
    )
    return (
        "<div class='panel briefing'>"
        f"<h3>{html.escape(t('briefing_title', lang))}</h3>"
        f"<ul>{items}</ul>{advisory_html}</div>"
    )
