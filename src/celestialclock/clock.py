"""The clock's single owning context: recomputes on each tick and routes user intents."""

import logging
from datetime import datetime, timezone

from pytz import timezone as pytz_timezone

from celestialclock.alarm import AlarmError, AlarmScheduler
from celestialclock.ephemeris import PositionProvider
from celestialclock.facts import FactPicker
from celestialclock.models import (
    ActiveFact,
    AlarmState,
    Body,
    CelestialSnapshot,
    DialFrame,
    DialPlacement,
    MoonPhaseState,
    ObserverContext,
    SkyState,
    ViewTransform,
)
from celestialclock.phase import compute_phase
from celestialclock.projection import pan_to, project, reset_view, zoom_by_pinch, zoom_by_wheel
from celestialclock.sky import classify_sky

# Just under the horizon (about -1°): the Moon is drawn dimmed from here up
MOON_DIM_SUN_ALTITUDE = -0.017

log = logging.getLogger(__name__)


def to_instant(dt: datetime) -> datetime:
    """Normalise to a timezone-aware instant with second resolution."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.replace(microsecond=0)


class CelestialClock:
    """Owns every piece of clock state; one writer per field.

    `tick(now)` recomputes the snapshot and phase whenever the instant or
    the location changes, then runs the alarm check. Consumers read the
    latest values from the attributes.
    """

    def __init__(
        self,
        provider: PositionProvider,
        alarm: AlarmScheduler,
        facts: FactPicker | None = None,
    ) -> None:
        self._provider = provider
        self.alarm = alarm
        self.facts = facts or FactPicker()
        self.context: ObserverContext | None = None
        self.now: datetime | None = None
        self.snapshot: CelestialSnapshot | None = None
        self.phase: MoonPhaseState | None = None
        self.sky_state: SkyState | None = None
        self.view = ViewTransform()
        self._computed_for: tuple[datetime, ObserverContext | None] | None = None

    # --- inputs ---

    def set_location(self, context: ObserverContext) -> None:
        self.context = context
        if context.advisory:
            log.info("Using fallback location: %s", context.advisory)
        if self.now is not None:
            self._recompute()

    def tick(self, now: datetime) -> AlarmState:
        self.now = to_instant(now)
        self._recompute()
        return self.alarm.tick(self.local_time(self.now))

    def _recompute(self) -> None:
        key = (self.now, self.context)
        if key == self._computed_for:
            return
        if self.context is not None:
            self.snapshot = self._provider.snapshot(self.now, self.context.coordinate)
            self.sky_state = classify_sky(self.snapshot.sun_position.altitude)
        self.phase = compute_phase(self.now)
        self._computed_for = key

    def local_time(self, dt: datetime) -> datetime:
        """`dt` on the observer's wall clock (unchanged until a location is known)."""
        if self.context is None:
            return dt
        return dt.astimezone(pytz_timezone(self.context.tz_name))

    # --- derived display values ---

    def placements(self) -> dict[Body, DialPlacement]:
        if self.snapshot is None:
            return {}
        sun = self.snapshot.sun_position
        moon = self.snapshot.moon_position
        return {
            Body.SUN: project(sun.altitude, sun.azimuth),
            Body.MOON: project(moon.altitude, moon.azimuth),
        }

    def is_above_horizon(self, body: Body) -> bool:
        if self.snapshot is None:
            return False
        position = (
            self.snapshot.sun_position if body is Body.SUN else self.snapshot.moon_position
        )
        return position.altitude > 0

    @property
    def is_day(self) -> bool:
        return (
            self.snapshot is not None
            and self.snapshot.sun_position.altitude > MOON_DIM_SUN_ALTITUDE
        )

    def active_fact(self) -> ActiveFact | None:
        if self.now is None:
            return None
        return self.facts.active(self.now)

    def frame(self) -> DialFrame | None:
        """Everything the dial renderer needs, or None before the first snapshot."""
        placements = self.placements()
        if not placements or self.phase is None or self.sky_state is None:
            return None
        local = self.local_time(self.now)
        return DialFrame(
            sky_state=self.sky_state,
            sun=placements[Body.SUN],
            moon=placements[Body.MOON],
            sun_visible=self.is_above_horizon(Body.SUN),
            moon_visible=self.is_above_horizon(Body.MOON),
            is_day=self.is_day,
            phase=self.phase.phase,
            time_text=local.strftime("%H:%M"),
            date_text=local.strftime("%A, %B %d, %Y"),
            view=self.view,
            fact=self.active_fact(),
        )

    # --- intents ---

    def arm_alarm(self) -> AlarmState:
        if self.now is None or self.context is None:
            log.warning("Alarm not armed: no location yet")
            return self.alarm.state
        return self.alarm.arm(self.snapshot, self.now, self.context.coordinate)

    def clear_alarm(self) -> AlarmState:
        return self.alarm.clear()

    def dismiss_alarm(self) -> AlarmState:
        if self.now is None or self.context is None:
            raise AlarmError("Cannot re-arm alarm without a location")
        return self.alarm.dismiss(self.now, self.context.coordinate)

    def click_body(self, body: Body) -> ActiveFact | None:
        if self.now is None:
            return None
        return self.facts.pick(body, self.now, self.placements().get(body))

    def zoom_wheel(self, delta_y: float) -> ViewTransform:
        self.view = zoom_by_wheel(self.view, delta_y)
        return self.view

    def zoom_pinch(self, ratio: float) -> ViewTransform:
        self.view = zoom_by_pinch(self.view, ratio)
        return self.view

    def pan(self, x_offset: float, y_offset: float) -> ViewTransform:
        self.view = pan_to(self.view, x_offset, y_offset)
        return self.view

    def reset_view(self) -> ViewTransform:
        self.view = reset_view()
        return self.view
