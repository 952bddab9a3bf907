import datetime
import random

import pytest
from conftest import FakeProvider

from celestialclock.alarm import AlarmError, AlarmScheduler, MemoryAlarmStore
from celestialclock.clock import CelestialClock, to_instant
from celestialclock.facts import FactPicker
from celestialclock.models import AlarmStatus, Body, ObserverContext, SkyState

UTC = datetime.timezone.utc
NOW = datetime.datetime(2024, 6, 15, 3, 0, 0, 250000, tzinfo=UTC)


def _clock(provider, audio):
    scheduler = AlarmScheduler(provider, MemoryAlarmStore(), audio)
    return CelestialClock(provider, scheduler, FactPicker(rng=random.Random(0)))


@pytest.fixture
def context(london):
    return ObserverContext(coordinate=london, tz_name="UTC")


def test_to_instant_drops_microseconds_and_adds_utc():
    assert to_instant(datetime.datetime(2024, 1, 1, 1, 2, 3, 999)) == datetime.datetime(
        2024, 1, 1, 1, 2, 3, tzinfo=UTC
    )


def test_tick_without_location_only_advances_phase(provider, audio):
    clock = _clock(provider, audio)
    clock.tick(NOW)
    assert clock.phase is not None
    assert clock.snapshot is None
    assert clock.frame() is None
    assert provider.calls == []


def test_tick_recomputes_snapshot_and_sky_state(provider, audio, context):
    clock = _clock(provider, audio)
    clock.set_location(context)
    clock.tick(NOW)

    assert clock.now == NOW.replace(microsecond=0)
    assert clock.snapshot.sunrise == datetime.datetime(2024, 6, 15, 6, tzinfo=UTC)
    assert clock.sky_state is SkyState.DAY  # 0.5 rad ≈ 28.6°


def test_same_instant_and_location_is_not_recomputed(provider, audio, context):
    clock = _clock(provider, audio)
    clock.set_location(context)
    clock.tick(NOW)
    clock.tick(NOW.replace(microsecond=900000))
    assert len(provider.calls) == 1
    clock.tick(NOW + datetime.timedelta(seconds=1))
    assert len(provider.calls) == 2


def test_setting_location_after_first_tick_recomputes(provider, audio, context):
    clock = _clock(provider, audio)
    clock.tick(NOW)
    clock.set_location(context)
    assert clock.snapshot is not None


def test_alarm_runs_from_tick(provider, audio, context):
    clock = _clock(provider, audio)
    clock.set_location(context)
    clock.tick(NOW)
    assert clock.arm_alarm().status is AlarmStatus.ARMED

    state = clock.tick(datetime.datetime(2024, 6, 15, 6, 0, 0, tzinfo=UTC))
    assert state.status is AlarmStatus.RINGING
    assert audio.events == ["start"]

    state = clock.dismiss_alarm()
    assert state.status is AlarmStatus.ARMED
    assert state.target == datetime.datetime(2024, 6, 16, 6, tzinfo=UTC)


def test_alarm_wall_clock_follows_location_timezone(provider, audio, london):
    clock = _clock(provider, audio)
    clock.set_location(ObserverContext(coordinate=london, tz_name="Europe/London"))
    clock.tick(NOW)
    clock.arm_alarm()
    # 06:00 UTC is 07:00 BST; the tick is converted before the wall-clock check
    state = clock.tick(datetime.datetime(2024, 6, 15, 6, 0, 0, tzinfo=UTC))
    assert state.status is AlarmStatus.RINGING
    assert clock.local_time(clock.now).hour == 7


def test_arm_before_location_is_a_no_op(provider, audio):
    clock = _clock(provider, audio)
    clock.tick(NOW)
    assert clock.arm_alarm().status is AlarmStatus.UNSET


def test_dismiss_before_location_raises(provider, audio):
    clock = _clock(provider, audio)
    with pytest.raises(AlarmError):
        clock.dismiss_alarm()


def test_click_body_pins_fact_at_body_placement(provider, audio, context):
    clock = _clock(provider, audio)
    clock.set_location(context)
    clock.tick(NOW)

    fact = clock.click_body(Body.SUN)
    placement = clock.placements()[Body.SUN]
    assert fact.angle_degrees == placement.angle_degrees
    assert clock.frame().fact == fact

    clock.tick(NOW + datetime.timedelta(seconds=5))
    assert clock.active_fact() is None
    assert clock.frame().fact is None


def test_visibility_and_daylight(audio, context):
    below = FakeProvider(sun_altitude=-0.01, moon_altitude=-0.3)
    clock = _clock(below, audio)
    clock.set_location(context)
    clock.tick(NOW)

    assert not clock.is_above_horizon(Body.SUN)
    assert not clock.is_above_horizon(Body.MOON)
    # -0.01 rad is still above the moon-dimming threshold
    assert clock.is_day
    frame = clock.frame()
    assert frame.sky_state is SkyState.TWILIGHT
    assert not frame.sun_visible


def test_frame_formats_local_time(provider, audio, london):
    clock = _clock(provider, audio)
    clock.set_location(ObserverContext(coordinate=london, tz_name="Europe/London"))
    clock.tick(datetime.datetime(2024, 6, 15, 12, 30, tzinfo=UTC))
    frame = clock.frame()
    assert frame.time_text == "13:30"
    assert frame.date_text == "Saturday, June 15, 2024"


def test_view_intents_keep_scale_clamped(provider, audio):
    clock = _clock(provider, audio)
    for _ in range(20):
        clock.zoom_wheel(-4)
    assert clock.view.scale == 4.0
    clock.zoom_pinch(0.01)
    assert clock.view.scale == 1.0
    clock.pan(10.0, -5.0)
    assert (clock.view.x_offset, clock.view.y_offset) == (10.0, -5.0)
    assert clock.reset_view().scale == 1.0
