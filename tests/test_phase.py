import datetime

import pytest

from celestialclock.models import MoonPhase
from celestialclock.phase import (
    KNOWN_NEW_MOON,
    LUNAR_MONTH,
    classify_fraction,
    compute_phase,
)

UTC = datetime.timezone.utc


def test_reference_new_moon_is_new_with_zero_age():
    state = compute_phase(KNOWN_NEW_MOON)
    assert state.phase is MoonPhase.NEW_MOON
    assert state.age == pytest.approx(0.0, abs=1e-9)
    assert state.fraction == pytest.approx(0.0, abs=1e-9)


def test_half_cycle_is_full_moon():
    assert classify_fraction(0.50) is MoonPhase.FULL_MOON
    mid = KNOWN_NEW_MOON + datetime.timedelta(days=LUNAR_MONTH / 2)
    assert compute_phase(mid).phase is MoonPhase.FULL_MOON


@pytest.mark.parametrize(
    "fraction, expected",
    [
        (0.0, MoonPhase.NEW_MOON),
        (0.0299, MoonPhase.NEW_MOON),
        (0.03, MoonPhase.WAXING_CRESCENT),
        (0.23, MoonPhase.FIRST_QUARTER),
        (0.27, MoonPhase.WAXING_GIBBOUS),
        (0.48, MoonPhase.FULL_MOON),
        (0.52, MoonPhase.WANING_GIBBOUS),
        (0.73, MoonPhase.THIRD_QUARTER),
        (0.77, MoonPhase.WANING_CRESCENT),
        (0.9699, MoonPhase.WANING_CRESCENT),
        (0.97, MoonPhase.NEW_MOON),
        (0.9999, MoonPhase.NEW_MOON),
    ],
)
def test_phase_band_boundaries(fraction, expected):
    assert classify_fraction(fraction) is expected


def test_instant_before_epoch_has_non_negative_age():
    state = compute_phase(datetime.datetime(1999, 12, 25, tzinfo=UTC))
    assert 0.0 <= state.age < LUNAR_MONTH
    assert 0.0 <= state.fraction < 1.0
    # 12.76 days before the reference new moon → about 16.8 days into the cycle
    assert state.age == pytest.approx(LUNAR_MONTH - 12.7597, abs=1e-3)
    assert state.phase is MoonPhase.WANING_GIBBOUS


def test_fraction_stays_in_unit_interval_across_centuries():
    start = datetime.datetime(1900, 1, 1, tzinfo=UTC)
    for step in range(0, 200 * 365, 37):
        state = compute_phase(start + datetime.timedelta(days=step, hours=step % 24))
        assert 0.0 <= state.fraction < 1.0
        assert 0.0 <= state.age < LUNAR_MONTH


def test_phase_repeats_after_one_lunar_month():
    t = datetime.datetime(2024, 3, 1, 12, 0, tzinfo=UTC)
    later = t + datetime.timedelta(days=LUNAR_MONTH)
    a, b = compute_phase(t), compute_phase(later)
    assert a.phase is b.phase
    assert a.fraction == pytest.approx(b.fraction, abs=1e-6)


def test_naive_instant_is_treated_as_utc():
    naive = datetime.datetime(2024, 3, 1, 12, 0)
    assert compute_phase(naive) == compute_phase(naive.replace(tzinfo=UTC))
