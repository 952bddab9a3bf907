import datetime
import math

import pytest

from celestialclock.ephemeris import (
    EphemerisError,
    SkyfieldPositionProvider,
    local_day_bounds,
    parallactic_angle,
    south_based_azimuth,
)
from celestialclock.models import GeoCoordinate

UTC = datetime.timezone.utc


@pytest.mark.parametrize(
    "north_based, expected",
    [
        (math.pi, 0.0),  # due south
        (math.pi / 2, -math.pi / 2),  # east is negative
        (3 * math.pi / 2, math.pi / 2),  # west is positive
    ],
)
def test_south_based_azimuth(north_based, expected):
    assert south_based_azimuth(north_based) == pytest.approx(expected)


def test_parallactic_angle_is_zero_on_the_meridian():
    assert parallactic_angle(0.0, 0.0, math.radians(51.5)) == pytest.approx(0.0)


def test_parallactic_angle_sign_follows_hour_angle():
    lat = math.radians(40.0)
    assert parallactic_angle(0.5, 0.1, lat) > 0
    assert parallactic_angle(-0.5, 0.1, lat) < 0


def test_local_day_bounds_on_a_short_dst_day():
    start, end = local_day_bounds(
        datetime.datetime(2024, 3, 31, 12, tzinfo=UTC), "Europe/London"
    )
    assert start == datetime.datetime(2024, 3, 31, 0, tzinfo=UTC)
    assert end == datetime.datetime(2024, 3, 31, 23, tzinfo=UTC)


def test_local_day_bounds_uses_local_date():
    # 20:00 UTC is already the next day in Seoul
    start, _ = local_day_bounds(
        datetime.datetime(2024, 6, 15, 20, tzinfo=UTC), "Asia/Seoul"
    )
    assert start == datetime.datetime(2024, 6, 15, 15, tzinfo=UTC)


def test_missing_kernel_raises_ephemeris_error(tmp_path, monkeypatch):
    provider = SkyfieldPositionProvider(tmp_path, ephemeris_file="missing.bsp")

    def refuse(*args, **kwargs):
        raise OSError("offline")

    monkeypatch.setattr(provider, "_loader", refuse)
    with pytest.raises(EphemerisError, match="missing.bsp"):
        provider.snapshot(
            datetime.datetime(2024, 6, 15, tzinfo=UTC), GeoCoordinate(0.0, 0.0)
        )


@pytest.fixture(scope="module")
def skyfield_provider():
    return SkyfieldPositionProvider()


@pytest.mark.integration
def test_london_midsummer_snapshot(skyfield_provider):
    snap = skyfield_provider.snapshot(
        datetime.datetime(2024, 6, 15, 12, tzinfo=UTC), GeoCoordinate(51.5074, -0.1278)
    )
    assert snap.sunrise.hour == 3 and 40 <= snap.sunrise.minute <= 46
    assert snap.sunset.hour == 20
    assert abs(snap.solar_noon - datetime.datetime(2024, 6, 15, 12, 1, tzinfo=UTC)) < (
        datetime.timedelta(minutes=3)
    )
    assert math.degrees(snap.sun_position.altitude) > 55
    # A minute before transit the Sun is almost due south
    assert abs(snap.sun_position.azimuth) < math.radians(5)
    assert 0.0 <= snap.moon_illumination <= 1.0


@pytest.mark.integration
def test_polar_day_has_no_sunrise(skyfield_provider):
    snap = skyfield_provider.snapshot(
        datetime.datetime(2024, 6, 21, 12, tzinfo=UTC), GeoCoordinate(69.65, 18.96)
    )
    assert snap.sunrise is None
    assert snap.sunset is None
    assert snap.sun_position.altitude > 0
