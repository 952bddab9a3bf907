import datetime

import pytest

from celestialclock.models import BodyPosition, CelestialSnapshot, GeoCoordinate, MoonPosition

UTC = datetime.timezone.utc


def pytest_addoption(parser):
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run tests marked as integration",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--integration"):
        return

    for item in items:
        if "integration" in item.keywords:
            item.add_marker(
                pytest.mark.skip(
                    reason="need --integration option to run integration tests"
                )
            )


class FakeProvider:
    """Sunrise at 06:00 UTC on the UTC date of the requested instant."""

    def __init__(self, sunrise_hour=6, sun_altitude=0.5, moon_altitude=0.2, sunrise=True):
        self.sunrise_hour = sunrise_hour
        self.sun_altitude = sun_altitude
        self.moon_altitude = moon_altitude
        self.has_sunrise = sunrise
        self.calls = []

    def snapshot(self, instant, coordinate):
        self.calls.append((instant, coordinate))
        day = datetime.datetime.combine(instant.date(), datetime.time.min, tzinfo=UTC)
        sunrise = day + datetime.timedelta(hours=self.sunrise_hour)
        return CelestialSnapshot(
            sunrise=sunrise if self.has_sunrise else None,
            sunset=day + datetime.timedelta(hours=18),
            solar_noon=day + datetime.timedelta(hours=12),
            moonrise=None,
            moonset=day + datetime.timedelta(hours=9, minutes=30),
            moon_illumination=0.42,
            sun_position=BodyPosition(altitude=self.sun_altitude, azimuth=0.0),
            moon_position=MoonPosition(
                altitude=self.moon_altitude, azimuth=1.0, parallactic_angle=0.1
            ),
        )


class FakeAudio:
    def __init__(self):
        self.events = []

    def start(self):
        self.events.append("start")

    def stop(self):
        self.events.append("stop")


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def audio():
    return FakeAudio()


@pytest.fixture
def london():
    return GeoCoordinate(latitude=51.5074, longitude=-0.1278)
