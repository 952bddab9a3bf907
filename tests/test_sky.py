import math

import pytest

from celestialclock.models import SkyState
from celestialclock.sky import SKY_GRADIENTS, classify_sky, classify_sky_degrees


@pytest.mark.parametrize(
    "degrees, expected",
    [
        (45.0, SkyState.DAY),
        (5.0001, SkyState.DAY),
        (5.0, SkyState.TWILIGHT),
        (0.0, SkyState.TWILIGHT),
        (-4.9999, SkyState.TWILIGHT),
        (-5.0, SkyState.NIGHT),
        (-30.0, SkyState.NIGHT),
    ],
)
def test_classify_sky_degree_boundaries(degrees, expected):
    assert classify_sky_degrees(degrees) is expected


@pytest.mark.parametrize(
    "degrees, expected",
    [(20.0, SkyState.DAY), (1.0, SkyState.TWILIGHT), (-12.0, SkyState.NIGHT)],
)
def test_classify_sky_takes_radians(degrees, expected):
    assert classify_sky(math.radians(degrees)) is expected


def test_every_state_has_a_gradient():
    assert set(SKY_GRADIENTS) == set(SkyState)
