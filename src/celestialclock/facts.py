"""Random Sun/Moon facts shown next to a clicked body for a few seconds."""

import random
from datetime import datetime, timedelta

from celestialclock.models import ActiveFact, Body, DialPlacement

FACT_DURATION = timedelta(seconds=4)

CELESTIAL_FACTS: dict[Body, tuple[str, ...]] = {
    Body.SUN: (
        "The Sun accounts for 99.86% of the mass in the solar system.",
        "Sunlight takes about 8 minutes and 20 seconds to reach Earth.",
        "The Sun's surface temperature is around 5,500 degrees Celsius.",
        "The Sun is a middle-aged star, about 4.6 billion years old.",
    ),
    Body.MOON: (
        "The Moon is Earth's only natural satellite.",
        "The Moon is slowly moving away from Earth at a rate of about 3.8 cm per year.",
        "The same side of the Moon always faces Earth.",
        "The Moon has quakes, just like Earth, called 'moonquakes'.",
    ),
}


class FactPicker:
    """Single-slot fact display. A new pick replaces the current fact and its expiry."""

    def __init__(
        self,
        facts: dict[Body, tuple[str, ...]] | None = None,
        rng: random.Random | None = None,
        duration: timedelta = FACT_DURATION,
    ) -> None:
        self._facts = facts or CELESTIAL_FACTS
        self._rng = rng or random.Random()
        self._duration = duration
        self._active: ActiveFact | None = None

    def pick(
        self, body: Body, now: datetime, placement: DialPlacement | None = None
    ) -> ActiveFact:
        text = self._rng.choice(self._facts[body])
        self._active = ActiveFact(
            body=body,
            text=text,
            angle_degrees=placement.angle_degrees if placement else 0.0,
            radial_offset_percent=placement.radial_offset_percent if placement else 50.0,
            expires_at=now + self._duration,
        )
        return self._active

    def active(self, now: datetime) -> ActiveFact | None:
        if self._active is not None and now >= self._active.expires_at:
            self._active = None
        return self._active

    def dismiss(self) -> None:
        self._active = None
