"""Value types passed between the ephemeris, the clock core, and the renderers."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


@dataclass(frozen=True)
class GeoCoordinate:
    """Observer position on Earth. Immutable once acquired."""

    latitude: float  # Decimal degrees, north positive
    longitude: float  # Decimal degrees, east positive

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range: {self.longitude}")


@dataclass(frozen=True)
class ObserverContext:
    """Resolved location plus the timezone used for wall-clock comparisons."""

    coordinate: GeoCoordinate
    tz_name: str  # IANA timezone name ("Europe/London"), "UTC" when unknown
    advisory: str | None = None  # Non-fatal message shown when a fallback was used


@dataclass(frozen=True)
class BodyPosition:
    """Horizontal coordinates of the Sun."""

    altitude: float  # Radians above (+) or below (-) the horizon
    azimuth: float  # Radians from south, positive toward west


@dataclass(frozen=True)
class MoonPosition:
    """Horizontal coordinates of the Moon plus disk orientation."""

    altitude: float  # Radians
    azimuth: float  # Radians from south, positive toward west
    parallactic_angle: float  # Radians


@dataclass(frozen=True)
class CelestialSnapshot:
    """Everything the dial needs for one (instant, location). Never persisted."""

    sunrise: datetime | None  # None during polar day/night
    sunset: datetime | None
    solar_noon: datetime
    moonrise: datetime | None  # None when the Moon does not rise that day
    moonset: datetime | None
    moon_illumination: float  # Illuminated fraction [0, 1]
    sun_position: BodyPosition
    moon_position: MoonPosition


class MoonPhase(str, Enum):
    NEW_MOON = "New Moon"
    WAXING_CRESCENT = "Waxing Crescent"
    FIRST_QUARTER = "First Quarter"
    WAXING_GIBBOUS = "Waxing Gibbous"
    FULL_MOON = "Full Moon"
    WANING_GIBBOUS = "Waning Gibbous"
    THIRD_QUARTER = "Third Quarter"
    WANING_CRESCENT = "Waning Crescent"


@dataclass(frozen=True)
class MoonPhaseState:
    """Lunar phase derived from the instant alone."""

    phase: MoonPhase
    age: float  # Days since the last mean new moon, [0, LUNAR_MONTH)
    fraction: float  # age / LUNAR_MONTH, [0, 1)


class SkyState(str, Enum):
    DAY = "day"
    TWILIGHT = "twilight"
    NIGHT = "night"


class Body(str, Enum):
    SUN = "Sun"
    MOON = "Moon"


@dataclass(frozen=True)
class DialPlacement:
    """Where a body sits on the dial."""

    angle_degrees: float  # Screen rotation, 0 = up, clockwise
    radial_offset_percent: float  # 0 = high (zenith), 100 = low (nadir)


@dataclass(frozen=True)
class ViewTransform:
    """Zoom/pan state of the dial. Scale is always within [1, 4]."""

    scale: float = 1.0
    x_offset: float = 0.0
    y_offset: float = 0.0


class AlarmStatus(str, Enum):
    UNSET = "unset"
    ARMED = "armed"
    RINGING = "ringing"


@dataclass(frozen=True)
class AlarmState:
    status: AlarmStatus = AlarmStatus.UNSET
    target: datetime | None = None  # Set while ARMED or RINGING


@dataclass(frozen=True)
class ActiveFact:
    """A fact callout pinned next to the body that was clicked."""

    body: Body
    text: str
    angle_degrees: float
    radial_offset_percent: float
    expires_at: datetime


@dataclass(frozen=True)
class DialFrame:
    """The sole input to the dial renderer. Fully computed display state."""

    sky_state: SkyState
    sun: DialPlacement
    moon: DialPlacement
    sun_visible: bool  # Above the horizon
    moon_visible: bool
    is_day: bool  # Moon is drawn dimmed
    phase: MoonPhase
    time_text: str  # Local wall clock, "HH:MM"
    date_text: str  # "Saturday, October 17, 2026"
    view: ViewTransform = ViewTransform()
    fact: ActiveFact | None = None
