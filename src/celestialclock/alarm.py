"""True-sunrise alarm state machine (Unset, Armed, Ringing) and its persistence."""

import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Protocol

from celestialclock.audio import AudioCollaborator
from celestialclock.ephemeris import PositionProvider
from celestialclock.models import AlarmState, AlarmStatus, CelestialSnapshot, GeoCoordinate

ALARM_KEY = "sunriseAlarm"

log = logging.getLogger(__name__)


class AlarmError(Exception):
    """Invalid alarm transition, or no sunrise to arm against."""


class AlarmStore(Protocol):
    """Single-key persistence for the armed target (ISO-8601 string)."""

    def load(self) -> str | None: ...

    def save(self, value: str) -> None: ...

    def delete(self) -> None: ...


class MemoryAlarmStore:
    def __init__(self, value: str | None = None) -> None:
        self.value = value

    def load(self) -> str | None:
        return self.value

    def save(self, value: str) -> None:
        self.value = value

    def delete(self) -> None:
        self.value = None


class JsonFileAlarmStore:
    """Keeps the alarm under one key of a small JSON document on disk."""

    def __init__(self, path: Path, key: str = ALARM_KEY) -> None:
        self.path = path
        self.key = key

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with self.path.open(encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            log.warning("Ignoring unreadable alarm store %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(data, f)

    def load(self) -> str | None:
        value = self._read().get(self.key)
        return value if isinstance(value, str) else None

    def save(self, value: str) -> None:
        data = self._read()
        data[self.key] = value
        self._write(data)

    def delete(self) -> None:
        data = self._read()
        if self.key in data:
            del data[self.key]
            self._write(data)


def parse_alarm_timestamp(value: str | None) -> datetime | None:
    """Parse a persisted ISO timestamp; None for absent or malformed values."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        log.warning("Discarding malformed alarm timestamp %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class AlarmScheduler:
    """Holds the sunrise alarm and moves it through Unset → Armed → Ringing.

    Ringing leaves through `dismiss()`, which re-arms against tomorrow's
    sunrise (or drops to Unset when there is none), or through `clear()`.
    Every arm replaces the previous target outright.
    """

    def __init__(
        self,
        provider: PositionProvider,
        store: AlarmStore,
        audio: AudioCollaborator,
    ) -> None:
        self._provider = provider
        self._store = store
        self._audio = audio
        target = parse_alarm_timestamp(store.load())
        if target is None:
            self._state = AlarmState()
        else:
            self._state = AlarmState(AlarmStatus.ARMED, target)
            log.info("Restored sunrise alarm for %s", target.isoformat())

    @property
    def state(self) -> AlarmState:
        return self._state

    def _next_day_sunrise(
        self, now: datetime, coordinate: GeoCoordinate
    ) -> datetime | None:
        return self._provider.snapshot(now + timedelta(days=1), coordinate).sunrise

    def _set_target(self, target: datetime | None, now: datetime) -> AlarmState:
        if target is None or target < now:
            raise AlarmError(f"No upcoming sunrise after {now.isoformat()}")
        self._state = AlarmState(AlarmStatus.ARMED, target)
        self._store.save(target.isoformat())
        log.info("Sunrise alarm armed for %s", target.isoformat())
        return self._state

    def arm(
        self,
        snapshot: CelestialSnapshot | None,
        now: datetime,
        coordinate: GeoCoordinate | None,
    ) -> AlarmState:
        """Arm against today's sunrise, or tomorrow's if today's has passed.

        Args:
            snapshot: Latest snapshot for `now`; its sunrise is the first candidate.
            now: Current instant.
            coordinate: Observer location. None leaves the state untouched.

        Returns:
            The new AlarmState.

        Raises:
            AlarmError: No sunrise at or after `now` (polar night/day).
        """
        if coordinate is None or snapshot is None:
            log.warning("Alarm not armed: location not known yet")
            return self._state
        candidate = snapshot.sunrise
        if candidate is None or candidate < now:
            candidate = self._next_day_sunrise(now, coordinate)
        return self._set_target(candidate, now)

    def tick(self, now: datetime) -> AlarmState:
        """Start ringing when the wall clock hits the target's hour:minute:00.

        Comparison happens in `now`'s timezone. A tick that never lands on
        second 0 of the target minute misses the alarm.
        """
        if self._state.status is not AlarmStatus.ARMED:
            return self._state
        target = self._state.target
        if now.tzinfo is not None:
            target = target.astimezone(now.tzinfo)
        if now.hour == target.hour and now.minute == target.minute and now.second == 0:
            self._state = AlarmState(AlarmStatus.RINGING, self._state.target)
            log.info("Sunrise alarm ringing at %s", now.isoformat())
            self._audio.start()
        return self._state

    def dismiss(self, now: datetime, coordinate: GeoCoordinate) -> AlarmState:
        """Silence a ringing alarm and re-arm for tomorrow's sunrise.

        Raises:
            AlarmError: Not ringing, or no sunrise tomorrow. In the latter
                case the alarm is still silenced and left Unset.
        """
        if self._state.status is not AlarmStatus.RINGING:
            raise AlarmError(f"Cannot dismiss alarm in state {self._state.status.value}")
        target = self._next_day_sunrise(now, coordinate)
        self._audio.stop()
        if target is None or target < now:
            self._state = AlarmState()
            self._store.delete()
            log.warning("Sunrise alarm dismissed without re-arming: no sunrise tomorrow")
            raise AlarmError(f"No upcoming sunrise after {now.isoformat()}")
        return self._set_target(target, now)

    def clear(self) -> AlarmState:
        if self._state.status is AlarmStatus.UNSET:
            # Also drops a malformed value left over from startup
            self._store.delete()
            return self._state
        if self._state.status is AlarmStatus.RINGING:
            self._audio.stop()
        self._state = AlarmState()
        self._store.delete()
        log.info("Sunrise alarm cleared")
        return self._state
