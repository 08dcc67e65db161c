from __future__ import annotations

from dataclasses import dataclass

from .geo import GeoPoint


@dataclass(frozen=True, slots=True)
class StopRef:
    code: str
    name: str
    comune: str
    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class ScheduleEntry:
    day_type: str
    start: str
    end: str


@dataclass(frozen=True, slots=True)
class RouteLeg:
    """One direction of a service ("ida" outbound, "regreso" return).

    Every field has a default so callers never null-check.
    """

    destination: str = ""
    stops: tuple[StopRef, ...] = ()
    path: tuple[GeoPoint, ...] = ()
    schedules: tuple[ScheduleEntry, ...] = ()
    has_timetable: bool = False


@dataclass(frozen=True, slots=True)
class ServiceRoute:
    service_code: str
    ida: RouteLeg | None = None
    regreso: RouteLeg | None = None

    @property
    def has_data(self) -> bool:
        return self.ida is not None or self.regreso is not None

    @property
    def primary_leg(self) -> RouteLeg | None:
        return self.ida if self.ida is not None else self.regreso

    @property
    def legs(self) -> tuple[RouteLeg, ...]:
        return tuple(leg for leg in (self.ida, self.regreso) if leg is not None)
