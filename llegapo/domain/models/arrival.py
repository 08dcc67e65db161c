from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BusPrediction:
    distance_label: str
    eta_label: str
    plate: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.distance_label) and bool(self.eta_label)


@dataclass(frozen=True, slots=True)
class ArrivalRecord:
    """One upstream-reported service arriving at one stop."""

    service_code: str
    destination: str
    bus1: BusPrediction
    bus2: BusPrediction | None = None

    @property
    def buses(self) -> tuple[BusPrediction, ...]:
        if self.bus2 is None:
            return (self.bus1,)
        return (self.bus1, self.bus2)
