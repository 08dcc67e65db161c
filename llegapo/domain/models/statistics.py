from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class StatisticsSample:
    """One arrivals poll of a stop.

    `service_codes` holds distinct codes in first-seen order; `arrival_count`
    is the raw number of records upstream returned.
    """

    timestamp: float
    service_codes: tuple[str, ...]
    arrival_count: int = 0


@dataclass(frozen=True, slots=True)
class StopStatistics:
    most_common_services: tuple[tuple[str, int], ...] = ()
    avg_services_per_sample: float = 0.0
    total_observed: int = 0


@dataclass(frozen=True, slots=True)
class StopStatisticsReport:
    stop_code: str
    requested_samples: int
    interval_s: float
    samples: tuple[StatisticsSample, ...]
    statistics: StopStatistics
    summary: str

    @property
    def detected_services(self) -> tuple[str, ...]:
        seen: set[str] = set()
        for sample in self.samples:
            seen.update(sample.service_codes)
        return tuple(sorted(seen))
