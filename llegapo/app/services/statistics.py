from __future__ import annotations

import asyncio
import logging
import time
from collections import Counter
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from llegapo.app.ports.output import ITransitGateway
from llegapo.domain.exceptions import AcquisitionError, UpstreamError
from llegapo.domain.models import (
    ArrivalRecord,
    StatisticsSample,
    StopStatistics,
    StopStatisticsReport,
)
from llegapo.domain.validation import validate_stop_code

logger = logging.getLogger(__name__)


def sample_from_arrivals(
    records: Sequence[ArrivalRecord], *, timestamp: float
) -> StatisticsSample:
    codes = tuple(dict.fromkeys(r.service_code for r in records))
    return StatisticsSample(
        timestamp=timestamp, service_codes=codes, arrival_count=len(records)
    )


def compute_statistics(samples: Sequence[StatisticsSample]) -> StopStatistics:
    """Service frequency across repeated polls of one stop.

    A service's frequency is the number of samples it appeared in. Ties keep
    first-observed order.
    """

    if not samples:
        return StopStatistics()

    counts: Counter[str] = Counter()
    for sample in samples:
        counts.update(dict.fromkeys(sample.service_codes, 1))

    # Counter preserves insertion order and sorted() is stable.
    ranked = sorted(counts.items(), key=lambda kv: -kv[1])

    distinct_total = sum(len(set(s.service_codes)) for s in samples)
    return StopStatistics(
        most_common_services=tuple(ranked),
        avg_services_per_sample=round(distinct_total / len(samples), 1),
        total_observed=sum(s.arrival_count for s in samples),
    )


def _summary(stop_code: str, requested: int, stats: StopStatistics, unique: int) -> str:
    return (
        f"Paradero {stop_code}: {unique} servicios únicos detectados en "
        f"{requested} muestras. Promedio: {stats.avg_services_per_sample:g} "
        f"servicios por consulta."
    )


@dataclass(slots=True)
class StopStatisticsCollector:
    """Polls a stop N times at a fixed interval and tallies services.

    Polls are serial on purpose: upstream has to be observed at real
    wall-clock intervals. Failed polls are skipped.
    """

    gateway: ITransitGateway
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    clock: Callable[[], float] = time.time

    async def collect(
        self, stop_code: str, *, samples: int = 5, interval_s: float = 10.0
    ) -> StopStatisticsReport:
        code = validate_stop_code(stop_code)
        if samples < 1:
            raise ValueError("samples must be >= 1")

        logger.info("Collecting %d samples for stop %s every %.1fs", samples, code, interval_s)

        collected: list[StatisticsSample] = []
        for i in range(samples):
            try:
                records = await self.gateway.get_arrivals(code)
                collected.append(sample_from_arrivals(records, timestamp=self.clock()))
            except (UpstreamError, AcquisitionError) as exc:
                logger.warning("Sample %d/%d for stop %s failed: %s", i + 1, samples, code, exc)

            if i < samples - 1:
                await self.sleep(interval_s)

        stats = compute_statistics(collected)
        unique = len({c for s in collected for c in s.service_codes})
        return StopStatisticsReport(
            stop_code=code,
            requested_samples=samples,
            interval_s=interval_s,
            samples=tuple(collected),
            statistics=stats,
            summary=_summary(code, samples, stats, unique),
        )
