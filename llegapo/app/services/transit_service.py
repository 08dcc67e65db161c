from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from llegapo.app.ports.output import ITokenProvider, ITransitGateway
from llegapo.app.schemas import (
    ComunaGroup,
    FormattedArrivals,
    FormattedServiceRoute,
    IndexedStop,
    NumberedBus,
    RouteMetadata,
    RouteSchedules,
    RouteStops,
    ServiceArrivals,
    StopSearchResult,
)
from llegapo.app.services.formatters import (
    format_arrivals,
    format_route,
    format_schedule,
    format_stop,
    summarize,
)
from llegapo.app.services.statistics import StopStatisticsCollector
from llegapo.domain.algorithms.geo_utils import path_length_km
from llegapo.domain.models import (
    ArrivalRecord,
    CacheStatus,
    ServiceRoute,
    StopStatisticsReport,
)
from llegapo.domain.validation import validate_service_code, validate_stop_code

logger = logging.getLogger(__name__)

_CLOCK_RE = re.compile(r"(\d+):(\d+)")
_NUMBER_RE = re.compile(r"\d+")


def _eta_sort_key(label: str) -> int:
    # "HH:MM" sorts by minutes, "5 min" by its number; unknowns go last.
    m = _CLOCK_RE.search(label)
    if m:
        return int(m.group(1)) * 60 + int(m.group(2))
    m = _NUMBER_RE.search(label)
    return int(m.group(0)) if m else 10**6


@dataclass(slots=True)
class TransitService:
    """Entry point for the HTTP layer.

    Validates codes, delegates to the gateway and shapes responses.
    Raises ValidationError, UpstreamError and AcquisitionError; an empty
    result is never an error.
    """

    gateway: ITransitGateway
    token_provider: ITokenProvider
    statistics: StopStatisticsCollector | None = None

    # --- arrivals ---------------------------------------------------------

    async def get_arrivals(self, stop_code: str) -> tuple[ArrivalRecord, ...]:
        code = validate_stop_code(stop_code)
        return await self.gateway.get_arrivals(code)

    async def get_formatted_arrivals(self, stop_code: str) -> FormattedArrivals:
        code = validate_stop_code(stop_code)
        records = await self.gateway.get_arrivals(code)
        formatted = format_arrivals(records)
        return FormattedArrivals(
            paradero=code,
            total_servicios=len(formatted),
            arrivals=formatted,
            resumen=summarize(records),
        )

    async def get_arrivals_by_service(
        self, stop_code: str, service_code: str
    ) -> ServiceArrivals:
        stop = validate_stop_code(stop_code)
        service = validate_service_code(service_code)
        records = await self.gateway.get_arrivals(stop)

        buses: list[NumberedBus] = []
        for record in records:
            if record.service_code != service:
                continue
            for numero, bus in enumerate(record.buses, start=1):
                if not bus.is_complete:
                    continue
                buses.append(
                    NumberedBus(
                        numero=numero,
                        distancia=bus.distance_label,
                        tiempo_llegada=bus.eta_label,
                        ppu=bus.plate or "N/A",
                    )
                )

        buses.sort(key=lambda b: _eta_sort_key(b.tiempo_llegada))
        return ServiceArrivals(
            paradero=stop, servicio=service, total_buses=len(buses), buses=buses
        )

    async def get_stop_statistics(
        self, stop_code: str, *, samples: int = 5, interval_s: float = 10.0
    ) -> StopStatisticsReport:
        collector = self.statistics
        if collector is None:
            collector = self.statistics = StopStatisticsCollector(gateway=self.gateway)
        return await collector.collect(
            stop_code, samples=samples, interval_s=interval_s
        )

    # --- routes -----------------------------------------------------------

    async def get_route(self, service_code: str) -> ServiceRoute:
        code = validate_service_code(service_code)
        return await self.gateway.get_route(code)

    async def get_formatted_route(self, service_code: str) -> FormattedServiceRoute | None:
        """Primary leg (ida, else regreso) formatted; None when upstream has no legs."""

        route = await self.get_route(service_code)
        leg = route.primary_leg
        if leg is None:
            logger.info("No route data for service %s", route.service_code)
            return None

        return FormattedServiceRoute(
            servicio=route.service_code,
            route=format_route(leg),
            metadata=RouteMetadata(
                tiene_ida=route.ida is not None,
                tiene_regreso=route.regreso is not None,
                total_kilometros=path_length_km(leg.path) if len(leg.path) > 1 else None,
                comunas_recorridas=list(dict.fromkeys(s.comune for s in leg.stops)),
            ),
        )

    async def get_route_stops(self, service_code: str) -> RouteStops:
        route = await self.get_route(service_code)
        leg = route.primary_leg
        stops = [format_stop(s) for s in leg.stops] if leg is not None else []

        by_comuna: dict[str, list[str]] = {}
        for stop in stops:
            by_comuna.setdefault(stop.comuna, []).append(stop.codigo)

        return RouteStops(
            servicio=route.service_code,
            total_paraderos=len(stops),
            paraderos=stops,
            comunas=[
                ComunaGroup(nombre=name, total_paraderos=len(codes), paraderos=codes)
                for name, codes in by_comuna.items()
            ],
        )

    async def find_stops_in_route(self, service_code: str, term: str) -> StopSearchResult:
        route_stops = await self.get_route_stops(service_code)
        needle = term.strip().lower()

        found = [
            IndexedStop(**stop.model_dump(), indice=i)
            for i, stop in enumerate(route_stops.paraderos)
            if needle in stop.codigo.lower()
            or needle in stop.nombre.lower()
            or needle in stop.comuna.lower()
        ]
        return StopSearchResult(
            servicio=route_stops.servicio,
            termino_busqueda=term,
            paraderos=found,
            total_encontrados=len(found),
        )

    async def get_route_schedules(self, service_code: str) -> RouteSchedules:
        route = await self.get_route(service_code)
        ida = format_schedule(route.ida.schedules) if route.ida is not None else []
        regreso = format_schedule(route.regreso.schedules) if route.regreso is not None else []

        days = [s.dia for s in (*ida, *regreso)]
        return RouteSchedules(
            servicio=route.service_code,
            ida=ida,
            regreso=regreso,
            opera_lunes_viernes=any("Lunes" in d or "Viernes" in d for d in days),
            opera_sabados=any("Sábado" in d for d in days),
            opera_domingos=any("Domingo" in d for d in days),
            total_horas_operacion=max((s.duracion_horas for s in (*ida, *regreso)), default=0.0),
        )

    # --- token cache ------------------------------------------------------

    def cache_status(self) -> CacheStatus:
        return self.token_provider.cache_status()

    def invalidate_cache(self) -> None:
        self.token_provider.invalidate()
