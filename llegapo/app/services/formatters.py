"""Pure reshaping of already-fetched arrivals and routes (no I/O)."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from llegapo.app.schemas import (
    FormattedArrival,
    FormattedBus,
    FormattedRoute,
    FormattedSchedule,
    FormattedStop,
    Recorrido,
    ScheduleView,
    Ubicacion,
)
from llegapo.domain.models import ArrivalRecord, RouteLeg, ScheduleEntry, StopRef

ARRIVING_SENTINEL = "llegando"
NO_INFO = "Sin información"

DAY_TYPE_LABELS = {
    "LV": "Lunes a Viernes",
    "LF": "Lunes a Viernes",
    "L-V": "Lunes a Viernes",
    "S": "Sábados",
    "SA": "Sábados",
    "D": "Domingos",
    "DO": "Domingos",
    "L-D": "Lunes a Domingo",
}

_MINUTES_RE = re.compile(r"(\d+)\s*min")
_METERS_RE = re.compile(r"(\d+)\s*m")
_KM_RE = re.compile(r"(\d+\.?\d*)\s*km")
_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def format_arrivals(records: Iterable[ArrivalRecord]) -> list[FormattedArrival]:
    """Destination/bus-list view; bus slots without distance or eta are dropped."""

    out: list[FormattedArrival] = []
    for record in records:
        buses = [
            FormattedBus(
                distancia=bus.distance_label,
                tiempo=bus.eta_label,
                patente=bus.plate,
            )
            for bus in record.buses
            if bus.is_complete
        ]
        out.append(
            FormattedArrival(
                servicio=record.service_code,
                destino=record.destination,
                buses=buses,
            )
        )
    return out


def format_stop(stop: StopRef) -> FormattedStop:
    return FormattedStop(
        codigo=stop.code,
        nombre=stop.name,
        comuna=stop.comune,
        ubicacion=Ubicacion(latitud=stop.latitude, longitud=stop.longitude),
    )


def format_route(leg: RouteLeg) -> FormattedRoute:
    return FormattedRoute(
        destino=leg.destination,
        total_paraderos=len(leg.stops),
        paraderos=[format_stop(s) for s in leg.stops],
        recorrido=Recorrido(
            puntos=len(leg.path),
            coordenadas=[Ubicacion(latitud=p.lat, longitud=p.lon) for p in leg.path],
        ),
        horarios=[
            FormattedSchedule(tipo=h.day_type, inicio=h.start, fin=h.end)
            for h in leg.schedules
        ],
        tiene_itinerario=leg.has_timetable,
    )


def _is_arriving(label: str) -> bool:
    return ARRIVING_SENTINEL in label.lower()


def summarize(records: Sequence[ArrivalRecord]) -> str:
    if not records:
        return "No hay servicios disponibles en este momento"

    services = list(dict.fromkeys(r.service_code for r in records))
    arriving = sum(
        1 for r in records for bus in r.buses if _is_arriving(bus.distance_label)
    )

    n = len(services)
    plural = "s" if n > 1 else ""
    summary = f"{n} servicio{plural} disponible{plural}: {', '.join(services)}"
    if arriving > 0:
        summary += f". {arriving} bus{'es' if arriving > 1 else ''} llegando ahora"
    return summary


def schedule_duration_hours(start: str, end: str) -> float:
    """Hours between two HH:MM times; 0.0 when either is unreadable."""

    m_start = _HHMM_RE.match(start.strip())
    m_end = _HHMM_RE.match(end.strip())
    if m_start is None or m_end is None:
        return 0.0
    start_min = int(m_start.group(1)) * 60 + int(m_start.group(2))
    end_min = int(m_end.group(1)) * 60 + int(m_end.group(2))
    return round((end_min - start_min) / 60, 2)


def format_schedule(entries: Iterable[ScheduleEntry]) -> list[ScheduleView]:
    return [
        ScheduleView(
            dia=DAY_TYPE_LABELS.get(e.day_type, e.day_type),
            horario=f"{e.start} - {e.end}",
            inicio=e.start,
            fin=e.end,
            duracion_horas=schedule_duration_hours(e.start, e.end),
        )
        for e in entries
    ]


def format_distance(label: str) -> str:
    if not label:
        return NO_INFO

    dist = label.lower().strip()
    if ARRIVING_SENTINEL in dist:
        return "Llegando"
    if "en paradero" in dist or "detenido" in dist:
        return "En paradero"

    m = _MINUTES_RE.search(dist)
    if m:
        minutes = int(m.group(1))
        return "Menos de 1 min" if minutes <= 1 else f"{minutes} min"

    m = _KM_RE.search(dist)
    if m:
        return f"{float(m.group(1)):g}km"

    m = _METERS_RE.search(dist)
    if m:
        meters = int(m.group(1))
        if meters < 1000:
            return f"{meters}m"
        return f"{meters / 1000:.1f}km"

    return label


def format_arrival_time(distance: str, eta: str) -> str:
    if not distance or not eta:
        return NO_INFO

    dist = distance.lower()
    if ARRIVING_SENTINEL in dist:
        return "Llegando ahora"

    m = _MINUTES_RE.search(dist)
    if m:
        minutes = int(m.group(1))
        if minutes <= 1:
            return "Menos de 1 minuto"
        if minutes <= 5:
            return f"{minutes} minutos (próximo)"
        return f"{minutes} minutos"

    m = _METERS_RE.search(dist)
    if m:
        meters = int(m.group(1))
        if meters <= 100:
            return "Muy cerca (< 100m)"
        if meters <= 500:
            return "Cerca (< 500m)"
        return f"{meters}m de distancia"

    return f"{distance} - {eta}"
