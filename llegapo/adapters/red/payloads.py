"""Normalization of red.cl JSON payloads into domain models.

The upstream contract is unversioned and has changed shape between
deployments, so every reader here tolerates missing or oddly typed fields.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from llegapo.domain.models import (
    ArrivalRecord,
    BusPrediction,
    GeoPoint,
    RouteLeg,
    ScheduleEntry,
    ServiceRoute,
    StopRef,
)
from llegapo.domain.models.geo import in_range

logger = logging.getLogger(__name__)

RESPONSE_CODE_KEY = "codigorespuesta"
RESPONSE_CODE_OK = "00"
COLLECTION_KEYS = ("servicios", "services", "arrivals")
ITEM_KEY = "item"

JsonRecord = dict[str, Any]


def _text(record: JsonRecord, *keys: str) -> str:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return str(value).strip()
    return ""


def _float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


# --- arrivals -------------------------------------------------------------


def _records_from_list(items: list[Any]) -> list[JsonRecord]:
    records = [item for item in items if isinstance(item, dict)]
    if any(RESPONSE_CODE_KEY in r for r in records):
        return [
            r for r in records if _text(r, RESPONSE_CODE_KEY) == RESPONSE_CODE_OK
        ]
    return records


def _nested_collection(payload: Any) -> Any:
    if not isinstance(payload, dict):
        return None
    for key in COLLECTION_KEYS:
        if key not in payload:
            continue
        inner = payload[key]
        if isinstance(inner, dict) and isinstance(inner.get(ITEM_KEY), (list, dict)):
            inner = inner[ITEM_KEY]
        return inner
    return None


def _is_record_map(value: Any) -> bool:
    return isinstance(value, dict) and all(isinstance(v, dict) for v in value.values())


# Each arm: (shape name, matcher, extractor). Add shapes here.
_ARRIVAL_SHAPES: tuple[
    tuple[str, Callable[[Any], bool], Callable[[Any], list[JsonRecord]]], ...
] = (
    ("array", lambda p: isinstance(p, list), _records_from_list),
    (
        "nested-array",
        lambda p: isinstance(_nested_collection(p), list),
        lambda p: _records_from_list(_nested_collection(p)),
    ),
    (
        "nested-map",
        lambda p: _is_record_map(_nested_collection(p)),
        lambda p: _records_from_list(list(_nested_collection(p).values())),
    ),
)


def arrival_records(payload: Any) -> list[JsonRecord]:
    """Raw arrival records from any known payload shape; [] for anything else."""

    for shape, matches, extract in _ARRIVAL_SHAPES:
        if matches(payload):
            records = extract(payload)
            logger.debug("Arrivals payload shape=%s records=%d", shape, len(records))
            return records

    logger.info(
        "Unrecognized arrivals payload shape (%s); treating as no service",
        type(payload).__name__,
    )
    return []


def parse_arrival(record: JsonRecord) -> ArrivalRecord | None:
    service_code = _text(record, "servicio").upper()
    if not service_code:
        return None

    bus1 = BusPrediction(
        distance_label=_text(record, "distanciabus1"),
        eta_label=_text(record, "horaprediccionbus1"),
        plate=_text(record, "ppubus1"),
    )
    bus2 = BusPrediction(
        distance_label=_text(record, "distanciabus2"),
        eta_label=_text(record, "horaprediccionbus2"),
        plate=_text(record, "ppubus2"),
    )
    return ArrivalRecord(
        service_code=service_code,
        destination=_text(record, "destino"),
        bus1=bus1,
        bus2=bus2 if bus2.is_complete else None,
    )


def normalize_arrivals(payload: Any) -> tuple[ArrivalRecord, ...]:
    out: list[ArrivalRecord] = []
    for record in arrival_records(payload):
        arrival = parse_arrival(record)
        if arrival is None:
            logger.debug("Skipping arrival record without service code: %s", record)
            continue
        out.append(arrival)
    return tuple(out)


# --- routes ---------------------------------------------------------------


def parse_stop(raw: Any) -> StopRef | None:
    if not isinstance(raw, dict):
        return None

    pos = raw.get("pos")
    if isinstance(pos, (list, tuple)) and len(pos) >= 2:
        lat, lon = _float(pos[0]), _float(pos[1])
    else:
        lat, lon = _float(raw.get("y", raw.get("lat"))), _float(raw.get("x", raw.get("lon")))

    return StopRef(
        code=_text(raw, "cod", "codigo").upper(),
        name=_text(raw, "name", "nombre"),
        comune=_text(raw, "comuna"),
        latitude=lat,
        longitude=lon,
    )


def _point_coords(raw: Any) -> tuple[float, float] | None:
    try:
        if isinstance(raw, (list, tuple)) and len(raw) >= 2:
            return float(raw[1]), float(raw[0])
        if isinstance(raw, dict):
            return float(raw["lat"]), float(raw.get("lng", raw.get("lon")))
    except (KeyError, TypeError, ValueError):
        pass
    return None


def parse_point(raw: Any) -> GeoPoint | None:
    """Path points come as [lon, lat] pairs or {lat, lng} objects."""

    coords = _point_coords(raw)
    if coords is None:
        logger.debug("Skipping malformed path point: %r", raw)
        return None

    lat, lon = coords
    if not in_range(lat, lon):
        # Usually a swapped pair or a projected coordinate upstream.
        logger.warning("Skipping out-of-range path point lat=%s lon=%s", lat, lon)
        return None
    return GeoPoint(lat=lat, lon=lon)


def parse_schedule(raw: Any) -> ScheduleEntry | None:
    if not isinstance(raw, dict):
        return None
    return ScheduleEntry(
        day_type=_text(raw, "tipoDia", "tipo"),
        start=_text(raw, "inicio"),
        end=_text(raw, "fin"),
    )


def _list(raw: JsonRecord, key: str) -> list[Any]:
    value = raw.get(key)
    return value if isinstance(value, list) else []


def parse_leg(raw: Any) -> RouteLeg | None:
    if not isinstance(raw, dict):
        return None

    stops = (parse_stop(p) for p in _list(raw, "paraderos"))
    path = (parse_point(p) for p in _list(raw, "path"))
    schedules = (parse_schedule(h) for h in _list(raw, "horarios"))

    return RouteLeg(
        destination=_text(raw, "destino"),
        stops=tuple(s for s in stops if s is not None),
        path=tuple(p for p in path if p is not None),
        schedules=tuple(h for h in schedules if h is not None),
        has_timetable=bool(raw.get("itinerario")),
    )


def normalize_route(service_code: str, payload: Any) -> ServiceRoute:
    if not isinstance(payload, dict):
        logger.info(
            "Unrecognized route payload for %s (%s)", service_code, type(payload).__name__
        )
        return ServiceRoute(service_code=service_code)

    return ServiceRoute(
        service_code=service_code,
        ida=parse_leg(payload.get("ida")),
        regreso=parse_leg(payload.get("regreso")),
    )
