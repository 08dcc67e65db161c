from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _View(BaseModel):
    """Response views; serialize with `model_dump(by_alias=True)` for camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FormattedBus(_View):
    distancia: str
    tiempo: str
    patente: str


class FormattedArrival(_View):
    servicio: str
    destino: str
    buses: list[FormattedBus]


class FormattedArrivals(_View):
    paradero: str
    total_servicios: int
    arrivals: list[FormattedArrival]
    resumen: str


class NumberedBus(_View):
    numero: int
    distancia: str
    tiempo_llegada: str
    ppu: str


class ServiceArrivals(_View):
    paradero: str
    servicio: str
    total_buses: int
    buses: list[NumberedBus]


class Ubicacion(_View):
    latitud: float
    longitud: float


class FormattedStop(_View):
    codigo: str
    nombre: str
    comuna: str
    ubicacion: Ubicacion


class IndexedStop(FormattedStop):
    indice: int


class Recorrido(_View):
    puntos: int
    coordenadas: list[Ubicacion]


class FormattedSchedule(_View):
    tipo: str
    inicio: str
    fin: str


class ScheduleView(_View):
    dia: str
    horario: str
    inicio: str
    fin: str
    duracion_horas: float


class FormattedRoute(_View):
    destino: str
    total_paraderos: int
    paraderos: list[FormattedStop]
    recorrido: Recorrido
    horarios: list[FormattedSchedule]
    tiene_itinerario: bool


class RouteMetadata(_View):
    tiene_ida: bool
    tiene_regreso: bool
    total_kilometros: float | None = None
    comunas_recorridas: list[str]


class FormattedServiceRoute(_View):
    servicio: str
    route: FormattedRoute
    metadata: RouteMetadata


class ComunaGroup(_View):
    nombre: str
    total_paraderos: int
    paraderos: list[str]


class RouteStops(_View):
    servicio: str
    total_paraderos: int
    paraderos: list[FormattedStop]
    comunas: list[ComunaGroup]


class StopSearchResult(_View):
    servicio: str
    termino_busqueda: str
    paraderos: list[IndexedStop]
    total_encontrados: int


class RouteSchedules(_View):
    servicio: str
    ida: list[ScheduleView]
    regreso: list[ScheduleView]
    opera_lunes_viernes: bool
    opera_sabados: bool
    opera_domingos: bool
    total_horas_operacion: float
