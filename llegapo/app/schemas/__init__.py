from .formatted import (
    ComunaGroup,
    FormattedArrival,
    FormattedArrivals,
    FormattedBus,
    FormattedRoute,
    FormattedSchedule,
    FormattedServiceRoute,
    FormattedStop,
    IndexedStop,
    NumberedBus,
    Recorrido,
    RouteMetadata,
    RouteSchedules,
    RouteStops,
    ScheduleView,
    ServiceArrivals,
    StopSearchResult,
    Ubicacion,
)

__all__ = [
    "ComunaGroup",
    "FormattedArrival",
    "FormattedArrivals",
    "FormattedBus",
    "FormattedRoute",
    "FormattedSchedule",
    "FormattedServiceRoute",
    "FormattedStop",
    "IndexedStop",
    "NumberedBus",
    "Recorrido",
    "RouteMetadata",
    "RouteSchedules",
    "RouteStops",
    "ScheduleView",
    "ServiceArrivals",
    "StopSearchResult",
    "Ubicacion",
]
