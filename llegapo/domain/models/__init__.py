from .arrival import ArrivalRecord, BusPrediction
from .credential import CacheStatus, Credential
from .geo import GeoPoint
from .route import RouteLeg, ScheduleEntry, ServiceRoute, StopRef
from .statistics import StatisticsSample, StopStatistics, StopStatisticsReport

__all__ = [
    "ArrivalRecord",
    "BusPrediction",
    "CacheStatus",
    "Credential",
    "GeoPoint",
    "RouteLeg",
    "ScheduleEntry",
    "ServiceRoute",
    "StatisticsSample",
    "StopRef",
    "StopStatistics",
    "StopStatisticsReport",
]
