from __future__ import annotations

from abc import ABC, abstractmethod

from llegapo.domain.models import ArrivalRecord, ServiceRoute


class ITransitGateway(ABC):
    """Port for the upstream arrivals and route resources."""

    @abstractmethod
    async def get_arrivals(self, stop_code: str) -> tuple[ArrivalRecord, ...]:
        raise NotImplementedError

    @abstractmethod
    async def get_route(self, service_code: str) -> ServiceRoute:
        raise NotImplementedError
