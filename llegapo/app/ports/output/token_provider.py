from __future__ import annotations

from abc import ABC, abstractmethod

from llegapo.domain.models import CacheStatus, Credential


class ITokenProvider(ABC):
    """Port for obtaining a currently valid upstream credential."""

    @abstractmethod
    async def get_valid_token(self) -> Credential:
        raise NotImplementedError

    @abstractmethod
    def invalidate(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def cache_status(self) -> CacheStatus:
        raise NotImplementedError
