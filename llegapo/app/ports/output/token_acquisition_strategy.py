from __future__ import annotations

from abc import ABC, abstractmethod


class ITokenAcquisitionStrategy(ABC):
    """One way of obtaining a fresh raw token.

    `acquire` returns the token value or raises; the provider moves on to the
    next strategy on any exception.
    """

    name: str = "strategy"

    @abstractmethod
    async def acquire(self) -> str:
        raise NotImplementedError
