from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

import httpx

from llegapo.app.ports.output import ITokenAcquisitionStrategy, ITokenProvider
from llegapo.domain.exceptions import AcquisitionError
from llegapo.domain.models import CacheStatus, Credential

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CachingTokenProvider(ITokenProvider):
    """Keeps one upstream credential alive for the whole process.

    Strategies are tried in order on refresh; the first one that yields a
    token wins. Concurrent callers that find the credential expired all await
    the same in-flight refresh and get its credential or its error.
    """

    strategies: tuple[ITokenAcquisitionStrategy, ...]
    ttl_s: float = 300.0
    clock: Callable[[], float] = time.time

    _inflight: asyncio.Future[Credential] | None = field(
        default=None, init=False, repr=False
    )
    _credential: Credential | None = field(default=None, init=False, repr=False)

    def _current(self) -> Credential | None:
        cached = self._credential
        if cached is not None and cached.is_valid(self.clock()):
            return cached
        return None

    async def get_valid_token(self) -> Credential:
        cached = self._current()
        if cached is not None:
            return cached

        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._refresh_once())
        # A cancelled caller must not cancel the refresh the others wait on.
        return await asyncio.shield(self._inflight)

    async def _refresh_once(self) -> Credential:
        try:
            return await self._refresh()
        finally:
            self._inflight = None

    async def _refresh(self) -> Credential:
        logger.info("Refreshing upstream token")
        attempted: list[str] = []
        last_error: Exception | None = None

        for strategy in self.strategies:
            attempted.append(strategy.name)
            start = time.monotonic()
            try:
                value = (await strategy.acquire()).strip()
            except Exception as exc:
                logger.warning("Token strategy '%s' failed: %s", strategy.name, exc)
                last_error = exc
                continue

            if not value:
                logger.warning("Token strategy '%s' returned an empty token", strategy.name)
                continue

            now = self.clock()
            credential = Credential(value=value, acquired_at=now, expires_at=now + self.ttl_s)
            self._credential = credential
            logger.info(
                "Token refreshed via '%s' in %dms: %s (valid %ds)",
                strategy.name,
                int((time.monotonic() - start) * 1000),
                credential.preview,
                int(self.ttl_s),
            )
            return credential

        logger.error("All token strategies failed: %s", ", ".join(attempted) or "none")
        raise AcquisitionError(
            "Could not obtain an upstream authentication token",
            cause=last_error,
            attempted=tuple(attempted),
            timeout=_timed_out(last_error),
        ) from last_error

    def invalidate(self) -> None:
        if self._credential is not None:
            logger.info("Upstream token cache invalidated")
        self._credential = None

    def cache_status(self) -> CacheStatus:
        cached = self._credential
        if cached is None:
            return CacheStatus(present=False, seconds_remaining=0, valid=False)
        now = self.clock()
        return CacheStatus(
            present=bool(cached.value),
            seconds_remaining=cached.seconds_remaining(now),
            valid=cached.is_valid(now),
        )


def _timed_out(exc: BaseException | None) -> bool:
    """True when `exc` or anything it was raised from is a timeout."""

    seen: set[int] = set()
    while exc is not None and id(exc) not in seen:
        if isinstance(exc, (httpx.TimeoutException, TimeoutError)):
            return True
        seen.add(id(exc))
        exc = exc.__cause__
    return False
