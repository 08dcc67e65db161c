from __future__ import annotations

import asyncio
from dataclasses import dataclass

import httpx
import pytest

from fakes import BASE_URL, GOOD_TOKEN, FakeClock, mock_client
from llegapo.adapters.red.strategies import DegradedScrapeStrategy, HtmlScrapeStrategy
from llegapo.adapters.red.token_extraction import TokenNotFound
from llegapo.adapters.red.token_provider import CachingTokenProvider
from llegapo.domain.exceptions import AcquisitionError
from llegapo.domain.models import Credential


@dataclass
class FakeStrategy:
    name: str
    token: str | None = GOOD_TOKEN
    error: Exception | None = None
    delay_s: float = 0.0
    calls: int = 0

    async def acquire(self) -> str:
        self.calls += 1
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.error is not None:
            raise self.error
        if self.token is None:
            raise TokenNotFound("nothing here")
        return self.token


def test_refresh_sets_credential_with_ttl(clock: FakeClock) -> None:
    provider = CachingTokenProvider(strategies=(FakeStrategy("html"),), ttl_s=300, clock=clock)

    credential = asyncio.run(provider.get_valid_token())

    assert credential.value == GOOD_TOKEN
    assert credential.acquired_at == clock.now
    assert credential.expires_at == clock.now + 300

    status = provider.cache_status()
    assert status.present is True
    assert status.valid is True
    assert status.seconds_remaining == 300


def test_cached_credential_is_reused_until_expiry(clock: FakeClock) -> None:
    strategy = FakeStrategy("html")
    provider = CachingTokenProvider(strategies=(strategy,), ttl_s=300, clock=clock)

    async def run() -> None:
        await provider.get_valid_token()
        clock.advance(299)
        await provider.get_valid_token()
        assert strategy.calls == 1

        clock.advance(1)
        assert provider.cache_status().valid is False
        await provider.get_valid_token()
        assert strategy.calls == 2

    asyncio.run(run())


def test_invalidate_forces_fresh_acquisition(clock: FakeClock) -> None:
    strategy = FakeStrategy("html")
    provider = CachingTokenProvider(strategies=(strategy,), ttl_s=300, clock=clock)

    asyncio.run(provider.get_valid_token())
    provider.invalidate()
    provider.invalidate()

    status = provider.cache_status()
    assert status.present is False
    assert status.valid is False
    assert status.seconds_remaining == 0

    asyncio.run(provider.get_valid_token())
    assert strategy.calls == 2


def test_strategies_are_tried_in_order_until_one_succeeds(clock: FakeClock) -> None:
    env = FakeStrategy("env", token=None)
    redirect = FakeStrategy("redirect", error=httpx.ConnectError("refused"))
    html = FakeStrategy("html", token="scraped-token-0123456789")
    degraded = FakeStrategy("degraded")
    provider = CachingTokenProvider(
        strategies=(env, redirect, html, degraded), ttl_s=60, clock=clock
    )

    credential = asyncio.run(provider.get_valid_token())

    assert credential.value == "scraped-token-0123456789"
    assert (env.calls, redirect.calls, html.calls, degraded.calls) == (1, 1, 1, 0)


def test_all_strategies_failing_raises_acquisition_error(clock: FakeClock) -> None:
    timeout = httpx.ReadTimeout("slow upstream")
    provider = CachingTokenProvider(
        strategies=(FakeStrategy("html", token=None), FakeStrategy("degraded", error=timeout)),
        clock=clock,
    )

    with pytest.raises(AcquisitionError) as exc_info:
        asyncio.run(provider.get_valid_token())

    err = exc_info.value
    assert err.cause is timeout
    assert err.__cause__ is timeout
    assert err.attempted == ("html", "degraded")
    assert err.http_status == 504
    assert provider.cache_status().present is False


def test_failed_refresh_keeps_nothing_and_next_call_retries(clock: FakeClock) -> None:
    strategy = FakeStrategy("html", token=None)
    provider = CachingTokenProvider(strategies=(strategy,), clock=clock)

    with pytest.raises(AcquisitionError) as exc_info:
        asyncio.run(provider.get_valid_token())
    assert exc_info.value.http_status == 503

    strategy.token = GOOD_TOKEN
    assert asyncio.run(provider.get_valid_token()).value == GOOD_TOKEN
    assert strategy.calls == 2


def test_concurrent_callers_share_one_refresh(clock: FakeClock) -> None:
    strategy = FakeStrategy("html", delay_s=0.01)
    provider = CachingTokenProvider(strategies=(strategy,), ttl_s=300, clock=clock)

    async def run() -> list[str]:
        creds = await asyncio.gather(*(provider.get_valid_token() for _ in range(8)))
        return [c.value for c in creds]

    values = asyncio.run(run())

    assert values == [GOOD_TOKEN] * 8
    assert strategy.calls == 1


def test_concurrent_waiters_share_one_failed_refresh(clock: FakeClock) -> None:
    strategy = FakeStrategy("html", token=None, delay_s=0.01)
    provider = CachingTokenProvider(strategies=(strategy,), clock=clock)

    async def run() -> tuple[list[object], Credential]:
        results = await asyncio.gather(
            *(provider.get_valid_token() for _ in range(5)), return_exceptions=True
        )
        strategy.token = GOOD_TOKEN
        return results, await provider.get_valid_token()

    results, credential = asyncio.run(run())

    assert all(isinstance(r, AcquisitionError) for r in results)
    assert len({id(r) for r in results}) == 1
    # The next caller after the failure starts a fresh refresh.
    assert credential.value == GOOD_TOKEN
    assert strategy.calls == 2


def test_transport_timeouts_across_all_strategies_map_to_gateway_timeout(
    clock: FakeClock,
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("upstream stalled", request=request)

    async def no_sleep(_: float) -> None:
        return None

    async def run() -> Credential:
        async with mock_client(handler) as client:
            provider = CachingTokenProvider(
                strategies=(
                    HtmlScrapeStrategy(client=client, base_url=BASE_URL),
                    DegradedScrapeStrategy(client=client, base_url=BASE_URL, sleep=no_sleep),
                ),
                clock=clock,
            )
            return await provider.get_valid_token()

    with pytest.raises(AcquisitionError) as exc_info:
        asyncio.run(run())

    err = exc_info.value
    assert err.attempted == ("html", "degraded")
    assert isinstance(err.cause, TokenNotFound)
    assert isinstance(err.cause.__cause__, httpx.ReadTimeout)
    assert err.timeout is True
    assert err.http_status == 504
