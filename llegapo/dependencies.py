from __future__ import annotations

import httpx

from llegapo.adapters.red import CachingTokenProvider, RedUpstreamGateway, build_strategies
from llegapo.adapters.red.headers import RotatingUserAgentHeaders
from llegapo.app.services.statistics import StopStatisticsCollector
from llegapo.app.services.transit_service import TransitService
from llegapo.config import Settings


def get_http_client(settings: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.timeout_s, follow_redirects=False)


def get_token_provider(
    settings: Settings, client: httpx.AsyncClient
) -> CachingTokenProvider:
    headers = RotatingUserAgentHeaders(user_agents=settings.user_agents)
    strategies = build_strategies(settings, client, headers=headers)
    return CachingTokenProvider(strategies=strategies, ttl_s=float(settings.token_ttl_s or 300.0))


def get_transit_service(
    settings: Settings | None = None, client: httpx.AsyncClient | None = None
) -> TransitService:
    """Wire the red.cl adapters into a TransitService.

    The caller owns `client` and should `aclose()` it on shutdown.
    """

    settings = settings or Settings()
    client = client or get_http_client(settings)

    token_provider = get_token_provider(settings, client)
    gateway = RedUpstreamGateway(
        client=client,
        token_provider=token_provider,
        base_url=settings.base_url or "https://www.red.cl",
        timeout_s=settings.timeout_s,
        headers=RotatingUserAgentHeaders(user_agents=settings.user_agents),
    )
    return TransitService(
        gateway=gateway,
        token_provider=token_provider,
        statistics=StopStatisticsCollector(gateway=gateway),
    )
