from __future__ import annotations

import asyncio

import httpx

from fakes import BASE_URL, GOOD_TOKEN, mock_client
from llegapo.config import DEPLOYMENT, Settings
from llegapo.dependencies import get_token_provider, get_transit_service


def test_deployment_service_uses_provisioned_token_without_scraping() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        record = {"servicio": "405", "distanciabus1": "1 m", "horaprediccionbus1": "1 min"}
        return httpx.Response(200, json=[record])

    async def run() -> int:
        settings = Settings(base_url=BASE_URL, mode=DEPLOYMENT, provisioned_token=GOOD_TOKEN)
        async with mock_client(handler) as client:
            service = get_transit_service(settings, client)
            result = await service.get_formatted_arrivals("PC205")
            assert service.cache_status().valid is True
            return result.total_servicios

    assert asyncio.run(run()) == 1
    assert [r.url.path for r in seen] == ["/predictorPlus/prediccion"]
    assert seen[0].url.params["t"] == GOOD_TOKEN


def test_token_provider_ttl_follows_settings() -> None:
    settings = Settings(base_url=BASE_URL, mode=DEPLOYMENT, token_ttl_s=42.0)
    client = httpx.AsyncClient()
    try:
        provider = get_token_provider(settings, client)
    finally:
        asyncio.run(client.aclose())

    assert provider.ttl_s == 42.0
    assert [s.name for s in provider.strategies][-2:] == ["html", "degraded"]
