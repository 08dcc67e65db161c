from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import ClassVar

import httpx

from llegapo.app.ports.output import ITokenAcquisitionStrategy
from llegapo.config import Settings

from .headers import (
    PROFILE_BROWSER,
    PROFILE_MINIMAL,
    PROFILE_PAGE,
    HeaderGenerator,
    JitterDelay,
    RotatingUserAgentHeaders,
    no_jitter,
)
from .token_extraction import (
    TokenNotFound,
    extract_token_from_html,
    extract_token_from_location,
)

logger = logging.getLogger(__name__)

PREDICTOR_PATH = "/predictorPlus/prediccion"
HOME_PATH = "/Home/"
ARRIVALS_PAGE_PATH = "/planifica-tu-viaje/cuando-llega/"

DEFAULT_DEGRADED_PAGES: tuple[tuple[str, str], ...] = (
    (ARRIVALS_PAGE_PATH + "?codsimt=PC205", PROFILE_MINIMAL),
    ("/", PROFILE_PAGE),
    (HOME_PATH, PROFILE_BROWSER),
)

Sleep = Callable[[float], Awaitable[None]]


async def _fetch_page(
    client: httpx.AsyncClient, url: str, headers: dict[str, str]
) -> str:
    start = time.monotonic()
    resp = await client.get(url, headers=headers)
    duration_ms = int((time.monotonic() - start) * 1000)
    logger.debug(
        "Fetched %s status=%d duration=%dms ct=%s length=%d",
        url,
        resp.status_code,
        duration_ms,
        resp.headers.get("content-type"),
        len(resp.text),
    )
    if resp.status_code >= 400:
        logger.warning(
            "Upstream returned status %d for %s. Preview: %s",
            resp.status_code,
            url,
            resp.text[:500],
        )
    return resp.text


@dataclass(slots=True)
class EnvironmentTokenStrategy(ITokenAcquisitionStrategy):
    """Uses a token provisioned out of band (no network call)."""

    name: ClassVar[str] = "env"

    token: str | None = None

    async def acquire(self) -> str:
        value = (self.token or "").strip()
        if not value:
            raise TokenNotFound("No pre-provisioned token configured")
        return value


@dataclass(slots=True)
class RedirectHeaderStrategy(ITokenAcquisitionStrategy):
    """Reads the token from the redirect the predictor answers tokenless calls with."""

    name: ClassVar[str] = "redirect"

    client: httpx.AsyncClient
    base_url: str
    headers: HeaderGenerator = field(default_factory=RotatingUserAgentHeaders)
    probe_stop_code: str = "PA10"

    async def acquire(self) -> str:
        url = f"{self.base_url}{PREDICTOR_PATH}"
        resp = await self.client.get(
            url,
            params={"codsimt": self.probe_stop_code, "codser": ""},
            headers=self.headers.headers(
                PROFILE_MINIMAL, referer=f"{self.base_url}{ARRIVALS_PAGE_PATH}"
            ),
            follow_redirects=False,
        )
        location = resp.headers.get("location")
        if not location:
            raise TokenNotFound(
                f"Predictor answered status {resp.status_code} without a redirect location"
            )
        return extract_token_from_location(location, self.base_url)


@dataclass(slots=True)
class HtmlScrapeStrategy(ITokenAcquisitionStrategy):
    """Scrapes the token assignment embedded in a known upstream page."""

    name: ClassVar[str] = "html"

    client: httpx.AsyncClient
    base_url: str
    headers: HeaderGenerator = field(default_factory=RotatingUserAgentHeaders)
    page_path: str = HOME_PATH
    jitter: JitterDelay = no_jitter

    async def acquire(self) -> str:
        await self.jitter()
        url = f"{self.base_url}{self.page_path}"
        html = await _fetch_page(self.client, url, self.headers.headers(PROFILE_PAGE))
        return extract_token_from_html(html)


@dataclass(slots=True)
class DegradedScrapeStrategy(ITokenAcquisitionStrategy):
    """Retries the HTML scrape over alternate pages with richer headers.

    Meant for networks where the plain scrape gets blocked or served a
    stripped page.
    """

    name: ClassVar[str] = "degraded"

    client: httpx.AsyncClient
    base_url: str
    headers: HeaderGenerator = field(default_factory=RotatingUserAgentHeaders)
    pages: tuple[tuple[str, str], ...] = DEFAULT_DEGRADED_PAGES
    backoff_s: float = 1.5
    sleep: Sleep = asyncio.sleep
    jitter: JitterDelay = no_jitter

    async def acquire(self) -> str:
        last_error: Exception | None = None
        for i, (path, profile) in enumerate(self.pages):
            if i > 0 and self.backoff_s > 0:
                await self.sleep(self.backoff_s)
            await self.jitter()

            url = f"{self.base_url}{path}"
            referer = f"{self.base_url}/" if profile == PROFILE_BROWSER else None
            try:
                html = await _fetch_page(
                    self.client, url, self.headers.headers(profile, referer=referer)
                )
                return extract_token_from_html(html)
            except (httpx.HTTPError, TokenNotFound) as exc:
                logger.info(
                    "Degraded scrape attempt %d/%d on %s failed: %s",
                    i + 1,
                    len(self.pages),
                    path,
                    exc,
                )
                last_error = exc

        raise TokenNotFound(
            f"No token found on {len(self.pages)} alternate pages"
        ) from last_error


def build_strategies(
    settings: Settings,
    client: httpx.AsyncClient,
    *,
    headers: HeaderGenerator | None = None,
    jitter: JitterDelay = no_jitter,
    sleep: Sleep = asyncio.sleep,
) -> tuple[ITokenAcquisitionStrategy, ...]:
    """Ordered strategy list for the configured deployment mode."""

    base_url = settings.base_url or ""
    header_gen = headers or RotatingUserAgentHeaders(user_agents=settings.user_agents)

    strategies: list[ITokenAcquisitionStrategy] = []
    if settings.is_deployment:
        for key in settings.deployment_strategy_order:
            if key == "env":
                strategies.append(EnvironmentTokenStrategy(token=settings.provisioned_token))
            elif key == "redirect":
                strategies.append(
                    RedirectHeaderStrategy(client=client, base_url=base_url, headers=header_gen)
                )

    strategies.append(
        HtmlScrapeStrategy(client=client, base_url=base_url, headers=header_gen, jitter=jitter)
    )
    strategies.append(
        DegradedScrapeStrategy(
            client=client,
            base_url=base_url,
            headers=header_gen,
            backoff_s=settings.degraded_backoff_s,
            sleep=sleep,
            jitter=jitter,
        )
    )
    return tuple(strategies)
