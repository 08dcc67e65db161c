from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from llegapo.app.ports.output import ITokenProvider, ITransitGateway
from llegapo.domain.exceptions import UpstreamError
from llegapo.domain.models import ArrivalRecord, ServiceRoute
from llegapo.domain.validation import clean_code

from .headers import PROFILE_API, HeaderGenerator, RotatingUserAgentHeaders
from .payloads import normalize_arrivals, normalize_route
from .strategies import ARRIVALS_PAGE_PATH, PREDICTOR_PATH

logger = logging.getLogger(__name__)

ROUTE_PATH = "/restservice_v2/rest/conocerecorrido"


@dataclass(slots=True)
class RedUpstreamGateway(ITransitGateway):
    """Reads arrivals and routes from red.cl.

    Arrivals need a token from the provider; routes are public. Neither call
    is retried here.
    """

    client: httpx.AsyncClient
    token_provider: ITokenProvider
    base_url: str = "https://www.red.cl"
    timeout_s: float = 10.0
    headers: HeaderGenerator = field(default_factory=RotatingUserAgentHeaders)

    async def get_arrivals(self, stop_code: str) -> tuple[ArrivalRecord, ...]:
        code = clean_code(stop_code)
        credential = await self.token_provider.get_valid_token()

        logger.info("Fetching arrivals for stop %s", code)
        payload = await self._get_json(
            f"{self.base_url}{PREDICTOR_PATH}",
            params={"t": credential.value, "codsimt": code, "codser": ""},
            code=code,
            label="arrivals",
            referer=f"{self.base_url}{ARRIVALS_PAGE_PATH}",
        )

        arrivals = normalize_arrivals(payload)
        logger.info("Stop %s: %d services", code, len(arrivals))
        return arrivals

    async def get_route(self, service_code: str) -> ServiceRoute:
        code = clean_code(service_code)

        logger.info("Fetching route for service %s", code)
        payload = await self._get_json(
            f"{self.base_url}{ROUTE_PATH}",
            params={"codsint": code},
            code=code,
            label="route",
        )

        route = normalize_route(code, payload)
        logger.info(
            "Service %s: ida=%s regreso=%s",
            code,
            route.ida is not None,
            route.regreso is not None,
        )
        return route

    async def _get_json(
        self,
        url: str,
        *,
        params: dict[str, str],
        code: str,
        label: str,
        referer: str | None = None,
    ) -> Any:
        try:
            resp = await self.client.get(
                url,
                params=params,
                headers=self.headers.headers(PROFILE_API, referer=referer),
                timeout=self.timeout_s,
            )
            resp.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.error("Upstream %s request for %s timed out: %s", label, code, exc)
            raise UpstreamError(
                f"Upstream {label} request for {code} timed out",
                code=code,
                timeout=True,
            ) from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.error(
                "Upstream %s request for %s failed: status=%d ct=%s body=%s",
                label,
                code,
                status,
                exc.response.headers.get("content-type"),
                exc.response.text[:500],
            )
            if label == "arrivals" and (status in (401, 403) or 300 <= status < 400):
                # Upstream bounces stale tokens; force a fresh one next call.
                self.token_provider.invalidate()
            raise UpstreamError(
                f"Upstream {label} request for {code} failed with status {status}",
                status_code=status,
                code=code,
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("Upstream %s request for %s failed: %s", label, code, exc)
            raise UpstreamError(
                f"Upstream {label} request for {code} failed: {exc}",
                code=code,
            ) from exc

        try:
            return resp.json()
        except ValueError as exc:
            logger.error(
                "Unparseable upstream %s body for %s: %s", label, code, resp.text[:500]
            )
            raise UpstreamError(
                f"Upstream {label} response for {code} is not valid JSON",
                status_code=resp.status_code,
                code=code,
                unparseable=True,
            ) from exc
