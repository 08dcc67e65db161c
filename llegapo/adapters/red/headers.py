from __future__ import annotations

import asyncio
import random
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from llegapo.config import DEFAULT_USER_AGENTS

# Header profiles, from bare to most browser-like.
PROFILE_API = "api"
PROFILE_MINIMAL = "minimal"
PROFILE_PAGE = "page"
PROFILE_BROWSER = "browser"

JitterDelay = Callable[[], Awaitable[None]]


class HeaderGenerator(ABC):
    """Builds request headers for upstream calls."""

    @abstractmethod
    def headers(self, profile: str, *, referer: str | None = None) -> dict[str, str]:
        raise NotImplementedError


@dataclass(slots=True)
class RotatingUserAgentHeaders(HeaderGenerator):
    """Picks a User-Agent from a pool for every request."""

    user_agents: tuple[str, ...] = DEFAULT_USER_AGENTS
    rng: random.Random = field(default_factory=random.Random, repr=False)

    def user_agent(self) -> str:
        if not self.user_agents:
            return DEFAULT_USER_AGENTS[0]
        return self.rng.choice(self.user_agents)

    def headers(self, profile: str, *, referer: str | None = None) -> dict[str, str]:
        out = {"User-Agent": self.user_agent()}

        if profile == PROFILE_API:
            out["Accept"] = "application/json, text/plain, */*"
            out["Accept-Language"] = "es-CL,es;q=0.9,en;q=0.8"
        elif profile == PROFILE_PAGE:
            out["Accept"] = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
            out["Accept-Language"] = "es-CL,es;q=0.9,en;q=0.8"
            out["Cache-Control"] = "no-cache"
            out["Pragma"] = "no-cache"
        elif profile == PROFILE_BROWSER:
            out["Accept"] = (
                "text/html,application/xhtml+xml,application/xml;q=0.9,"
                "image/avif,image/webp,*/*;q=0.8"
            )
            out["Accept-Language"] = "es-CL,es;q=0.9,en-US;q=0.8,en;q=0.7"
            out["Cache-Control"] = "no-cache"
            out["Pragma"] = "no-cache"
            out["Connection"] = "keep-alive"
            out["Upgrade-Insecure-Requests"] = "1"
            out["Sec-Fetch-Dest"] = "document"
            out["Sec-Fetch-Mode"] = "navigate"
            out["Sec-Fetch-Site"] = "same-origin" if referer else "none"
            out["Sec-Fetch-User"] = "?1"
        else:
            out["Accept"] = "*/*"

        if referer:
            out["Referer"] = referer
        return out


async def no_jitter() -> None:
    return None


def random_jitter(max_s: float, *, rng: random.Random | None = None) -> JitterDelay:
    """Return a delay function sleeping a random 0..max_s seconds."""

    source = rng or random.Random()

    async def _delay() -> None:
        if max_s > 0:
            await asyncio.sleep(source.uniform(0.0, max_s))

    return _delay
