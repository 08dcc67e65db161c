from .gateway import RedUpstreamGateway
from .strategies import (
    DegradedScrapeStrategy,
    EnvironmentTokenStrategy,
    HtmlScrapeStrategy,
    RedirectHeaderStrategy,
    build_strategies,
)
from .token_provider import CachingTokenProvider

__all__ = [
    "CachingTokenProvider",
    "DegradedScrapeStrategy",
    "EnvironmentTokenStrategy",
    "HtmlScrapeStrategy",
    "RedUpstreamGateway",
    "RedirectHeaderStrategy",
    "build_strategies",
]
