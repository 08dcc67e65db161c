from __future__ import annotations

import os
from dataclasses import dataclass

DEPLOYMENT = "deployment"
INTERACTIVE = "interactive"

DEFAULT_USER_AGENTS: tuple[str, ...] = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
)


@dataclass(slots=True)
class Settings:
    """Runtime configuration for the red.cl core.

    Env vars:
      - RED_BASE_URL: upstream host (default https://www.red.cl)
      - RED_DEPLOYMENT_MODE: 'interactive' (scrape HTML) or 'deployment'
        (pre-provisioned token / redirect header). APP_ENV=production also
        selects deployment mode.
      - RED_JWT_TOKEN: pre-provisioned token, deployment mode only
      - RED_TIMEOUT_S: per-call timeout (default 10)
      - RED_TOKEN_TTL_S: credential lifetime (default 1800 deployed, 300 otherwise)
      - RED_TOKEN_STRATEGY_ORDER: 'env,redirect' or 'redirect,env'
      - RED_USER_AGENTS: optional ';'-separated User-Agent pool
      - RED_DEGRADED_BACKOFF_S: pause between degraded scrape attempts (default 1.5)
    """

    base_url: str | None = None
    mode: str | None = None
    provisioned_token: str | None = None
    timeout_s: float = 10.0
    token_ttl_s: float | None = None
    deployment_strategy_order: tuple[str, ...] = ("env", "redirect")
    user_agents: tuple[str, ...] = DEFAULT_USER_AGENTS
    degraded_backoff_s: float = 1.5

    def __post_init__(self) -> None:
        if self.base_url is None:
            self.base_url = os.getenv("RED_BASE_URL", "https://www.red.cl")
        self.base_url = self.base_url.rstrip("/")

        if self.mode is None:
            raw_mode = (os.getenv("RED_DEPLOYMENT_MODE") or "").strip().lower()
            if raw_mode in {DEPLOYMENT, INTERACTIVE}:
                self.mode = raw_mode
            elif (os.getenv("APP_ENV") or "").strip().lower() == "production":
                self.mode = DEPLOYMENT
            else:
                self.mode = INTERACTIVE
        if self.mode not in {DEPLOYMENT, INTERACTIVE}:
            raise ValueError(f"Unknown deployment mode: {self.mode}")

        if self.provisioned_token is None:
            self.provisioned_token = (os.getenv("RED_JWT_TOKEN") or "").strip() or None

        if os.getenv("RED_TIMEOUT_S"):
            self.timeout_s = float(os.environ["RED_TIMEOUT_S"])

        if self.token_ttl_s is None:
            if os.getenv("RED_TOKEN_TTL_S"):
                self.token_ttl_s = float(os.environ["RED_TOKEN_TTL_S"])
            else:
                self.token_ttl_s = 1800.0 if self.mode == DEPLOYMENT else 300.0

        if os.getenv("RED_TOKEN_STRATEGY_ORDER"):
            order = tuple(
                part.strip().lower()
                for part in os.environ["RED_TOKEN_STRATEGY_ORDER"].split(",")
                if part.strip()
            )
            unknown = set(order) - {"env", "redirect"}
            if unknown:
                raise ValueError(f"Unknown token strategies: {sorted(unknown)}")
            self.deployment_strategy_order = order

        if os.getenv("RED_USER_AGENTS"):
            agents = tuple(
                ua.strip() for ua in os.environ["RED_USER_AGENTS"].split(";") if ua.strip()
            )
            if agents:
                self.user_agents = agents

        if os.getenv("RED_DEGRADED_BACKOFF_S"):
            self.degraded_backoff_s = float(os.environ["RED_DEGRADED_BACKOFF_S"])

    @property
    def is_deployment(self) -> bool:
        return self.mode == DEPLOYMENT
