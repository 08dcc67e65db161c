from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Credential:
    """Bearer token for the upstream arrivals endpoint.

    Timestamps are epoch seconds taken from the owning provider's clock.
    """

    value: str
    acquired_at: float
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return bool(self.value) and now < self.expires_at

    def seconds_remaining(self, now: float) -> int:
        return max(0, int(self.expires_at - now))

    @property
    def preview(self) -> str:
        # Safe for logs.
        return f"{self.value[:10]}...(redacted)" if self.value else "none"


@dataclass(frozen=True, slots=True)
class CacheStatus:
    present: bool
    seconds_remaining: int
    valid: bool
