from __future__ import annotations


class LlegapoError(Exception):
    """Base exception for the transit core.

    `http_status` is the status the HTTP layer should answer with.
    """

    http_status: int = 500


class ValidationError(LlegapoError):
    """Raised when a caller-supplied stop or service code is malformed."""

    http_status = 400

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class AcquisitionError(LlegapoError):
    """Raised when every token acquisition strategy failed.

    `timeout` is set when the last failure traces back to a timeout.
    """

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        attempted: tuple[str, ...] = (),
        timeout: bool = False,
    ) -> None:
        super().__init__(message)
        self.cause = cause
        self.attempted = attempted
        self.timeout = timeout

    @property
    def http_status(self) -> int:  # type: ignore[override]
        return 504 if self.timeout else 503


class UpstreamError(LlegapoError):
    """Raised when an upstream data endpoint fails or returns garbage."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
        timeout: bool = False,
        unparseable: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.timeout = timeout
        self.unparseable = unparseable

    @property
    def http_status(self) -> int:  # type: ignore[override]
        if self.timeout:
            return 504
        if self.unparseable:
            return 500
        return 502

