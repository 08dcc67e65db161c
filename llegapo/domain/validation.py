from __future__ import annotations

import re

from llegapo.domain.exceptions import ValidationError

_STOP_CODE_RE = re.compile(r"^[A-Za-z0-9]{2,10}$")
_SERVICE_CODE_RE = re.compile(r"^[A-Za-z0-9_-]{1,10}$")


def clean_code(raw: str) -> str:
    return raw.strip().upper()


def validate_stop_code(raw: object) -> str:
    """Validate a stop code ("codsimt") and return it trimmed and uppercased."""

    if not isinstance(raw, str) or not raw.strip():
        raise ValidationError("Stop code is required", field="stop_code")
    code = raw.strip()
    if not 2 <= len(code) <= 10:
        raise ValidationError(
            "Stop code must be between 2 and 10 characters", field="stop_code"
        )
    if not _STOP_CODE_RE.match(code):
        raise ValidationError(
            "Stop code may only contain letters and digits", field="stop_code"
        )
    return code.upper()


def validate_service_code(raw: object) -> str:
    """Validate a service code ("codser") and return it trimmed and uppercased."""

    if not isinstance(raw, str) or not raw.strip():
        raise ValidationError("Service code is required", field="service_code")
    code = raw.strip()
    if len(code) > 10:
        raise ValidationError(
            "Service code must be at most 10 characters", field="service_code"
        )
    if not _SERVICE_CODE_RE.match(code):
        raise ValidationError(
            "Service code contains invalid characters", field="service_code"
        )
    return code.upper()
