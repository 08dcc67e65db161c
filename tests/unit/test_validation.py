from __future__ import annotations

import pytest

from llegapo.domain.exceptions import ValidationError
from llegapo.domain.validation import validate_service_code, validate_stop_code


def test_stop_code_is_trimmed_and_uppercased() -> None:
    assert validate_stop_code("  pc205 ") == "PC205"


@pytest.mark.parametrize("raw", ["", "   ", "P", "PC-205", "ABCDEFGHIJK", None, 205])
def test_invalid_stop_codes(raw) -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate_stop_code(raw)
    assert exc_info.value.http_status == 400
    assert exc_info.value.field == "stop_code"


def test_service_code_allows_hyphen_and_underscore() -> None:
    assert validate_service_code("b28-n_1") == "B28-N_1"
    assert validate_service_code("4") == "4"


@pytest.mark.parametrize("raw", ["", "405 e", "12345678901", "40$"])
def test_invalid_service_codes(raw) -> None:
    with pytest.raises(ValidationError):
        validate_service_code(raw)
