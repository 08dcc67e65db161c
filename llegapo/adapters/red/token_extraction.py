from __future__ import annotations

import base64
import binascii
import re
from urllib.parse import parse_qs, urljoin, urlparse

MIN_TOKEN_LENGTH = 20

# Ordered from the exact upstream assignment to increasingly generic forms.
TOKEN_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"var\s+jwt\s*=\s*[\"']([^\"']+)[\"']"),
    re.compile(r"\$jwt\s*=\s*'([^']+)'"),
    re.compile(r"jwt\s*:\s*'([^']+)'"),
    re.compile(r"\"jwt\"\s*:\s*\"([^\"]+)\""),
    re.compile(r"token\s*:\s*'([^']+)'"),
)


class TokenNotFound(LookupError):
    """No acceptable token candidate in an upstream response."""


def decode_candidate(raw: str) -> str:
    """Base64-decode a candidate when it cleanly decodes to printable ASCII.

    Otherwise the raw value is returned unchanged.
    """

    value = raw.strip()
    try:
        decoded = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        return value
    try:
        text = decoded.decode("ascii")
    except UnicodeDecodeError:
        return value
    if not text or not text.isprintable():
        return value
    return text


def extract_token_from_html(
    html: str,
    patterns: tuple[re.Pattern[str], ...] = TOKEN_PATTERNS,
    *,
    min_length: int = MIN_TOKEN_LENGTH,
) -> str:
    """Return the first embedded token assignment found in `html`."""

    rejected = 0
    for pattern in patterns:
        for match in pattern.finditer(html):
            token = decode_candidate(match.group(1))
            if len(token) < min_length:
                rejected += 1
                continue
            return token
    if rejected:
        raise TokenNotFound(f"Only {rejected} too-short token candidate(s) found")
    raise TokenNotFound("No token assignment found in page")


def extract_token_from_location(
    location: str, base_url: str, *, min_length: int = MIN_TOKEN_LENGTH
) -> str:
    """Read the `t` query parameter of a (possibly relative) redirect target."""

    query = urlparse(urljoin(base_url + "/", location)).query
    values = parse_qs(query).get("t")
    if not values or not values[0].strip():
        raise TokenNotFound("Redirect location carries no 't' parameter")
    # parse_qs turns "+" into spaces; base64 payloads need them back.
    token = decode_candidate(values[0].replace(" ", "+"))
    if len(token) < min_length:
        raise TokenNotFound(f"Token candidate too short ({len(token)} < {min_length})")
    return token
