from __future__ import annotations

import re

MAX_DOMAIN_LENGTH = 253
MIN_TOKEN_LENGTH = 40

_DOMAIN_RE = re.compile(r"^([a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?\.)+[a-zA-Z]{2,}$")


def validate_domain(domain: str) -> bool:
    if not domain or len(domain) > MAX_DOMAIN_LENGTH:
        return False
    if ".." in domain:
        return False
    return bool(_DOMAIN_RE.fullmatch(domain))


def validate_token_format(token: str) -> bool:
    """At least 40 visible ASCII characters; the token travels in an HTTP header."""
    token = token or ""
    if len(token) < MIN_TOKEN_LENGTH:
        return False
    return token.isascii() and token.isprintable() and not any(ch.isspace() for ch in token)
