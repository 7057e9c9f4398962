from __future__ import annotations

import ipaddress
import logging

import httpx

PUBLIC_IP_URL = "https://api.ipify.org"

log = logging.getLogger(__name__)


def lookup_public_ip(
    url: str = PUBLIC_IP_URL,
    *,
    timeout_s: float = 10.0,
    transport: httpx.BaseTransport | None = None,
) -> str | None:
    """Return the host's public address as seen by an IP echo service, or None."""
    try:
        with httpx.Client(timeout=timeout_s, transport=transport, follow_redirects=True) as client:
            response = client.get(url)
    except httpx.RequestError as exc:
        log.debug("public IP lookup failed: %s", exc)
        return None
    if response.status_code >= 400:
        log.debug("public IP lookup returned HTTP %s", response.status_code)
        return None
    value = response.text.strip()
    try:
        ipaddress.ip_address(value)
    except ValueError:
        log.debug("public IP lookup returned unexpected body: %r", value[:100])
        return None
    return value
