from __future__ import annotations
from dataclasses import dataclass

import httpx


@dataclass(frozen=True)
class ClientConfig:
    base_url: str
    token: str | None = None
    timeout_s: float = 10.0
    transport: httpx.BaseTransport | None = None
