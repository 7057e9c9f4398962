from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from .errors import ApiError, AuthError, NetworkError
from .config_types import ClientConfig

USER_AGENT = "dnsetup-client/0.1.0"

log = logging.getLogger(__name__)


class Transport:
    def __init__(self, cfg: ClientConfig):
        self._cfg = cfg
        headers = {"User-Agent": USER_AGENT, "Content-Type": "application/json"}
        if cfg.token:
            headers["Authorization"] = f"Bearer {cfg.token}"

        self._client = httpx.Client(
            base_url=cfg.base_url.rstrip("/"),
            timeout=cfg.timeout_s,
            headers=headers,
            follow_redirects=True,
            transport=cfg.transport,
        )

    def close(self) -> None:
        self._client.close()

    def request(self, method: str, path: str, *, json_body: Any | None = None) -> Any:
        log.debug("%s %s%s", method, self._cfg.base_url.rstrip("/"), path)
        try:
            r = self._client.request(method, path, json=json_body)
        except httpx.RequestError as e:
            raise NetworkError(str(e)) from e

        data: Any = None
        text = None
        try:
            data = r.json()
        except ValueError:
            text = r.text

        if r.status_code >= 400:
            msg = f"{method} {path} failed with {r.status_code}"
            details = None

            if isinstance(data, dict):
                details = json.dumps(data, ensure_ascii=False)
                msg = _first_error_message(data) or msg
            elif text:
                details = text[:1000]

            if r.status_code in (401, 403):
                raise AuthError(r.status_code, msg, details)
            raise ApiError(r.status_code, msg, details)

        return data if data is not None else r.text


def _first_error_message(data: dict[str, Any]) -> str | None:
    errors = data.get("errors")
    if isinstance(errors, list):
        for item in errors:
            if isinstance(item, dict) and item.get("message"):
                return str(item["message"])
    return None
