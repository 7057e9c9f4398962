from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .config_types import ClientConfig
from .errors import ApiError, AuthError
from .errors_utils import parse_api_error_detail
from .transport import Transport

CLOUDFLARE_API_URL = "https://api.cloudflare.com/client/v4"
TOKEN_ACTIVE_MESSAGE = "This API Token is valid and active"


@dataclass(frozen=True)
class TokenVerification:
    """Decoded body of ``GET /user/tokens/verify``.

    Only ``success`` and ``messages`` are read; the rest of the envelope is
    ignored. Messages may come as objects (``{"code": ..., "message": ...}``) or
    as bare strings, both are flattened to their text.
    """

    success: bool
    messages: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    status: str | None = None

    @property
    def is_active(self) -> bool:
        return self.success and TOKEN_ACTIVE_MESSAGE in self.messages

    @classmethod
    def from_payload(cls, payload: Any) -> "TokenVerification":
        if not isinstance(payload, dict):
            raise ApiError(200, "token verify returned a non-object body", str(payload)[:1000])
        success = payload.get("success")
        if not isinstance(success, bool):
            raise ApiError(200, "token verify response has no boolean 'success'", None)
        result = payload.get("result")
        status = None
        if isinstance(result, dict) and isinstance(result.get("status"), str):
            status = result["status"]
        return cls(
            success=success,
            messages=_message_texts(payload.get("messages")),
            errors=_message_texts(payload.get("errors")),
            status=status,
        )


def _message_texts(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        return []
    texts: list[str] = []
    for item in raw:
        if isinstance(item, str):
            texts.append(item)
        elif isinstance(item, dict) and isinstance(item.get("message"), str):
            texts.append(item["message"])
    return texts


class CloudflareClient:
    def __init__(self, cfg: ClientConfig):
        self._t = Transport(cfg)

    def close(self) -> None:
        self._t.close()

    def __enter__(self) -> "CloudflareClient":
        return self

    def __exit__(self, *_exc) -> None:
        self.close()

    def verify_token(self) -> TokenVerification:
        """Verify the bearer token the client was built with.

        Rejected tokens come back as 4xx with a regular envelope, so they are
        decoded instead of raised. Network failures raise ``NetworkError``.
        """
        try:
            data = self._t.request("GET", "/user/tokens/verify")
        except AuthError as exc:
            payload = parse_api_error_detail(exc.details)
            if payload is None:
                raise
            return TokenVerification.from_payload(payload)
        return TokenVerification.from_payload(data)


def verify_token(
    token: str,
    *,
    base_url: str = CLOUDFLARE_API_URL,
    timeout_s: float = 10.0,
    transport=None,
) -> TokenVerification:
    if not token.isascii():
        # httpx cannot encode it into the Authorization header
        return TokenVerification(success=False, errors=["token contains non-ASCII characters"])
    cfg = ClientConfig(base_url=base_url, token=token, timeout_s=timeout_s, transport=transport)
    with CloudflareClient(cfg) as client:
        return client.verify_token()
