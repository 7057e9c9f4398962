from .cloudflare import CloudflareClient, TokenVerification, verify_token
from .errors import ApiError, AuthError, NetworkError
from .polling import wait_until
from .public_ip import lookup_public_ip

__all__ = [
    "CloudflareClient",
    "TokenVerification",
    "verify_token",
    "ApiError",
    "AuthError",
    "NetworkError",
    "wait_until",
    "lookup_public_ip",
]
