from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable

from dnsetup_client import ApiError, NetworkError, verify_token as cloudflare_verify_token

from . import console, interactive
from .config import AppConfig
from .credentials import CredentialRecord, load_saved_domain, load_saved_token
from .validation import validate_domain, validate_token_format

log = logging.getLogger(__name__)

TokenVerifier = Callable[[str], bool]

TOKEN_GUIDE = (
    "If you don't have an API Token yet, follow these steps:",
    "",
    "  1. Open https://dash.cloudflare.com/profile/api-tokens",
    "  2. Click 'Create Token'",
    "  3. Choose the 'Edit zone DNS' template",
    "  4. Click 'Continue to summary', then 'Create Token'",
    "  5. Copy the token",
    "",
    "An API Token usually looks like: Aq9KZsM0yXHfV3BNe4cWb2tEPLoRrG8iJdYUh1m7F5O6k",
)


@dataclass(frozen=True)
class InstallInputs:
    domain: str = ""
    api_token: str = ""
    saved_domain: str | None = None

    @property
    def email(self) -> str:
        return f"admin@{self.domain}"

    @property
    def credentials(self) -> CredentialRecord:
        return CredentialRecord(domain=self.domain, api_token=self.api_token)

    @property
    def domain_changed(self) -> bool:
        return bool(self.saved_domain) and self.saved_domain != self.domain


def make_token_verifier(cfg: AppConfig) -> TokenVerifier:
    def _verify(token: str) -> bool:
        console.info("Verifying Cloudflare API token...")
        try:
            result = cloudflare_verify_token(token, base_url=cfg.cloudflare_api_url)
        except NetworkError as exc:
            console.err(f"Could not reach Cloudflare: {exc}")
            return False
        except ApiError as exc:
            console.err(f"Unexpected response from Cloudflare: {exc}")
            return False
        if not result.is_active:
            log.debug("token rejected: status=%s errors=%s", result.status, result.errors)
        return result.is_active

    return _verify


def collect_domain(inputs: InstallInputs) -> InstallInputs:
    if inputs.saved_domain:
        console.info(f"Found saved domain: {inputs.saved_domain}")
        if interactive.confirm_choice("Use the saved domain?", default=True):
            console.ok(f"Using saved domain: {inputs.saved_domain}")
            return replace(inputs, domain=inputs.saved_domain)

    console.print()
    while True:
        domain = interactive.prompt_text("Enter the domain you want to use (e.g. dns.example.com)")
        if validate_domain(domain):
            console.ok(f"Valid domain: {domain}")
            return replace(inputs, domain=domain)
        console.err("Invalid domain. Please try again.")


def collect_token(inputs: InstallInputs, *, saved_token: str | None, verify: TokenVerifier) -> InstallInputs:
    if saved_token:
        console.info("Found saved Cloudflare API token.")
        if interactive.confirm_choice("Use the saved token?", default=True):
            if verify(saved_token):
                console.ok("Using saved API token.")
                return replace(inputs, api_token=saved_token)
            console.err("Saved token is invalid or inactive. Please enter a new one.")

    console.print()
    for line in TOKEN_GUIDE:
        console.print(line)
    console.print()
    while True:
        token = interactive.prompt_text("Enter Cloudflare API Token", hide_input=True)
        if not validate_token_format(token):
            console.err("Invalid API token format (at least 40 ASCII characters, no spaces). Please try again.")
            continue
        if verify(token):
            console.ok("API token is valid and active.")
            return replace(inputs, api_token=token)
        console.err("API token is incorrect or inactive. Please check the token and its permissions.")


def collect_inputs(cfg: AppConfig, *, verify: TokenVerifier) -> InstallInputs:
    inputs = InstallInputs(saved_domain=load_saved_domain(cfg.env_path))
    inputs = collect_domain(inputs)
    console.info(f"SSL certificate email: {inputs.email}")

    console.print()
    console.banner("Cloudflare API Token")
    return collect_token(inputs, saved_token=load_saved_token(cfg.env_path), verify=verify)
