from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path

KEY_API_TOKEN = "CLOUDFLARE_API_TOKEN"
KEY_EMAIL = "CERTBOT_EMAIL"
KEY_DOMAINS = "CERTBOT_DOMAINS"
CREDENTIAL_KEYS = (KEY_API_TOKEN, KEY_EMAIL, KEY_DOMAINS)

# value shipped in the upstream bundle's sample .env
PLACEHOLDER_TOKEN = "XXXXXXXXXXXXXXXXXX"

ROOT_OWNER = (0, 0)

# KEY=value, optionally prefixed with "export"
_ENV_LINE_RE = re.compile(r"^\s*(export\s+)?([A-Za-z_][A-Za-z0-9_]*)\s*=(.*)$")


@dataclass(frozen=True)
class CredentialRecord:
    domain: str
    api_token: str

    @property
    def email(self) -> str:
        return f"admin@{self.domain}"

    def as_env(self) -> dict[str, str]:
        return {
            KEY_API_TOKEN: self.api_token,
            KEY_EMAIL: self.email,
            KEY_DOMAINS: self.domain,
        }


def read_credentials(path: Path) -> dict[str, str]:
    if not path.exists():
        return {}
    data: dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        match = _ENV_LINE_RE.match(line)
        if match:
            data.setdefault(match.group(2), match.group(3).strip())
    return data


def load_saved_domain(path: Path) -> str | None:
    domain = read_credentials(path).get(KEY_DOMAINS, "")
    return domain or None


def load_saved_token(path: Path) -> str | None:
    token = read_credentials(path).get(KEY_API_TOKEN, "")
    if not token or token == PLACEHOLDER_TOKEN:
        return None
    return token


def render_credentials(record: CredentialRecord) -> str:
    return "".join(f"{key}={value}\n" for key, value in record.as_env().items())


def update_credentials_content(content: str, record: CredentialRecord) -> str:
    """Rewrite the value of each credential key in ``content``.

    Other lines are kept as they are. A key seen more than once keeps its first
    line only, and a key that is absent is appended at the end.
    """
    values = record.as_env()
    seen: set[str] = set()
    out: list[str] = []
    for line in content.splitlines():
        match = _ENV_LINE_RE.match(line)
        key = match.group(2) if match else None
        if key in values:
            if key in seen:
                continue
            seen.add(key)
            out.append(f"{match.group(1) or ''}{key}={values[key]}")
            continue
        out.append(line)
    for key in CREDENTIAL_KEYS:
        if key not in seen:
            out.append(f"{key}={values[key]}")
    return "\n".join(out) + "\n"


def write_credentials(path: Path, record: CredentialRecord, *, owner: tuple[int, int] = ROOT_OWNER) -> bool:
    """Create or update the credential file. Returns True when it was created."""
    created = not path.exists()
    if created:
        path.parent.mkdir(parents=True, exist_ok=True)
        content = render_credentials(record)
    else:
        content = update_credentials_content(path.read_text(encoding="utf-8"), record)
    path.write_text(content, encoding="utf-8")
    os.chmod(path, 0o600)
    os.chown(path, *owner)
    return created
