from __future__ import annotations

import shutil
import threading
from datetime import datetime
from pathlib import Path
from typing import Protocol

from dnsetup_client.polling import wait_until

CERT_FILES = ("cert.pem", "privkey.pem", "fullchain.pem")


class CertificateStore(Protocol):
    def live_dir(self, domain: str) -> Path: ...

    def has_certificates(self, domain: str) -> bool: ...


class LetsEncryptStore:
    """Certificates certbot writes into the bundle's ``certbot/letsencrypt`` volume."""

    def __init__(self, live_root: Path) -> None:
        self.live_root = live_root

    def live_dir(self, domain: str) -> Path:
        return self.live_root / domain

    def missing_files(self, domain: str) -> list[str]:
        base = self.live_dir(domain)
        return [name for name in CERT_FILES if not (base / name).is_file()]

    def has_certificates(self, domain: str) -> bool:
        return not self.missing_files(domain)


def wait_for_certificates(
    store: CertificateStore,
    domain: str,
    *,
    timeout_s: float,
    interval_s: float,
    cancel: threading.Event | None = None,
) -> bool:
    return wait_until(
        lambda: store.has_certificates(domain),
        timeout_s=timeout_s,
        interval_s=interval_s,
        cancel=cancel,
    )


def backup_previous_certificates(
    certbot_dir: Path,
    store: CertificateStore,
    *,
    previous_domain: str | None,
    domain: str,
    now: datetime | None = None,
) -> Path | None:
    """Copy the old domain's live certificates aside when the domain changed."""
    if not previous_domain or previous_domain == domain:
        return None
    source = store.live_dir(previous_domain)
    if not source.is_dir():
        return None
    stamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
    backup_dir = certbot_dir / f"backup-{stamp}"
    backup_dir.mkdir(parents=True, exist_ok=True)
    shutil.copytree(source, backup_dir / previous_domain, symlinks=True)
    return backup_dir
