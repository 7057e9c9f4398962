from __future__ import annotations

import logging
import os
import stat
import tarfile
import tempfile
from pathlib import Path, PurePosixPath

import httpx

from .errors import ProvisionError

log = logging.getLogger(__name__)

DISCARDED_FILES = ("LICENSE", "README.md")
DOWNLOAD_TIMEOUT = httpx.Timeout(30.0, read=None)


def download_archive(url: str, dest: Path, *, transport: httpx.BaseTransport | None = None) -> None:
    log.debug("downloading %s", url)
    try:
        with httpx.Client(timeout=DOWNLOAD_TIMEOUT, follow_redirects=True, transport=transport) as client:
            with client.stream("GET", url) as response:
                if response.status_code >= 400:
                    raise ProvisionError(f"Project download failed: HTTP {response.status_code} from {url}")
                with dest.open("wb") as f:
                    for chunk in response.iter_bytes():
                        f.write(chunk)
    except httpx.HTTPError as exc:
        raise ProvisionError(f"Project download failed: {exc}") from exc


def _stripped_members(tar: tarfile.TarFile) -> list[tarfile.TarInfo]:
    members: list[tarfile.TarInfo] = []
    for member in tar.getmembers():
        parts = PurePosixPath(member.name).parts[1:]
        if not parts:
            continue
        if any(part == ".." for part in parts) or PurePosixPath(member.name).is_absolute():
            raise ProvisionError(f"Refusing to extract unsafe archive member: {member.name}")
        if member.isdev():
            log.debug("skipping device member %s", member.name)
            continue
        if member.islnk():
            link_parts = PurePosixPath(member.linkname).parts[1:]
            member.linkname = str(PurePosixPath(*link_parts)) if link_parts else ""
        member.name = str(PurePosixPath(*parts))
        members.append(member)
    return members


def extract_archive(archive: Path, dest: Path) -> list[str]:
    """Extract a .tar.gz into ``dest`` without its top-level directory."""
    dest.mkdir(parents=True, exist_ok=True)
    try:
        with tarfile.open(archive, "r:gz") as tar:
            members = _stripped_members(tar)
            tar.extractall(dest, members=members, filter="data")
    except tarfile.TarError as exc:
        raise ProvisionError(f"Project archive is not a valid tarball: {exc}") from exc
    return [m.name for m in members]


def tidy_bundle(root: Path) -> None:
    for name in DISCARDED_FILES:
        path = root / name
        if path.is_file():
            path.unlink()
    for script in root.glob("*.sh"):
        mode = script.stat().st_mode
        os.chmod(script, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def fetch_bundle(url: str, dest: Path, *, transport: httpx.BaseTransport | None = None) -> list[str]:
    with tempfile.TemporaryDirectory(prefix="dnsetup-") as tmp:
        archive = Path(tmp) / "bundle.tar.gz"
        download_archive(url, archive, transport=transport)
        names = extract_archive(archive, dest)
    tidy_bundle(dest)
    return names
