from __future__ import annotations

import re
from pathlib import Path

from .errors import MissingConfigError

MAXMEMORY_RE = re.compile(r"--maxmemory [0-9]*mb")
_HOST_CHARS = r"A-Za-z0-9-"


def _placeholder_re(placeholder: str) -> re.Pattern[str]:
    # Only whole hostnames or a wildcard "*." prefix; a placeholder embedded in
    # a longer name (which is what a substituted domain can look like) must not
    # match again.
    return re.compile(
        rf"(?:(?<![{_HOST_CHARS}.])|(?<=\*\.)){re.escape(placeholder)}(?![{_HOST_CHARS}]|\.[{_HOST_CHARS}])"
    )


def replace_domain(text: str, placeholder: str, domain: str) -> str:
    return _placeholder_re(placeholder).sub(lambda _m: domain, text)


def patch_domain(path: Path, placeholder: str, domain: str) -> bool:
    """Replace the placeholder domain in ``path``. Returns True if the file changed."""
    if not path.is_file():
        raise MissingConfigError(f"Resolver config file not found: {path}")
    text = path.read_text(encoding="utf-8")
    patched = replace_domain(text, placeholder, domain)
    if patched == text:
        return False
    path.write_text(patched, encoding="utf-8")
    return True


def read_total_ram_mb(meminfo: Path = Path("/proc/meminfo")) -> int:
    for line in meminfo.read_text(encoding="utf-8").splitlines():
        if line.startswith("MemTotal:"):
            parts = line.split()
            return int(parts[1]) // 1024
    raise ValueError(f"MemTotal not found in {meminfo}")


def redis_memory_mb(total_ram_mb: int) -> int:
    return total_ram_mb // 2


def replace_maxmemory(text: str, memory_mb: int) -> str:
    return MAXMEMORY_RE.sub(f"--maxmemory {int(memory_mb)}mb", text)


def patch_maxmemory(path: Path, memory_mb: int) -> bool:
    """Set the Redis ``--maxmemory`` flag in the compose file, if there is one."""
    if not path.is_file():
        return False
    text = path.read_text(encoding="utf-8")
    patched = replace_maxmemory(text, memory_mb)
    if patched == text:
        return False
    path.write_text(patched, encoding="utf-8")
    return True
