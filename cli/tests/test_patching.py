import pytest

from dnsetup_cli import patching
from dnsetup_cli.errors import MissingConfigError

PLACEHOLDER = "dns.bibica.net"

CONFIG = """\
log:
  level: info
servers:
  - protocol: https
    addr: :443
    cert: /etc/letsencrypt/live/dns.bibica.net/fullchain.pem
    key: /etc/letsencrypt/live/dns.bibica.net/privkey.pem
    server_name: dns.bibica.net
"""


@pytest.mark.parametrize("domain", ["dns.example.com", "x.dns.bibica.net", "dns.bibica.net.example.com"])
def test_patch_domain_is_idempotent(tmp_path, domain: str) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG, encoding="utf-8")

    assert patching.patch_domain(path, PLACEHOLDER, domain) is True
    first = path.read_text(encoding="utf-8")
    assert patching.patch_domain(path, PLACEHOLDER, domain) is False

    assert path.read_text(encoding="utf-8") == first
    assert first.count(domain) == 3


def test_patch_domain_replaces_every_occurrence(tmp_path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG, encoding="utf-8")

    patching.patch_domain(path, PLACEHOLDER, "dns.example.com")

    text = path.read_text(encoding="utf-8")
    assert PLACEHOLDER not in text
    assert "/etc/letsencrypt/live/dns.example.com/fullchain.pem" in text
    assert "server_name: dns.example.com\n" in text


def test_patch_domain_missing_file(tmp_path) -> None:
    with pytest.raises(MissingConfigError):
        patching.patch_domain(tmp_path / "missing.yaml", PLACEHOLDER, "dns.example.com")


@pytest.mark.parametrize("total,expected", [(1024, 512), (2001, 1000), (7973, 3986), (1, 0)])
def test_redis_memory_is_half_of_ram(total: int, expected: int) -> None:
    assert patching.redis_memory_mb(total) == expected


def test_patch_maxmemory(tmp_path) -> None:
    path = tmp_path / "compose.yml"
    path.write_text(
        "    command: redis-server --save 60 1 --maxmemory 256mb --maxmemory-policy allkeys-lru\n",
        encoding="utf-8",
    )

    assert patching.patch_maxmemory(path, 1986) is True
    assert "--maxmemory 1986mb --maxmemory-policy allkeys-lru" in path.read_text(encoding="utf-8")
    assert patching.patch_maxmemory(path, 1986) is False


def test_patch_maxmemory_without_compose_file(tmp_path) -> None:
    assert patching.patch_maxmemory(tmp_path / "compose.yml", 512) is False


def test_read_total_ram_mb(tmp_path) -> None:
    meminfo = tmp_path / "meminfo"
    meminfo.write_text(
        "MemTotal:        4030872 kB\nMemFree:          123456 kB\n",
        encoding="utf-8",
    )
    assert patching.read_total_ram_mb(meminfo) == 3936


def test_read_total_ram_mb_without_memtotal(tmp_path) -> None:
    meminfo = tmp_path / "meminfo"
    meminfo.write_text("MemFree: 1 kB\n", encoding="utf-8")
    with pytest.raises(ValueError):
        patching.read_total_ram_mb(meminfo)


@pytest.mark.parametrize("domain", ["dns.example.com", "x.dns.bibica.net"])
def test_patch_domain_rewrites_wildcard_names(tmp_path, domain: str) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("hosts:\n  - '*.dns.bibica.net'\n  - api.dns.bibica.net\n", encoding="utf-8")

    assert patching.patch_domain(path, PLACEHOLDER, domain) is True
    assert patching.patch_domain(path, PLACEHOLDER, domain) is False

    assert path.read_text(encoding="utf-8") == f"hosts:\n  - '*.{domain}'\n  - api.dns.bibica.net\n"
