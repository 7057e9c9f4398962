import os
import stat

from dnsetup_cli import credentials
from dnsetup_cli.credentials import CredentialRecord, write_credentials

TOKEN = "T" * 45


def _owner() -> tuple[int, int]:
    return os.getuid(), os.getgid()


def test_create_writes_three_keys_owner_only(tmp_path) -> None:
    path = tmp_path / ".env"
    record = CredentialRecord(domain="dns.example.com", api_token=TOKEN)

    created = write_credentials(path, record, owner=_owner())

    assert created is True
    assert path.read_text(encoding="utf-8") == (
        f"CLOUDFLARE_API_TOKEN={TOKEN}\n"
        "CERTBOT_EMAIL=admin@dns.example.com\n"
        "CERTBOT_DOMAINS=dns.example.com\n"
    )
    assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_write_is_idempotent(tmp_path) -> None:
    path = tmp_path / ".env"
    record = CredentialRecord(domain="dns.example.com", api_token=TOKEN)

    write_credentials(path, record, owner=_owner())
    first = path.read_bytes()
    first_mode = stat.S_IMODE(path.stat().st_mode)
    created = write_credentials(path, record, owner=_owner())

    assert created is False
    assert path.read_bytes() == first
    assert stat.S_IMODE(path.stat().st_mode) == first_mode == 0o600


def test_update_keeps_other_lines(tmp_path) -> None:
    path = tmp_path / ".env"
    path.write_text(
        "# shipped with the bundle\n"
        "TZ=Asia/Ho_Chi_Minh\n"
        "CLOUDFLARE_API_TOKEN=XXXXXXXXXXXXXXXXXX\n"
        "CERTBOT_EMAIL=admin@dns.bibica.net\n"
        "CERTBOT_DOMAINS=dns.bibica.net\n",
        encoding="utf-8",
    )
    os.chmod(path, 0o644)

    write_credentials(path, CredentialRecord(domain="dns.example.com", api_token=TOKEN), owner=_owner())

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines == [
        "# shipped with the bundle",
        "TZ=Asia/Ho_Chi_Minh",
        f"CLOUDFLARE_API_TOKEN={TOKEN}",
        "CERTBOT_EMAIL=admin@dns.example.com",
        "CERTBOT_DOMAINS=dns.example.com",
    ]
    assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_update_appends_missing_and_collapses_duplicates(tmp_path) -> None:
    path = tmp_path / ".env"
    path.write_text(
        "export CLOUDFLARE_API_TOKEN=OLD\n"
        "CERTBOT_DOMAINS=old.example.com\nCERTBOT_DOMAINS=older.example.com\n"
        "  CLOUDFLARE_API_TOKEN = OLDER\n",
        encoding="utf-8",
    )

    write_credentials(path, CredentialRecord(domain="dns.example.com", api_token=TOKEN), owner=_owner())

    data = path.read_text(encoding="utf-8")
    for key in credentials.CREDENTIAL_KEYS:
        assert data.count(f"{key}=") == 1
    assert "CERTBOT_DOMAINS=dns.example.com\n" in data
    assert f"export CLOUDFLARE_API_TOKEN={TOKEN}\n" in data
    assert "OLD" not in data
    assert credentials.load_saved_token(path) == TOKEN


def test_write_sets_requested_owner(tmp_path, monkeypatch) -> None:
    calls = []
    monkeypatch.setattr(credentials.os, "chown", lambda path, uid, gid: calls.append((str(path), uid, gid)))
    path = tmp_path / ".env"

    write_credentials(path, CredentialRecord(domain="dns.example.com", api_token=TOKEN))

    assert calls == [(str(path), 0, 0)]


def test_saved_values(tmp_path) -> None:
    path = tmp_path / ".env"
    assert credentials.load_saved_domain(path) is None
    assert credentials.load_saved_token(path) is None

    path.write_text(
        "CLOUDFLARE_API_TOKEN=XXXXXXXXXXXXXXXXXX\nCERTBOT_DOMAINS=dns.example.com\n",
        encoding="utf-8",
    )
    assert credentials.load_saved_domain(path) == "dns.example.com"
    assert credentials.load_saved_token(path) is None

    path.write_text(f"export CLOUDFLARE_API_TOKEN={TOKEN}\nCERTBOT_DOMAINS=\n", encoding="utf-8")
    assert credentials.load_saved_token(path) == TOKEN
    assert credentials.load_saved_domain(path) is None
