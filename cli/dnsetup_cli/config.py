from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import tomli_w
from platformdirs import user_config_dir

from dnsetup_client.cloudflare import CLOUDFLARE_API_URL
from dnsetup_client.public_ip import PUBLIC_IP_URL

APP_NAME = "dnsetup"
CONFIG_FILENAME = "config.toml"
ENV_INSTALL_DIR = "DNSETUP_INSTALL_DIR"

DEFAULT_INSTALL_DIR = "/home"
DEFAULT_ARCHIVE_URL = "https://github.com/bibicadotnet/dns.bibica.net.v4/archive/HEAD.tar.gz"
DEFAULT_PLACEHOLDER_DOMAIN = "dns.bibica.net"
DEFAULT_CERT_WAIT_TIMEOUT = 120
DEFAULT_CERT_WAIT_INTERVAL = 5
DEFAULT_RENEWAL_SCHEDULE = "0 3 * * *"


@dataclass
class AppConfig:
    install_dir: str = DEFAULT_INSTALL_DIR
    archive_url: str = DEFAULT_ARCHIVE_URL
    cloudflare_api_url: str = CLOUDFLARE_API_URL
    public_ip_url: str = PUBLIC_IP_URL
    placeholder_domain: str = DEFAULT_PLACEHOLDER_DOMAIN
    cert_wait_timeout: int = DEFAULT_CERT_WAIT_TIMEOUT
    cert_wait_interval: int = DEFAULT_CERT_WAIT_INTERVAL
    renewal_schedule: str = DEFAULT_RENEWAL_SCHEDULE

    @property
    def root(self) -> Path:
        return Path(self.install_dir).expanduser()

    @property
    def env_path(self) -> Path:
        return self.root / ".env"

    @property
    def mosdns_config_path(self) -> Path:
        return self.root / "mosdns-x" / "config" / "config.yaml"

    @property
    def compose_path(self) -> Path:
        return self.root / "compose.yml"

    @property
    def redis_data_dir(self) -> Path:
        return self.root / "redis-data"

    @property
    def certbot_dir(self) -> Path:
        return self.root / "certbot"

    @property
    def live_certs_dir(self) -> Path:
        return self.certbot_dir / "letsencrypt" / "live"

    @property
    def letsencrypt_log_path(self) -> Path:
        return self.certbot_dir / "logs" / "letsencrypt.log"

    @property
    def adblock_cron_script(self) -> Path:
        return self.root / "setup-cron-mosdns-block-allow.sh"


_INT_KEYS = {"cert_wait_timeout", "cert_wait_interval"}
SETTING_KEYS = tuple(f.name for f in fields(AppConfig))


def config_path() -> str:
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def default_config() -> AppConfig:
    return AppConfig()


def coerce_setting(key: str, raw: Any) -> Any:
    if key not in SETTING_KEYS:
        raise KeyError(key)
    if key in _INT_KEYS:
        value = int(raw)
        if value <= 0:
            raise ValueError(f"{key} must be positive.")
        return value
    value = str(raw).strip()
    if not value:
        raise ValueError(f"{key} cannot be empty.")
    if key.endswith("_url"):
        value = value.rstrip("/")
    return value


def to_toml(cfg: AppConfig) -> dict[str, Any]:
    return {key: getattr(cfg, key) for key in SETTING_KEYS}


def from_toml(data: dict[str, Any]) -> AppConfig:
    cfg = default_config()
    for key in SETTING_KEYS:
        if key not in data:
            continue
        try:
            setattr(cfg, key, coerce_setting(key, data[key]))
        except (TypeError, ValueError):
            # keep the default for unusable values
            continue
    return cfg


def load_config() -> AppConfig:
    path = config_path()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
        cfg = from_toml(data)
    except FileNotFoundError:
        cfg = default_config()
    env_install_dir = os.getenv(ENV_INSTALL_DIR, "").strip()
    if env_install_dir:
        cfg.install_dir = env_install_dir
    return cfg


def save_config(cfg: AppConfig) -> str:
    path = config_path()
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(tomli_w.dumps(to_toml(cfg)).encode("utf-8"))
    os.chmod(path, 0o600)
    return path
