import stat

import pytest

from dnsetup_cli import config


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    def _config_dir(_: str) -> str:
        return str(tmp_path)

    monkeypatch.setattr(config, "user_config_dir", _config_dir)
    monkeypatch.delenv(config.ENV_INSTALL_DIR, raising=False)
    return tmp_path


def test_load_config_defaults_without_file(config_dir) -> None:
    cfg = config.load_config()
    assert cfg == config.default_config()
    assert cfg.cert_wait_timeout == 120
    assert cfg.cert_wait_interval == 5
    assert cfg.renewal_schedule == "0 3 * * *"


def test_save_and_load_round_trip(config_dir) -> None:
    cfg = config.default_config()
    cfg.install_dir = "/srv/dns"
    cfg.cert_wait_timeout = 300

    path = config.save_config(cfg)

    assert path.endswith("config.toml")
    assert stat.S_IMODE(config_dir.joinpath("config.toml").stat().st_mode) == 0o600
    loaded = config.load_config()
    assert loaded.install_dir == "/srv/dns"
    assert loaded.cert_wait_timeout == 300


def test_bad_values_fall_back_to_defaults(config_dir) -> None:
    config_dir.joinpath("config.toml").write_text(
        'install_dir = ""\ncert_wait_timeout = "soon"\ncert_wait_interval = 10\nunknown = 1\n',
        encoding="utf-8",
    )
    cfg = config.load_config()
    assert cfg.install_dir == config.DEFAULT_INSTALL_DIR
    assert cfg.cert_wait_timeout == config.DEFAULT_CERT_WAIT_TIMEOUT
    assert cfg.cert_wait_interval == 10


def test_install_dir_env_override(config_dir, monkeypatch) -> None:
    monkeypatch.setenv(config.ENV_INSTALL_DIR, "/opt/dns")
    cfg = config.load_config()
    assert cfg.install_dir == "/opt/dns"
    assert str(cfg.env_path) == "/opt/dns/.env"


def test_coerce_setting_strips_url_slash() -> None:
    assert config.coerce_setting("archive_url", " https://example.test/a.tar.gz/ ") == "https://example.test/a.tar.gz"
    with pytest.raises(KeyError):
        config.coerce_setting("nope", "x")
    with pytest.raises(ValueError):
        config.coerce_setting("cert_wait_interval", "0")
