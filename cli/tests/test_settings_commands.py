from __future__ import annotations

from typer.testing import CliRunner

from dnsetup_cli import config, main


def test_settings_set_and_get(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(config, "user_config_dir", lambda _: str(tmp_path))
    monkeypatch.delenv(config.ENV_INSTALL_DIR, raising=False)
    app = main._build_app()
    runner = CliRunner()

    result = runner.invoke(app, ["settings", "set", "install_dir", "/srv/dns"])
    assert result.exit_code == 0, result.output

    result = runner.invoke(app, ["settings", "get", "install_dir"])
    assert result.exit_code == 0
    assert result.output.strip() == "/srv/dns"


def test_settings_rejects_unknown_key(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(config, "user_config_dir", lambda _: str(tmp_path))
    result = CliRunner().invoke(main._build_app(), ["settings", "set", "colour", "blue"])
    assert result.exit_code == 2
    assert "Unknown setting" in result.output


def test_settings_init_does_not_overwrite(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(config, "user_config_dir", lambda _: str(tmp_path))
    monkeypatch.delenv(config.ENV_INSTALL_DIR, raising=False)
    app = main._build_app()
    runner = CliRunner()

    assert runner.invoke(app, ["settings", "init", "--install-dir", "/srv/a"]).exit_code == 0
    result = runner.invoke(app, ["settings", "init", "--install-dir", "/srv/b"])

    assert "already exists" in result.output
    assert config.load_config().install_dir == "/srv/a"
