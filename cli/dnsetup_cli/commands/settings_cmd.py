from __future__ import annotations

import os

import typer

from .. import console
from ..config import SETTING_KEYS, coerce_setting, config_path, default_config, load_config, save_config, to_toml

app = typer.Typer(help="Manage installer settings (~/.config/dnsetup/config.toml).")


@app.command("init")
def init_settings(
        force: bool = typer.Option(False, "--force", help="Overwrite existing config."),
        install_dir: str = typer.Option(
            default_config().install_dir,
            "--install-dir",
            help="Directory the project bundle is unpacked into.",
        ),
):
    path = config_path()
    if os.path.exists(path) and not force:
        console.info(f"Config already exists: {path}")
        console.info("Use --force to overwrite.")
        return

    cfg = default_config()
    try:
        cfg.install_dir = coerce_setting("install_dir", install_dir)
    except ValueError as exc:
        console.err(str(exc))
        raise typer.Exit(code=2)
    saved = save_config(cfg)
    console.ok(f"Config written: {saved}")


@app.command("show")
def show_settings():
    cfg = load_config()
    for key, value in to_toml(cfg).items():
        console.console.print(f"{key}={value}")


@app.command("get")
def get_setting(
        key: str = typer.Argument(..., help=f"Setting key ({', '.join(SETTING_KEYS)})."),
):
    cfg = load_config()
    k = key.strip().lower()
    if k not in SETTING_KEYS:
        console.err(f"Unknown setting: {key}")
        raise typer.Exit(code=2)
    console.console.print(getattr(cfg, k))


@app.command("set")
def set_setting(
        key: str = typer.Argument(..., help="Setting key."),
        value: str = typer.Argument(..., help="New value."),
):
    cfg = load_config()
    k = key.strip().lower()
    try:
        setattr(cfg, k, coerce_setting(k, value))
    except KeyError:
        console.err(f"Unknown setting: {key}")
        raise typer.Exit(code=2)
    except ValueError as exc:
        console.err(f"Invalid value for {k}: {exc}")
        raise typer.Exit(code=2)
    saved = save_config(cfg)
    console.ok(f"Settings updated: {saved}")
