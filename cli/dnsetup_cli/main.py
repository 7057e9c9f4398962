from __future__ import annotations

import typer

from .commands import settings_cmd
from .commands.install_cmd import install
from .logging_ import setup_logging


def _build_app() -> typer.Typer:
    app = typer.Typer(
        name="dnsetup",
        help="Installer for a self-hosted DoH/DoT/DoQ resolver with automatic certificates.",
        no_args_is_help=False,
    )

    app.command("install")(install)
    app.add_typer(settings_cmd.app, name="settings")

    @app.callback(invoke_without_command=True)
    def _main(
            ctx: typer.Context,
            verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logs."),
    ):
        setup_logging(verbose)
        if ctx.invoked_subcommand is None:
            install()

    return app


app = _build_app()
