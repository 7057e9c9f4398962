from __future__ import annotations

import os

import typer

from .. import console
from ..collect import collect_inputs, make_token_verifier
from ..config import load_config
from ..errors import MissingConfigError, ProvisionError, report_provision_failure
from ..installer import default_services, run_install
from ..report import print_report


def check_privileges() -> None:
    if os.geteuid() != 0:
        console.err("Please run this installer with root privileges (sudo).")
        raise typer.Exit(code=1)


def install() -> None:
    """Install the public DNS resolver stack (mosdns-x, certbot, Redis) on this host."""
    check_privileges()
    cfg = load_config()

    console.clear()
    console.banner(
        "Public DNS Service Installation",
        "Mosdns-x PR (Privacy & Resilience)",
        "with Certbot & Persistent Redis",
    )

    inputs = collect_inputs(cfg, verify=make_token_verifier(cfg))

    console.print()
    console.info("Starting installation process...")
    services = default_services(cfg)
    try:
        report = run_install(cfg, inputs, services)
    except MissingConfigError as exc:
        console.err(str(exc))
        raise typer.Exit(code=1)
    except ProvisionError as exc:
        report_provision_failure(exc, install_dir=str(cfg.root))
        raise typer.Exit(code=1)

    print_report(report)
