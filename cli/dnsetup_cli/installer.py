from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from dnsetup_client import lookup_public_ip

from . import console
from .bundle import fetch_bundle
from .certs import CertificateStore, LetsEncryptStore, backup_previous_certificates, wait_for_certificates
from .collect import InstallInputs
from .config import AppConfig
from .credentials import ROOT_OWNER, write_credentials
from .cron import RENEWAL_COMMAND, CronTableError, CrontabScheduler, Scheduler, schedule_job
from .errors import ProvisionError
from .patching import patch_domain, patch_maxmemory, read_total_ram_mb, redis_memory_mb
from .report import InstallReport
from .runtime import ContainerRuntime, DockerRuntime, Runner, run_command
from .volumes import CERTBOT_OWNER, REDIS_OWNER, fix_volume_permissions

log = logging.getLogger(__name__)


@dataclass
class HostServices:
    """Everything the pipeline touches outside its own process."""

    runtime: ContainerRuntime
    scheduler: Scheduler
    certificates: CertificateStore
    fetch_bundle: Callable[[str, Path], object]
    public_ip: Callable[[], str | None]
    total_ram_mb: Callable[[], int] = read_total_ram_mb
    runner: Runner = run_command
    credentials_owner: tuple[int, int] = ROOT_OWNER
    volume_owners: dict[str, tuple[int, int]] = field(
        default_factory=lambda: {"redis-data": REDIS_OWNER, "certbot": CERTBOT_OWNER}
    )


def default_services(cfg: AppConfig) -> HostServices:
    return HostServices(
        runtime=DockerRuntime(),
        scheduler=CrontabScheduler(),
        certificates=LetsEncryptStore(cfg.live_certs_dir),
        fetch_bundle=fetch_bundle,
        public_ip=lambda: lookup_public_ip(cfg.public_ip_url),
    )


def ensure_runtime(runtime: ContainerRuntime) -> None:
    if runtime.is_installed():
        return
    console.info("Docker not found; installing it with the official convenience script...")
    res = runtime.install()
    if not res.ok:
        raise ProvisionError("Docker installation failed.", stdout=res.stdout, stderr=res.stderr)
    console.ok("Docker installed.")


def provision(cfg: AppConfig, inputs: InstallInputs, services: HostServices) -> None:
    ensure_runtime(services.runtime)

    console.info("Downloading project bundle...")
    try:
        services.fetch_bundle(cfg.archive_url, cfg.root)
    except OSError as exc:
        raise ProvisionError(f"Unable to unpack project into {cfg.root}: {exc}") from exc
    console.ok(f"Project unpacked into {cfg.root}")

    created = write_credentials(cfg.env_path, inputs.credentials, owner=services.credentials_owner)
    if created:
        console.ok(f"Created {cfg.env_path} with owner-only permissions.")
    else:
        console.ok(f"Updated {cfg.env_path}.")


def configure(cfg: AppConfig, inputs: InstallInputs, services: HostServices) -> tuple[int | None, Path | None]:
    patch_domain(cfg.mosdns_config_path, cfg.placeholder_domain, inputs.domain)
    console.ok(f"Resolver config points at {inputs.domain}")

    memory_mb: int | None = None
    try:
        memory_mb = redis_memory_mb(services.total_ram_mb())
    except (OSError, ValueError) as exc:
        console.warn(f"Could not read total memory, leaving the Redis limit unchanged: {exc}")
    if memory_mb is not None and patch_maxmemory(cfg.compose_path, memory_mb):
        console.ok(f"Redis max memory set to {memory_mb} MB")

    backup_dir = backup_previous_certificates(
        cfg.certbot_dir,
        services.certificates,
        previous_domain=inputs.saved_domain,
        domain=inputs.domain,
    )
    if backup_dir:
        console.ok(f"Old SSL certificates backed up to: {backup_dir}")

    console.info("Fixing Docker volume permissions...")
    volumes = {cfg.root / name: owner for name, owner in services.volume_owners.items()}
    for path in fix_volume_permissions(volumes):
        log.debug("ownership fixed for %s", path)
    console.ok("Docker volume permissions fixed.")
    return memory_mb, backup_dir


def launch(cfg: AppConfig, services: HostServices) -> None:
    console.info("Starting services (docker compose up)...")
    res = services.runtime.compose_up(cfg.root)
    if not res.ok:
        raise ProvisionError(
            "Failed to start the Docker services. Please check for errors.",
            stdout=res.stdout,
            stderr=res.stderr,
        )
    console.ok("Services started.")

    script = cfg.adblock_cron_script
    if script.is_file():
        res = services.runner([str(script)], cwd=cfg.root)
        if not res.ok:
            console.warn(f"Ad-block cron setup script failed (exit {res.returncode}).")


def schedule_renewal(cfg: AppConfig, services: HostServices) -> str | None:
    console.info("Setting up certbot renewal cron job...")
    try:
        line = schedule_job(services.scheduler, cfg.renewal_schedule, RENEWAL_COMMAND)
    except CronTableError as exc:
        console.warn(f"Failed to set up the certbot cron job: {exc}")
        return None
    console.ok(f"Certbot cron job installed: {line}")
    return line


def await_certificates(cfg: AppConfig, domain: str, services: HostServices) -> bool:
    with console.console.status("Waiting for SSL certificates to be generated..."):
        ready = wait_for_certificates(
            services.certificates,
            domain,
            timeout_s=cfg.cert_wait_timeout,
            interval_s=cfg.cert_wait_interval,
        )
    if ready:
        console.ok("SSL certificates generated successfully!")
    else:
        console.warn(
            f"SSL certificates not generated after {cfg.cert_wait_timeout} seconds. "
            f"Please check logs: cat {cfg.letsencrypt_log_path}"
        )
    return ready


def run_install(cfg: AppConfig, inputs: InstallInputs, services: HostServices) -> InstallReport:
    """Provision, configure, launch, schedule renewal and wait for certificates.

    Raises ProvisionError (or MissingConfigError) on the first fatal step; nothing
    already applied is rolled back. Cron and certificate problems only warn.
    """
    provision(cfg, inputs, services)
    memory_mb, backup_dir = configure(cfg, inputs, services)
    launch(cfg, services)
    cron_line = schedule_renewal(cfg, services)
    ready = await_certificates(cfg, inputs.domain, services)
    return InstallReport(
        domain=inputs.domain,
        public_ip=services.public_ip(),
        redis_memory_mb=memory_mb,
        certificates_ready=ready,
        cert_dir=services.certificates.live_dir(inputs.domain),
        install_dir=cfg.root,
        cron_line=cron_line,
        cert_backup_dir=backup_dir,
    )
