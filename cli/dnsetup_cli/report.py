from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from rich import box
from rich.table import Table

from . import console

ADBLOCK_SCHEDULE_TEXT = "Updates daily at 2:00 AM via cron"


@dataclass(frozen=True)
class InstallReport:
    domain: str
    public_ip: str | None
    redis_memory_mb: int | None
    certificates_ready: bool
    cert_dir: Path
    install_dir: Path
    cron_line: str | None = None
    cert_backup_dir: Path | None = None


def endpoints(domain: str) -> list[tuple[str, str]]:
    return [
        ("DNS-over-HTTPS (DoH)", f"https://{domain}/dns-query"),
        ("DNS-over-TLS (DoT)", f"tls://{domain}"),
        ("DNS-over-HTTP/3 (DoH3)", f"h3://{domain}/dns-query"),
        ("DNS-over-QUIC (DoQ)", f"quic://{domain}"),
    ]


def describe_schedule(cron_line: str | None) -> str:
    if not cron_line:
        return "not scheduled"
    fields = cron_line.split()
    if fields[0].startswith("@"):
        return f"Cron schedule: {fields[0]}"
    schedule = fields[:5]
    minute, hour = schedule[0], schedule[1]
    if schedule[2:] == ["*", "*", "*"] and minute.isdigit() and hour.isdigit():
        h, m = int(hour), int(minute)
        return f"Updates daily at {h % 12 or 12}:{m:02d} {'AM' if h < 12 else 'PM'} via cron"
    return f"Cron schedule: {' '.join(schedule)}"


def print_report(report: InstallReport) -> None:
    ip = report.public_ip or "unknown"

    console.print()
    console.banner("Installation Successful!")
    console.ok("Mosdns-x with Certbot & persistent Redis has been installed.")
    if not report.certificates_ready:
        console.warn("SSL certificates are not in place yet; encrypted endpoints start working once they are.")

    console.print()
    console.banner("DNS Configuration")
    console.warn("Point your DNS record in Cloudflare:")
    console.print(f"  - Name: {report.domain}")
    console.print("  - Type: A")
    console.print(f"  - Value: {ip}")
    console.print("  - Proxy status: DNS only (grey cloud)")

    console.print()
    table = Table(title="Usage Information", box=box.SIMPLE, show_header=False)
    table.add_column("item", style="bold")
    table.add_column("value")
    table.add_row("DNS IPv4", ip)
    for name, url in endpoints(report.domain):
        table.add_row(name, url)
    table.add_row("SSL Certificates", f"{report.cert_dir}/")
    memory = f"{report.redis_memory_mb} MB" if report.redis_memory_mb is not None else "unchanged"
    table.add_row("Redis Max Memory Limit", memory)
    table.add_row("Ad-blocking", ADBLOCK_SCHEDULE_TEXT)
    table.add_row("SSL-renewal", describe_schedule(report.cron_line))
    table.add_row("Restart service", f"cd {report.install_dir} && docker compose restart")
    console.console.print(table)

    console.ok("Installation complete!")
