from __future__ import annotations

import logging
from typing import Protocol

from .runtime import CommandResult, Runner, run_command

log = logging.getLogger(__name__)

RENEWAL_COMMAND = "docker start certbot"


class Scheduler(Protocol):
    def read_table(self) -> str: ...

    def write_table(self, table: str) -> CommandResult: ...


class CronTableError(RuntimeError):
    pass


class CrontabScheduler:
    """The invoking user's crontab, driven through ``crontab -l`` / ``crontab -``."""

    def __init__(self, runner: Runner = run_command) -> None:
        self._run = runner

    def read_table(self) -> str:
        res = self._run(["crontab", "-l"])
        if res.ok:
            return res.stdout
        if "no crontab" in (res.stderr or "").lower():
            return ""
        raise CronTableError((res.stderr or "").strip() or f"crontab -l exited with {res.returncode}")

    def write_table(self, table: str) -> CommandResult:
        return self._run(["crontab", "-"], input_text=table)


def remove_job_lines(table: str, marker: str) -> str:
    kept = [line for line in table.splitlines() if marker not in line]
    return "".join(f"{line}\n" for line in kept)


def add_job_line(table: str, line: str) -> str:
    if table and not table.endswith("\n"):
        table += "\n"
    return f"{table}{line}\n"


def schedule_job(scheduler: Scheduler, schedule: str, command: str) -> str:
    """Install ``<schedule> <command>`` as the only job mentioning ``command``.

    Raises CronTableError when the table cannot be read or written back.
    """
    line = f"{schedule} {command}"
    current = scheduler.read_table()
    table = add_job_line(remove_job_lines(current, command), line)
    log.debug("writing crontab with %d line(s)", len(table.splitlines()))
    res = scheduler.write_table(table)
    if not res.ok:
        raise CronTableError((res.stderr or "").strip() or f"crontab - exited with {res.returncode}")
    return line
