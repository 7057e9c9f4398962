from __future__ import annotations

from rich.console import Console
from rich.markup import escape

console = Console()

_MARKS = {
    "info": "[bold cyan]•[/]",
    "ok": "[bold green]OK[/]",
    "warn": "[bold yellow]WARN[/]",
    "err": "[bold red]ERR[/]",
}


def _status(kind: str, msg: str) -> None:
    # messages carry paths and command output, never markup
    console.print(f"{_MARKS[kind]} {escape(msg)}")


def info(msg: str) -> None:
    _status("info", msg)


def ok(msg: str) -> None:
    _status("ok", msg)


def warn(msg: str) -> None:
    _status("warn", msg)


def err(msg: str) -> None:
    _status("err", msg)


def print(*args, **kwargs):
    console.print(*args, **kwargs)


def banner(*lines: str) -> None:
    """Centered block of title lines between two bold rules."""
    console.rule(style="bold")
    for line in lines:
        console.print(escape(line), style="bold", justify="center")
    console.rule(style="bold")
    console.print()


def clear() -> None:
    if console.is_terminal:
        console.clear()
