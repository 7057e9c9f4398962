from __future__ import annotations

import questionary
import typer
from questionary import Choice, Style

from . import console

_SELECT_STYLE = Style(
    [
        ("pointer", "ansiyellow bold"),
        ("selected", "ansicyan bold"),
        ("highlighted", "ansicyan bold"),
        ("instruction", "ansiblack"),
    ]
)


def confirm_choice(message: str, *, default: bool = True) -> bool:
    """Yes/No selection; the pointer starts on ``default``."""
    choices = [
        Choice(title="Yes", value=True),
        Choice(title="No", value=False),
    ]
    try:
        result = questionary.select(
            message,
            choices=choices,
            default=bool(default),
            use_shortcuts=False,
            pointer="▶",
            style=_SELECT_STYLE,
        ).ask()
    except KeyboardInterrupt:
        _abort_interactive()
    if result is None:
        _abort_interactive()
    return bool(result)


def prompt_text(message: str, *, hide_input: bool = False) -> str:
    try:
        value = typer.prompt(message, hide_input=hide_input, default="", show_default=False)
    except (KeyboardInterrupt, typer.Abort):
        _abort_interactive()
    return str(value).strip()


def _abort_interactive() -> None:
    console.err("Aborted by user.")
    raise typer.Exit(code=1)
