from __future__ import annotations

from . import console


class ProvisionError(RuntimeError):
    def __init__(self, message: str, *, stdout: str | None = None, stderr: str | None = None) -> None:
        super().__init__(message)
        self.stdout = stdout or ""
        self.stderr = stderr or ""


class MissingConfigError(ProvisionError):
    """An expected file from the project bundle is not on disk."""


def _tail(text: str, *, limit: int = 8) -> str:
    if not text:
        return ""
    lines = text.splitlines()
    if len(lines) <= limit:
        return text
    return "\n".join(lines[-limit:])


def report_provision_failure(exc: Exception, *, install_dir: str | None = None) -> None:
    console.err(str(exc))
    if isinstance(exc, ProvisionError):
        stdout = _tail(exc.stdout.strip())
        stderr = _tail(exc.stderr.strip())
        if stdout:
            console.err(f"Last stdout:\n{stdout}")
        if stderr:
            console.err(f"Last stderr:\n{stderr}")
    if install_dir:
        console.info("Useful checks:")
        console.print(f"- cd {install_dir} && docker compose config -q")
        console.print(f"- cd {install_dir} && docker compose logs --tail 100")
        console.print("- systemctl status docker --no-pager")
