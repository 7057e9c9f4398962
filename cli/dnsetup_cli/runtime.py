from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Protocol, Sequence

log = logging.getLogger(__name__)

DOCKER_INSTALL_URL = "https://get.docker.com"
COMPOSE_UP_ARGS = ("up", "-d", "--build", "--remove-orphans", "--force-recreate")


@dataclass(frozen=True)
class CommandResult:
    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


Runner = Callable[..., CommandResult]


def run_command(
    cmd: Sequence[str],
    *,
    cwd: Path | str | None = None,
    input_text: str | None = None,
) -> CommandResult:
    """Run ``cmd`` to completion with captured output. No timeout is applied."""
    args = tuple(str(part) for part in cmd)
    log.debug("run: %s (cwd=%s)", " ".join(shlex.quote(a) for a in args), cwd or ".")
    try:
        res = subprocess.run(
            args,
            cwd=cwd,
            input=input_text,
            text=True,
            capture_output=True,
            check=False,
        )
    except FileNotFoundError as exc:
        return CommandResult(args, 127, "", str(exc))
    if res.returncode != 0:
        log.debug("exit %s: %s", res.returncode, (res.stderr or "").strip()[:500])
    return CommandResult(args, res.returncode, res.stdout or "", res.stderr or "")


class ContainerRuntime(Protocol):
    def is_installed(self) -> bool: ...

    def install(self) -> CommandResult: ...

    def compose_up(self, project_dir: Path) -> CommandResult: ...


class DockerRuntime:
    def __init__(self, runner: Runner = run_command) -> None:
        self._run = runner

    def is_installed(self) -> bool:
        return shutil.which("docker") is not None

    def install(self) -> CommandResult:
        """Install Docker with the official convenience script and start the daemon."""
        res = self._run(["sh", "-c", f"curl -fsSL {shlex.quote(DOCKER_INSTALL_URL)} | sh"])
        if not res.ok:
            return res
        for action in ("enable", "start"):
            svc = self._run(["systemctl", action, "docker"])
            if not svc.ok:
                return svc
        return res

    def compose_up(self, project_dir: Path) -> CommandResult:
        return self._run(["docker", "compose", *COMPOSE_UP_ARGS], cwd=project_dir)
