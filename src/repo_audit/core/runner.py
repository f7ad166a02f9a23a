"""External command execution."""

import subprocess
from pathlib import Path
from typing import List, Optional

from repo_audit.core.log import get_logger

logger = get_logger(__name__)


class CommandError(RuntimeError):
    """An external command failed without producing any output."""

    def __init__(self, command: List[str], message: str):
        self.command = command
        super().__init__(f"Command failed: {' '.join(command)}: {message}")


def run_command(command: List[str], cwd: Optional[Path] = None) -> str:
    """Run ``command`` and return its stripped standard output.

    A non-zero exit is tolerated when the process still wrote to stdout; tools
    like secret scanners exit non-zero to report findings. Otherwise the
    failure is raised as CommandError.
    """
    logger.debug("Running: %s", " ".join(command))
    try:
        result = subprocess.run(  # noqa: S603
            command,
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise CommandError(command, str(e)) from e
    except subprocess.CalledProcessError as e:
        if e.stdout and e.stdout.strip():
            logger.warning(
                "%s exited with status %d; using its output",
                command[0],
                e.returncode,
            )
            return e.stdout.strip()
        stderr = (e.stderr or "").strip()
        raise CommandError(command, stderr or str(e)) from e
    return result.stdout.strip()
