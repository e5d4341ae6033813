"""
Shell command adapter — run external commands.

This is the most fundamental adapter: it runs an argv and captures
its output. The package and git adapters are built on ``run_argv``.

Interactive commands (package builds, installs that ask for
confirmation) inherit the terminal instead of being captured, and
have no timeout.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
import time
from pathlib import Path

from rigup.adapters.base import Adapter, ExecutionContext
from rigup.core.models.action import Receipt

logger = logging.getLogger(__name__)


def format_argv(argv: list[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def with_sudo(argv: list[str]) -> list[str]:
    """Prefix ``sudo`` unless we are already root."""
    if os.geteuid() == 0:
        return list(argv)
    return ["sudo", *argv]


def run_argv(
    adapter: str,
    action_id: str,
    argv: list[str],
    *,
    sudo: bool = False,
    interactive: bool = False,
    cwd: str | None = None,
    timeout: int | None = 300,
    stdin: str | None = None,
) -> Receipt:
    """Run a command and wrap the outcome in a Receipt.

    Never raises: a missing binary, a timeout or a non-zero exit
    all come back as a failed receipt.
    """
    cmd = with_sudo(argv) if sudo else list(argv)
    command = format_argv(cmd)
    logger.debug("Executing: %s (cwd=%s)", command, cwd)
    start = time.monotonic()

    try:
        if interactive:
            result = subprocess.run(cmd, cwd=cwd)
            output, stderr = "", ""
        else:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                input=stdin,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
            output = result.stdout.strip()
            stderr = result.stderr.strip()

        elapsed_ms = int((time.monotonic() - start) * 1000)

        if output:
            logger.debug("STDOUT %s", output)
        if stderr:
            logger.debug("STDERR %s", stderr)

        if result.returncode == 0:
            return Receipt.success(
                adapter=adapter,
                action_id=action_id,
                output=output,
                duration_ms=elapsed_ms,
                metadata={
                    "command": command,
                    "return_code": result.returncode,
                    "stderr": stderr,
                },
            )
        return Receipt.failure(
            adapter=adapter,
            action_id=action_id,
            error=stderr or f"Command exited with code {result.returncode}",
            duration_ms=elapsed_ms,
            metadata={
                "command": command,
                "return_code": result.returncode,
                "stdout": output,
            },
        )

    except subprocess.TimeoutExpired:
        return Receipt.failure(
            adapter=adapter,
            action_id=action_id,
            error=f"Command timed out after {timeout}s",
            metadata={"command": command, "timeout": timeout},
        )
    except FileNotFoundError:
        return Receipt.failure(
            adapter=adapter,
            action_id=action_id,
            error=f"Command not found: {cmd[0]}",
            metadata={"command": command},
        )
    except Exception as e:
        return Receipt.failure(
            adapter=adapter,
            action_id=action_id,
            error=f"Command execution error: {e}",
            metadata={"command": command},
        )


class ShellCommandAdapter(Adapter):
    """Run an arbitrary command and capture output.

    Action params:
        argv (list[str]): The command to execute.
        sudo (bool): Run through sudo (default: False).
        interactive (bool): Inherit the terminal (default: False).
        timeout (int): Timeout in seconds (default: 300).
        cwd (str): Working directory.
        stdin (str): Text piped to the command.
    """

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self) -> bool:
        return shutil.which("sh") is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        argv = context.params.get("argv")
        if not argv:
            return False, "Missing required param: 'argv'"
        if not isinstance(argv, list):
            return False, "Param 'argv' must be a list"

        cwd = context.working_dir
        if cwd and not context.dry_run and not Path(cwd).is_dir():
            return False, f"Working directory does not exist: {cwd}"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        params = context.params
        return run_argv(
            self.name,
            context.action.id,
            [str(a) for a in params["argv"]],
            sudo=params.get("sudo", False),
            interactive=params.get("interactive", False),
            cwd=context.working_dir,
            timeout=params.get("timeout", 300),
            stdin=params.get("stdin"),
        )
