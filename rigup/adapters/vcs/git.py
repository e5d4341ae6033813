"""
Git adapter — clone and update repositories.

Uses the git CLI — never raw API calls.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from rigup.adapters.base import Adapter, ExecutionContext
from rigup.adapters.shell.command import run_argv
from rigup.core.models.action import Receipt

logger = logging.getLogger(__name__)


class GitAdapter(Adapter):
    """Git operations.

    Action params:
        operation (str): One of 'clone', 'pull'.
        url (str): Repository URL (for 'clone').
        dest (str): Clone destination (for 'clone').
        depth (int): Shallow clone depth (for 'clone', optional).
        cwd (str): Repository directory (for 'pull').
        interactive (bool): Show git's progress on the terminal (default: False).
        timeout (int): Timeout in seconds (default: none).
    """

    @property
    def name(self) -> str:
        return "git"

    def is_available(self) -> bool:
        return shutil.which("git") is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        operation = context.params.get("operation", "")
        if operation not in ("clone", "pull"):
            return False, f"Unknown operation '{operation}'. Valid: clone, pull"

        if operation == "clone":
            if not context.params.get("url"):
                return False, "Missing required param: 'url' for clone operation"
            if not context.params.get("dest"):
                return False, "Missing required param: 'dest' for clone operation"

        if operation == "pull":
            cwd = context.working_dir
            if not cwd or not Path(cwd).is_dir():
                return False, f"Repository directory does not exist: {cwd}"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        params = context.params
        timeout = params.get("timeout")
        interactive = params.get("interactive", False)

        if params["operation"] == "clone":
            argv = ["git", "clone"]
            if params.get("depth"):
                argv.append(f"--depth={params['depth']}")
            argv += [params["url"], params["dest"]]
            return run_argv(
                self.name,
                context.action.id,
                argv,
                interactive=interactive,
                timeout=timeout,
            )

        return run_argv(
            self.name,
            context.action.id,
            ["git", "pull"],
            cwd=context.working_dir,
            interactive=interactive,
            timeout=timeout,
        )
