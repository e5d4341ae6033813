"""
Pacman adapter — the system package manager on Arch-based systems.

Operations:
    query    read-only, ``pacman -Qq PKG``; never fails on "not installed"
    install  ``sudo pacman -S --needed PKG... --noconfirm``
    sync     ``sudo pacman -Sy``
"""

from __future__ import annotations

import logging
import shutil

from rigup.adapters.base import Adapter, ExecutionContext
from rigup.adapters.shell.command import run_argv
from rigup.core.models.action import Receipt

logger = logging.getLogger(__name__)


def install_argv(packages: list[str], *, interactive: bool = False) -> list[str]:
    """Build the pacman install command for ``packages``."""
    argv = ["pacman", "-S", "--needed", *packages]
    if not interactive:
        argv.append("--noconfirm")
    return argv


class PacmanAdapter(Adapter):
    """Install and query packages with pacman.

    Action params:
        operation (str): One of 'query', 'install', 'sync'.
        packages (list[str]): Package names ('query' uses the first).
        interactive (bool): Let pacman ask for confirmation (for 'install').
    """

    VALID_OPS = {"query", "install", "sync"}

    @property
    def name(self) -> str:
        return "pacman"

    def is_available(self) -> bool:
        return shutil.which("pacman") is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        operation = context.params.get("operation", "")
        if operation not in self.VALID_OPS:
            valid = ", ".join(sorted(self.VALID_OPS))
            return False, f"Unknown operation '{operation}'. Valid: {valid}"

        if operation in ("query", "install") and not context.params.get("packages"):
            return False, f"Missing required param: 'packages' for {operation}"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        operation = context.params["operation"]
        packages = list(context.params.get("packages") or [])
        action_id = context.action.id

        if operation == "query":
            receipt = run_argv(self.name, action_id, ["pacman", "-Qq", packages[0]], timeout=10)
            installed = receipt.ok
            logger.debug("pacman query %s → installed=%s", packages[0], installed)
            return Receipt.success(
                adapter=self.name,
                action_id=action_id,
                output=receipt.output,
                metadata={"package": packages[0], "installed": installed},
            )

        if operation == "install":
            interactive = context.params.get("interactive", False)
            return run_argv(
                self.name,
                action_id,
                install_argv(packages, interactive=interactive),
                sudo=True,
                interactive=interactive,
                timeout=None,
            )

        return run_argv(self.name, action_id, ["pacman", "-Sy"], sudo=True, timeout=None)
