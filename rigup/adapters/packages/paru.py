"""
AUR adapter — installs packages from the Arch User Repository.

The helper (paru by default, or whatever the manifest bootstraps)
builds as the invoking user and calls sudo itself, so the command is
never prefixed with sudo here. Installs are interactive by default:
the helper shows the PKGBUILD review and asks for confirmation.
"""

from __future__ import annotations

import shutil

from rigup.adapters.base import Adapter, ExecutionContext
from rigup.adapters.shell.command import run_argv
from rigup.core.models.action import Receipt


class ParuAdapter(Adapter):
    """AUR installs through paru or a compatible helper.

    Action params:
        packages (list[str]): AUR package names.
        helper (str): Helper binary (default: the adapter's binary).
        interactive (bool): Let the helper ask for confirmation (default: True).
    """

    def __init__(self, binary: str = "paru"):
        self._binary = binary

    @property
    def name(self) -> str:
        return "aur"

    def is_available(self) -> bool:
        return shutil.which(self._binary) is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        if not context.params.get("packages"):
            return False, "Missing required param: 'packages'"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        packages = list(context.params["packages"])
        binary = context.params.get("helper") or self._binary
        interactive = context.params.get("interactive", True)
        argv = [binary, "-S", *packages]
        if not interactive:
            argv += ["--needed", "--noconfirm"]
        return run_argv(
            self.name,
            context.action.id,
            argv,
            interactive=interactive,
            timeout=None,
        )
