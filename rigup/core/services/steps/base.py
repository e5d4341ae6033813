"""
Shared plumbing for step routines.

A step routine receives its manifest step and a ``StepContext`` and
either returns a ``StepResult`` or raises ``StepError``. Every side
effect goes through ``StepContext.run``, which dispatches an Action
through the adapter registry and turns a failed receipt into a
``StepError``.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from rigup.adapters.registry import AdapterRegistry
from rigup.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


class StepError(Exception):
    """A fatal step failure. The run stops here."""

    def __init__(self, message: str, step: str = "", detail: str | None = None):
        super().__init__(message)
        self.message = message
        self.step = step
        self.detail = detail

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message} ({self.detail})"
        return self.message


@dataclass
class StepContext:
    """Everything a step routine needs besides its own step."""

    registry: AdapterRegistry
    home: Path = field(default_factory=Path.home)
    dotfiles_dir: Path = field(default_factory=Path.cwd)
    dry_run: bool = False
    aur_helper: str = "paru"
    which: Callable[[str], str | None] = shutil.which

    def expand(self, raw: str) -> Path:
        """Resolve ``~`` against the configured home directory."""
        if raw == "~":
            return self.home
        if raw.startswith("~/"):
            return self.home / raw[2:]
        return Path(raw)

    def run(
        self,
        step: str,
        op: str,
        adapter: str,
        params: dict[str, Any],
        *,
        error: str,
        mutating: bool = True,
    ) -> Receipt:
        """Dispatch one action; raise ``StepError(error)`` if it fails."""
        action = Action(
            id=f"{step}:{op}",
            adapter=adapter,
            step=step,
            params=params,
            mutating=mutating,
        )
        receipt = self.registry.execute_action(action, dry_run=self.dry_run)
        if receipt.failed:
            logger.debug("Action %s failed: %s", action.id, receipt.error)
            raise StepError(error, step=step, detail=receipt.error)
        if receipt.skipped and self.dry_run:
            logger.info("[dry-run] %s %s", adapter, _describe(params))
        return receipt


def _describe(params: dict[str, Any]) -> str:
    if "argv" in params:
        return " ".join(str(a) for a in params["argv"])
    parts = [str(params.get("operation", ""))]
    for key in ("packages", "url", "src", "path", "dest"):
        if params.get(key):
            value = params[key]
            parts.append(" ".join(value) if isinstance(value, list) else str(value))
    return " ".join(p for p in parts if p)
