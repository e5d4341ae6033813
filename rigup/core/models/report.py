"""
Run report — what happened to each step of a provisioning run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

StepStatus = Literal["installed", "skipped", "updated", "planned", "failed"]


@dataclass
class StepResult:
    """Outcome of a single step."""

    name: str
    label: str = ""
    status: StepStatus = "installed"
    message: str = ""
    hints: list[str] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "label": self.label,
            "status": self.status,
            "message": self.message,
            "hints": self.hints,
        }


@dataclass
class RunReport:
    """Result of running a manifest."""

    run_id: str = ""
    dry_run: bool = False
    results: list[StepResult] = field(default_factory=list)
    failed_step: str | None = None
    error: str | None = None
    final_hints: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failed_step is None and self.error is None

    @property
    def status(self) -> str:
        return "ok" if self.ok else "failed"

    @property
    def hints(self) -> list[str]:
        """Hints from freshly installed steps, then the closing hints."""
        collected: list[str] = []
        for r in self.results:
            collected.extend(r.hints)
        if self.ok:
            collected.extend(self.final_hints)
        return collected

    def count(self, status: StepStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    def to_dict(self) -> dict:
        return {
            "run_id": self.run_id,
            "dry_run": self.dry_run,
            "status": self.status,
            "failed_step": self.failed_step,
            "error": self.error,
            "results": [r.to_dict() for r in self.results],
            "hints": self.hints,
        }
