"""
Step routines, one module per manifest step kind.

Each module exposes ``run(step, ctx) -> StepResult`` and
``probe(step, ctx) -> bool``; this package dispatches on ``kind``.
"""

from __future__ import annotations

from types import ModuleType

from rigup.core.models.manifest import Step
from rigup.core.models.report import StepResult
from rigup.core.services.steps import (
    aur_helper,
    dotfiles,
    git_repo,
    lazyvim,
    multilib,
    packages,
)
from rigup.core.services.steps.base import StepContext, StepError
from rigup.core.services.steps.distro import check_distro

_ROUTINES: dict[str, ModuleType] = {
    "package": packages,
    "lazyvim": lazyvim,
    "aur_helper": aur_helper,
    "multilib": multilib,
    "git_repo": git_repo,
    "dotfiles": dotfiles,
}


def run_step(step: Step, ctx: StepContext) -> StepResult:
    """Run one step. Raises StepError on a fatal failure."""
    return _ROUTINES[step.kind].run(step, ctx)


def probe_step(step: Step, ctx: StepContext) -> bool:
    """Whether the step's end state is already in place."""
    return _ROUTINES[step.kind].probe(step, ctx)


__all__ = [
    "StepContext",
    "StepError",
    "check_distro",
    "probe_step",
    "run_step",
]
