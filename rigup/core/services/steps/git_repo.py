"""
Git repository step — clone once, pull afterwards.
"""

from __future__ import annotations

import logging

from rigup.core.models.manifest import GitRepoStep
from rigup.core.models.report import StepResult
from rigup.core.services.steps.base import StepContext

logger = logging.getLogger(__name__)


def run(step: GitRepoStep, ctx: StepContext) -> StepResult:
    label = step.display_name
    dest = ctx.expand(step.dest)
    logger.info("--- Starting %s Installation ---", label)

    if dest.is_dir():
        logger.warning("Directory %s already exists.", dest)
        logger.info("Pulling latest changes...")
        ctx.run(
            step.name,
            "pull",
            "git",
            {"operation": "pull", "cwd": str(dest), "interactive": True},
            error=f"Failed to update {label}.",
        )
        status = "planned" if ctx.dry_run else "updated"
        message = f"pulled into {dest}"
    else:
        logger.info("Cloning %s into %s...", step.url, dest)
        ctx.run(
            step.name,
            "mkdir",
            "filesystem",
            {"operation": "mkdir", "path": str(dest.parent)},
            error=f"Failed to create {dest.parent}.",
        )
        ctx.run(
            step.name,
            "clone",
            "git",
            {
                "operation": "clone",
                "url": step.url,
                "dest": str(dest),
                "depth": step.depth,
                "interactive": True,
            },
            error=f"Failed to clone {label}.",
        )
        status = "planned" if ctx.dry_run else "installed"
        message = f"cloned into {dest}"

    if not ctx.dry_run:
        logger.info("--- %s installation/update complete. ---", label)
    return StepResult(
        name=step.name,
        label=label,
        status=status,
        message=message,
        hints=list(step.hints) if status == "installed" else [],
    )


def probe(step: GitRepoStep, ctx: StepContext) -> bool:
    return ctx.expand(step.dest).is_dir()
