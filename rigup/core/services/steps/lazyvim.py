"""
Neovim & LazyVim step.

Installs Neovim if absent, then always moves the existing Neovim
directories aside and clones a fresh LazyVim starter config.
"""

from __future__ import annotations

import logging

from rigup.core.models.manifest import LazyVimStep
from rigup.core.models.report import StepResult
from rigup.core.services.steps.base import StepContext
from rigup.core.services.steps.detection import is_detected
from rigup.core.services.steps.packages import ensure_installed

logger = logging.getLogger(__name__)


def run(step: LazyVimStep, ctx: StepContext) -> StepResult:
    logger.info("--- Starting %s Installation ---", step.display_name)

    ensure_installed(
        ctx,
        step=step.name,
        label="Neovim",
        detection=step.detect,
        packages=step.packages,
    )

    logger.info("Backing up any existing Neovim configuration...")
    config_dir = ctx.expand(step.config_dir)
    backups: list[str] = []
    for i, raw in enumerate([step.config_dir, *step.data_dirs]):
        receipt = ctx.run(
            step.name,
            f"backup-{i}",
            "filesystem",
            {"operation": "backup", "path": str(ctx.expand(raw))},
            error=f"Failed to back up {raw}.",
        )
        if receipt.ok and receipt.metadata.get("backup"):
            backups.append(receipt.metadata["backup"])

    logger.info("Cloning LazyVim starter repository...")
    ctx.run(
        step.name,
        "clone",
        "git",
        {
            "operation": "clone",
            "url": step.starter_url,
            "dest": str(config_dir),
            "interactive": True,
        },
        error="Failed to clone LazyVim starter.",
    )

    if ctx.dry_run:
        return StepResult(
            name=step.name,
            label=step.display_name,
            status="planned",
            message=f"would clone {step.starter_url}",
        )

    logger.info("--- %s installation complete. ---", step.display_name)
    message = f"cloned {step.starter_url}"
    if backups:
        message += f"; backed up {len(backups)} director{'y' if len(backups) == 1 else 'ies'}"
    return StepResult(
        name=step.name,
        label=step.display_name,
        status="installed",
        message=message,
        hints=list(step.hints),
    )


def probe(step: LazyVimStep, ctx: StepContext) -> bool:
    return is_detected(step.detect, ctx, step=step.name) and ctx.expand(step.config_dir).is_dir()
