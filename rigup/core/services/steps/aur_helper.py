"""
AUR helper bootstrap — build paru from the AUR with makepkg.

Must run before any AUR package step.
"""

from __future__ import annotations

import logging

from rigup.core.models.manifest import AurHelperStep
from rigup.core.models.report import StepResult
from rigup.core.services.steps.base import StepContext
from rigup.core.services.steps.detection import command_exists

logger = logging.getLogger(__name__)


def run(step: AurHelperStep, ctx: StepContext) -> StepResult:
    label = step.display_name
    logger.info("--- Starting %s Installation ---", label)

    if command_exists(step.helper, ctx):
        logger.warning("%s is already installed. Skipping...", step.helper)
        return StepResult(
            name=step.name,
            label=label,
            status="skipped",
            message=f"already installed (command '{step.helper}')",
        )

    logger.info("Installing %s dependencies (%s)...", step.helper, ", ".join(step.build_deps))
    ctx.run(
        step.name,
        "deps",
        "pacman",
        {"operation": "install", "packages": list(step.build_deps)},
        error=f"Failed to install {step.helper} dependencies.",
    )

    logger.info("Cloning and building %s from AUR...", step.helper)
    build_dir = str(ctx.expand(step.build_dir))
    ctx.run(
        step.name,
        "clean",
        "filesystem",
        {"operation": "remove", "path": build_dir},
        error=f"Failed to clean {build_dir}.",
    )
    ctx.run(
        step.name,
        "clone",
        "git",
        {"operation": "clone", "url": step.repo_url, "dest": build_dir},
        error=f"Failed to clone {step.helper} repository.",
    )
    ctx.run(
        step.name,
        "build",
        "shell",
        {"argv": ["makepkg", "-si"], "cwd": build_dir, "interactive": True},
        error=f"Failed to build or install {step.helper}.",
    )
    ctx.run(
        step.name,
        "cleanup",
        "filesystem",
        {"operation": "remove", "path": build_dir},
        error=f"Failed to remove {build_dir}.",
    )

    if ctx.dry_run:
        return StepResult(
            name=step.name,
            label=label,
            status="planned",
            message=f"would build {step.helper} from {step.repo_url}",
        )

    logger.info("--- %s installation complete. ---", label)
    return StepResult(
        name=step.name,
        label=label,
        status="installed",
        message=f"built {step.helper} from {step.repo_url}",
        hints=list(step.hints),
    )


def probe(step: AurHelperStep, ctx: StepContext) -> bool:
    return command_exists(step.helper, ctx)
