"""
Package steps — the idempotent-install routine.

Given a tool, its detection rule and its packages: if the tool is
already detectable, warn and do nothing; otherwise install it with
pacman (or the AUR helper) and treat a failed install as fatal.
"""

from __future__ import annotations

import logging

from rigup.core.models.manifest import Detection, PackageStep
from rigup.core.models.report import StepResult, StepStatus
from rigup.core.services.steps.base import StepContext, StepError
from rigup.core.services.steps.detection import command_exists, is_detected

logger = logging.getLogger(__name__)


def ensure_installed(
    ctx: StepContext,
    *,
    step: str,
    label: str,
    detection: Detection,
    packages: list[str],
    source: str = "pacman",
    interactive: bool = False,
) -> StepStatus:
    """Install ``packages`` unless ``detection`` already finds the tool.

    Returns:
        "skipped" when already present, "installed" after a successful
        install, "planned" when the install was only dry-run.

    Raises:
        StepError: when the install command fails.
    """
    if is_detected(detection, ctx, step=step):
        logger.warning("%s is already installed. Skipping...", label)
        return "skipped"

    params = {"operation": "install", "packages": packages, "interactive": interactive}
    if source == "aur":
        logger.info(
            "Installing %s using %s (will ask for confirmation)...",
            " ".join(packages), ctx.aur_helper,
        )
        adapter = "aur"
        params["helper"] = ctx.aur_helper
    else:
        logger.info("Installing %s using pacman...", label)
        adapter = "pacman"

    ctx.run(
        step,
        "install",
        adapter,
        params,
        error=f"{label} installation failed.",
    )
    if ctx.dry_run:
        return "planned"

    logger.info("%s installation complete.", label)
    return "installed"


def run(step: PackageStep, ctx: StepContext) -> StepResult:
    label = step.display_name
    logger.info("--- Starting %s Installation ---", label)

    if step.source == "aur" and not command_exists(ctx.aur_helper, ctx):
        if not ctx.dry_run:
            raise StepError(
                f"{ctx.aur_helper} is not installed. Cannot install {label} from AUR.",
                step=step.name,
            )
        logger.info("[dry-run] %s would be installed once %s is available", label, ctx.aur_helper)
        return StepResult(
            name=step.name,
            label=label,
            status="planned",
            message=f"needs {ctx.aur_helper}",
        )

    status = ensure_installed(
        ctx,
        step=step.name,
        label=label,
        detection=step.detection,
        packages=step.package_names,
        source=step.source,
        interactive=step.interactive,
    )

    for i, argv in enumerate(step.post_install):
        command = " ".join(argv)
        logger.info("Running '%s'...", command)
        ctx.run(
            step.name,
            f"post-install-{i}",
            "shell",
            {"argv": list(argv), "interactive": True, "timeout": None},
            error=f"Failed to run '{command}'.",
        )

    return StepResult(
        name=step.name,
        label=label,
        status=status,
        message=_status_message(status, step),
        hints=list(step.hints) if status == "installed" else [],
    )


def probe(step: PackageStep, ctx: StepContext) -> bool:
    return is_detected(step.detection, ctx, step=step.name)


def _status_message(status: StepStatus, step: PackageStep) -> str:
    if status == "skipped":
        return f"already installed ({step.detection.describe()})"
    if status == "planned":
        return "would install " + " ".join(step.package_names)
    return "installed " + " ".join(step.package_names)
