"""
Detection — is a tool already present?

Read-only probes, queried live on every call and never cached:
PATH lookup for commands (``command -v``), the pacman database for
packages (``pacman -Qq``).
"""

from __future__ import annotations

import logging

from rigup.core.models.manifest import Detection
from rigup.core.services.steps.base import StepContext

logger = logging.getLogger(__name__)


def command_exists(command: str, ctx: StepContext) -> bool:
    return ctx.which(command) is not None


def package_installed(package: str, ctx: StepContext, step: str = "") -> bool:
    """Ask pacman whether ``package`` is installed.

    The pacman adapter reports "not installed" as a successful query
    with ``installed=False``; only a missing adapter is an error.
    """
    receipt = ctx.run(
        step or package,
        "query",
        "pacman",
        {"operation": "query", "packages": [package]},
        error=f"Could not query package {package}",
        mutating=False,
    )
    return bool(receipt.metadata.get("installed", False))


def is_detected(detection: Detection, ctx: StepContext, step: str = "") -> bool:
    if detection.command:
        found = command_exists(detection.command, ctx)
    else:
        found = package_installed(detection.package or "", ctx, step=step)
    logger.debug("Detect %s → %s", detection.describe(), found)
    return found
