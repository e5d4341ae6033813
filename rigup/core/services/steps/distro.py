"""
Distro check — rigup only runs on Arch-based systems.
"""

from __future__ import annotations

import logging

from rigup.core.services.steps.base import StepContext, StepError
from rigup.core.services.steps.detection import command_exists

logger = logging.getLogger(__name__)


def check_distro(ctx: StepContext) -> None:
    logger.info("Checking operating system...")
    if not command_exists("pacman", ctx):
        raise StepError(
            "This tool is intended for Arch-based distributions (uses pacman and AUR).",
            step="distro",
        )
    logger.info("Arch-based system detected.")
