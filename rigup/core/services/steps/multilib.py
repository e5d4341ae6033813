"""
Multilib step — enable the [multilib] repository in pacman.conf.

Uncomments the ``#[multilib]`` header and every line up to and
including the ``#Include = /etc/pacman.d/mirrorlist`` that follows it,
then synchronises the package databases.
"""

from __future__ import annotations

import logging

from rigup.core.models.manifest import MultilibStep
from rigup.core.models.report import StepResult
from rigup.core.services.steps.base import StepContext, StepError

logger = logging.getLogger(__name__)

SECTION_HEADER = "[multilib]"
MIRRORLIST_INCLUDE = "Include = /etc/pacman.d/mirrorlist"


def multilib_enabled(text: str) -> bool:
    return any(line.strip() == SECTION_HEADER for line in text.splitlines())


def enable_multilib(text: str) -> str:
    """Return ``text`` with the commented-out multilib block enabled.

    Text without a commented ``#[multilib]`` header comes back unchanged.
    """
    out: list[str] = []
    in_block = False
    for line in text.splitlines(keepends=True):
        bare = line.rstrip("\r\n")
        if not in_block and bare == "#" + SECTION_HEADER:
            in_block = True
        if in_block:
            if line.startswith("#"):
                line = line[1:]
            if bare == "#" + MIRRORLIST_INCLUDE:
                in_block = False
        out.append(line)
    return "".join(out)


def run(step: MultilibStep, ctx: StepContext) -> StepResult:
    label = step.display_name
    conf = str(ctx.expand(step.pacman_conf))
    logger.info("--- Starting %s Setup ---", label)

    receipt = ctx.run(
        step.name,
        "read",
        "filesystem",
        {"operation": "read", "path": conf},
        error=f"Cannot read {conf}.",
        mutating=False,
    )
    text = receipt.output

    if multilib_enabled(text):
        logger.warning("%s is already enabled in %s. Skipping...", label, conf)
        status = "skipped"
    else:
        updated = enable_multilib(text)
        if updated == text:
            raise StepError(f"No commented {SECTION_HEADER} section found in {conf}.", step=step.name)
        logger.info("Enabling %s in %s...", label, conf)
        ctx.run(
            step.name,
            "write",
            "shell",
            {"argv": ["tee", conf], "sudo": True, "stdin": updated},
            error=f"Failed to update {conf}.",
        )
        status = "planned" if ctx.dry_run else "installed"

    logger.info("Synchronizing pacman databases (required for multilib)...")
    ctx.run(
        step.name,
        "sync",
        "pacman",
        {"operation": "sync"},
        error="Failed to synchronize pacman databases.",
    )

    return StepResult(
        name=step.name,
        label=label,
        status=status,
        message="already enabled" if status == "skipped" else f"enabled in {conf}",
        hints=list(step.hints) if status == "installed" else [],
    )


def probe(step: MultilibStep, ctx: StepContext) -> bool:
    conf = ctx.expand(step.pacman_conf)
    if not conf.is_file():
        return False
    return multilib_enabled(conf.read_text(encoding="utf-8"))
