"""
Dotfiles step — copy local dotfiles into the home directory.

A missing source file is a warning, not an error. Copies overwrite,
so running the step twice leaves the same content in place.
"""

from __future__ import annotations

import filecmp
import logging
from pathlib import Path

from rigup.core.models.manifest import DotfilesStep
from rigup.core.models.report import StepResult
from rigup.core.services.steps.base import StepContext

logger = logging.getLogger(__name__)


def _source_dir(step: DotfilesStep, ctx: StepContext) -> Path:
    if step.source_dir:
        return ctx.expand(step.source_dir)
    return ctx.dotfiles_dir


def run(step: DotfilesStep, ctx: StepContext) -> StepResult:
    label = step.display_name
    source_dir = _source_dir(step, ctx)
    logger.info("--- Starting %s ---", label)

    copied: list[str] = []
    for entry in step.files:
        src = source_dir / entry.src
        dest = ctx.expand(entry.dest)
        if not src.is_file():
            logger.warning("%s not found in %s. Skipping.", entry.src, source_dir)
            continue

        logger.info("Copying %s to %s (overwriting if present)...", entry.src, dest)
        ctx.run(
            step.name,
            f"copy-{entry.src}",
            "filesystem",
            {"operation": "copy", "src": str(src), "path": str(dest)},
            error=f"Failed to copy {entry.src}.",
        )
        copied.append(entry.src)

    if not copied:
        status = "skipped"
    elif ctx.dry_run:
        status = "planned"
    else:
        status = "installed"
        logger.info("--- %s complete. ---", label)

    return StepResult(
        name=step.name,
        label=label,
        status=status,
        message=f"copied {len(copied)} of {len(step.files)} files from {source_dir}",
        hints=list(step.hints) if status == "installed" else [],
    )


def probe(step: DotfilesStep, ctx: StepContext) -> bool:
    """True when every available source matches its destination."""
    source_dir = _source_dir(step, ctx)
    for entry in step.files:
        src = source_dir / entry.src
        if not src.is_file():
            continue
        dest = ctx.expand(entry.dest)
        if not dest.is_file() or not filecmp.cmp(src, dest, shallow=False):
            return False
    return True
