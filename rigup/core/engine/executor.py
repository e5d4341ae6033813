"""
Engine executor — the provisioning loop.

Takes a manifest, checks the distro, then runs every selected step in
order. The first fatal failure stops the run: no later step executes.

Flow:
    manifest → select steps → check distro → run steps → report
"""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime

from rigup.core.config.loader import ConfigError
from rigup.core.models.manifest import Manifest, Step
from rigup.core.models.report import RunReport, StepResult
from rigup.core.services.steps import StepContext, StepError, check_distro, run_step

logger = logging.getLogger(__name__)


def select_steps(manifest: Manifest, only: list[str] | None = None) -> list[Step]:
    """Steps to run, in manifest order.

    Raises:
        ConfigError: if ``only`` names a step the manifest does not have.
    """
    if not only:
        return list(manifest.steps)

    unknown = [name for name in only if manifest.get_step(name) is None]
    if unknown:
        raise ConfigError(
            f"Unknown step(s): {', '.join(unknown)}. "
            f"Available: {', '.join(manifest.step_names())}"
        )
    wanted = set(only)
    return [s for s in manifest.steps if s.name in wanted]


def aur_helper_of(manifest: Manifest) -> str | None:
    """The helper binary the manifest bootstraps, if it has an aur_helper step."""
    for step in manifest.steps:
        if step.kind == "aur_helper":
            return step.helper
    return None


def run_manifest(
    manifest: Manifest,
    ctx: StepContext,
    only: list[str] | None = None,
) -> RunReport:
    """Run the manifest's steps in order, stopping at the first failure.

    Args:
        manifest: The provisioning plan.
        ctx: Step context (registry, home, dry-run flag).
        only: Optional subset of step names. Order still follows the manifest.

    Returns:
        RunReport with one result per step that ran.
    """
    steps = select_steps(manifest, only)
    report = RunReport(
        run_id=generate_run_id(),
        dry_run=ctx.dry_run,
        final_hints=list(manifest.final_hints) if not only else [],
    )

    helper = aur_helper_of(manifest)
    if helper:
        ctx.aur_helper = helper

    try:
        check_distro(ctx)
    except StepError as e:
        logger.error("%s", e)
        report.failed_step = e.step
        report.error = str(e)
        return report

    for step in steps:
        if step.section:
            logger.info("--- Starting %s ---", step.section)

        try:
            result = run_step(step, ctx)
        except StepError as e:
            logger.error("%s", e)
            report.results.append(
                StepResult(
                    name=step.name,
                    label=step.display_name,
                    status="failed",
                    message=str(e),
                )
            )
            report.failed_step = step.name
            report.error = str(e)
            break

        report.results.append(result)
        logger.debug("Step %s → %s", step.name, result.status)

    return report


def generate_run_id() -> str:
    """Generate a unique run ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"run-{now}-{short}"
