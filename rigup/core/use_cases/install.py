"""
Install use case — run the provisioning plan.

Loads the manifest, builds the step context and runs the engine.
The full vertical slice from "rigup" on the command line to a report.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path

from rigup.adapters.registry import AdapterRegistry, build_default_registry
from rigup.core.config.loader import ConfigError, load_manifest, resolve_manifest_path
from rigup.core.engine.executor import aur_helper_of, run_manifest
from rigup.core.models.manifest import Manifest
from rigup.core.models.report import RunReport
from rigup.core.services.steps import StepContext

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """Result of a provisioning run."""

    report: RunReport | None = None
    manifest: Manifest | None = None
    manifest_path: Path | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.report is not None and self.report.ok

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result

        result["manifest"] = self.manifest.name if self.manifest else ""
        result["manifest_path"] = str(self.manifest_path)
        if self.report:
            result["report"] = self.report.to_dict()
        return result


def run_install(
    config_path: Path | None = None,
    only: list[str] | None = None,
    dry_run: bool = False,
    dotfiles_dir: Path | None = None,
    home: Path | None = None,
    registry: AdapterRegistry | None = None,
    mock_mode: bool = False,
    ctx: StepContext | None = None,
) -> InstallResult:
    """Run the provisioning plan.

    Args:
        config_path: Optional explicit manifest path.
        only: Optional list of step names to run.
        dry_run: Detect and report, but change nothing.
        dotfiles_dir: Where dotfile sources live (default: cwd).
        home: Home directory override (default: the user's home).
        registry: Adapter registry (default: the real adapters).
        mock_mode: If True, every action gets a mock success receipt.
        ctx: Prebuilt step context (registry, PATH lookup). Run options
            are applied to a copy of it.
    """
    result = InstallResult()

    try:
        result.manifest_path = resolve_manifest_path(config_path)
        result.manifest = load_manifest(result.manifest_path)
    except ConfigError as e:
        result.error = str(e)
        return result

    if ctx is None:
        helper = aur_helper_of(result.manifest) or "paru"
        ctx = StepContext(registry=registry or build_default_registry(helper))

    overrides: dict = {"dry_run": dry_run}
    if dotfiles_dir is not None:
        overrides["dotfiles_dir"] = dotfiles_dir
    if home is not None:
        overrides["home"] = home
    ctx = replace(ctx, **overrides)

    if mock_mode:
        ctx.registry.set_mock_mode(True)

    try:
        result.report = run_manifest(result.manifest, ctx, only=only)
    except ConfigError as e:
        result.error = str(e)
        return result

    logger.debug("Run %s finished: %s", result.report.run_id, result.report.status)
    return result
