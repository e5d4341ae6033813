"""
Config check use case — validate a manifest and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from rigup.core.config.loader import ConfigError, load_manifest, resolve_manifest_path
from rigup.core.models.manifest import Manifest


@dataclass
class ConfigCheckResult:
    """Result of manifest validation."""

    valid: bool = False
    manifest: Manifest | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "manifest_name": self.manifest.name if self.manifest else None,
            "step_count": len(self.manifest.steps) if self.manifest else 0,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate a manifest and report issues.

    Args:
        config_path: Optional explicit manifest path. Defaults to a
            rigup.yml found upward, then the built-in manifest.
    """
    result = ConfigCheckResult()
    result.config_path = resolve_manifest_path(config_path)

    try:
        manifest = load_manifest(result.config_path)
        result.manifest = manifest
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    if not manifest.steps:
        result.warnings.append("No steps defined. rigup has nothing to do.")

    aur_steps = [
        s.name for s in manifest.steps if s.kind == "package" and s.source == "aur"
    ]
    if not aur_steps and any(s.kind == "aur_helper" for s in manifest.steps):
        result.warnings.append("An AUR helper is installed but no AUR packages use it.")

    kinds = [s.kind for s in manifest.steps]
    if "multilib" not in kinds:
        for step in manifest.steps:
            if step.kind == "package" and "steam" in step.package_names:
                result.warnings.append(
                    f"Step '{step.name}' installs steam but multilib is never enabled."
                )

    result.valid = True
    return result
