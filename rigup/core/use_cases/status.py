"""
Status use case — which steps are already in place on this machine.

Read-only: runs every step's probe, never its install.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from rigup.adapters.registry import AdapterRegistry, build_default_registry
from rigup.core.config.loader import ConfigError, load_manifest, resolve_manifest_path
from rigup.core.engine.executor import aur_helper_of
from rigup.core.models.manifest import Manifest
from rigup.core.services.steps import StepContext, StepError, probe_step


@dataclass
class StepStatusEntry:
    name: str
    label: str
    kind: str
    present: bool
    error: str | None = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "label": self.label,
            "kind": self.kind,
            "present": self.present,
            "error": self.error,
        }


@dataclass
class StatusResult:
    """Detection state of every manifest step."""

    manifest: Manifest | None = None
    manifest_path: Path | None = None
    entries: list[StepStatusEntry] = field(default_factory=list)
    adapters: dict[str, dict] = field(default_factory=dict)
    error: str | None = None

    @property
    def present_count(self) -> int:
        return sum(1 for e in self.entries if e.present)

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "manifest": self.manifest.name if self.manifest else "",
            "manifest_path": str(self.manifest_path),
            "steps": {
                "total": len(self.entries),
                "present": self.present_count,
            },
            "entries": [e.to_dict() for e in self.entries],
            "adapters": self.adapters,
        }


def get_status(
    config_path: Path | None = None,
    registry: AdapterRegistry | None = None,
    ctx: StepContext | None = None,
) -> StatusResult:
    """Probe every step of the manifest and report which tools rigup can drive."""
    result = StatusResult()

    try:
        result.manifest_path = resolve_manifest_path(config_path)
        result.manifest = load_manifest(result.manifest_path)
    except ConfigError as e:
        result.error = str(e)
        return result

    if ctx is None:
        helper = aur_helper_of(result.manifest) or "paru"
        ctx = StepContext(
            registry=registry or build_default_registry(helper),
            aur_helper=helper,
        )

    result.adapters = ctx.registry.adapter_status()

    for step in result.manifest.steps:
        entry = StepStatusEntry(
            name=step.name,
            label=step.display_name,
            kind=step.kind,
            present=False,
        )
        try:
            entry.present = probe_step(step, ctx)
        except (StepError, OSError) as e:
            entry.error = str(e)
        result.entries.append(entry)

    return result
