"""
Configuration loader — reads rigup.yml into the Manifest model.

This is the primary entry point for loading the provisioning plan.
It reads YAML, validates against Pydantic schemas, and returns a
typed Manifest. Without a rigup.yml the built-in plan is used.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from rigup.core.data import DEFAULT_MANIFEST_PATH
from rigup.core.models.manifest import Manifest

logger = logging.getLogger(__name__)

# Default config filename
MANIFEST_FILE = "rigup.yml"


class ConfigError(Exception):
    """Raised when the manifest is invalid or missing."""


def find_manifest_file(start_dir: Path | None = None) -> Path | None:
    """Search for rigup.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to rigup.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / MANIFEST_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def resolve_manifest_path(path: Path | None = None) -> Path:
    """Explicit path, else a rigup.yml found upward, else the built-in plan."""
    if path is not None:
        return path
    return find_manifest_file() or DEFAULT_MANIFEST_PATH


def load_manifest(path: Path | None = None) -> Manifest:
    """Load and validate a manifest.

    Args:
        path: Explicit path to a manifest. If None, searches upward for
            rigup.yml and falls back to the built-in manifest.

    Returns:
        Validated Manifest model.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    path = resolve_manifest_path(path)

    if not path.is_file():
        raise ConfigError(f"Manifest file not found: {path}")

    logger.debug("Loading manifest from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        manifest = Manifest.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid manifest {path}: {e}") from e

    logger.debug("Loaded manifest '%s' with %d steps", manifest.name, len(manifest.steps))
    return manifest


def load_default_manifest() -> Manifest:
    """The built-in workstation plan."""
    return load_manifest(DEFAULT_MANIFEST_PATH)
