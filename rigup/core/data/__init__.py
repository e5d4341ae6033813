"""
Static data shipped with rigup.

``default_manifest.yml`` is the built-in provisioning plan used when no
rigup.yml is found.
"""

from __future__ import annotations

from pathlib import Path

DATA_DIR = Path(__file__).parent
DEFAULT_MANIFEST_PATH = DATA_DIR / "default_manifest.yml"
