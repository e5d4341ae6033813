"""
Domain models — Pydantic types for rigup.

All models are re-exported here for convenient access:

    from rigup.core.models import Manifest, PackageStep, Action, Receipt
"""

from rigup.core.models.action import Action, Receipt
from rigup.core.models.manifest import (
    AurHelperStep,
    Detection,
    DotfileEntry,
    DotfilesStep,
    GitRepoStep,
    LazyVimStep,
    Manifest,
    MultilibStep,
    PackageStep,
    Step,
)
from rigup.core.models.report import RunReport, StepResult

__all__ = [
    # action.py
    "Action",
    "Receipt",
    # manifest.py
    "AurHelperStep",
    "Detection",
    "DotfileEntry",
    "DotfilesStep",
    "GitRepoStep",
    "LazyVimStep",
    "Manifest",
    "MultilibStep",
    "PackageStep",
    "Step",
    # report.py
    "RunReport",
    "StepResult",
]
