"""rigup — workstation bootstrap kit for Arch-based systems."""

__version__ = "0.1.0"
