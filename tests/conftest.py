"""
Shared test fixtures and configuration.

No test touches the real package manager: every external tool is a
MockAdapter, and PATH lookups go through a FakeWhich.
"""

from pathlib import Path

import pytest

from rigup.adapters.mock import MockAdapter
from rigup.adapters.registry import AdapterRegistry
from rigup.core.services.steps import StepContext

ADAPTER_NAMES = ("shell", "filesystem", "pacman", "aur", "git")


class FakeWhich:
    """Stand-in for shutil.which backed by a set of command names."""

    def __init__(self, *commands: str):
        self.commands = set(commands)

    def __call__(self, name: str) -> str | None:
        if name in self.commands:
            return f"/usr/bin/{name}"
        return None

    def add(self, name: str) -> None:
        self.commands.add(name)


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """A throwaway home directory."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def which() -> FakeWhich:
    """PATH with only pacman on it."""
    return FakeWhich("pacman")


@pytest.fixture
def mocks() -> dict[str, MockAdapter]:
    return {name: MockAdapter(adapter_name=name) for name in ADAPTER_NAMES}


@pytest.fixture
def registry(mocks: dict[str, MockAdapter]) -> AdapterRegistry:
    reg = AdapterRegistry()
    for adapter in mocks.values():
        reg.register(adapter)
    return reg


@pytest.fixture
def step_ctx(registry: AdapterRegistry, home: Path, which: FakeWhich, tmp_path: Path) -> StepContext:
    dotfiles = tmp_path / "dotfiles"
    dotfiles.mkdir()
    return StepContext(registry=registry, home=home, dotfiles_dir=dotfiles, which=which)
