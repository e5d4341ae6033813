"""
Tests for the dotfiles step.
"""

import logging
from pathlib import Path

import pytest

from rigup.adapters.shell.filesystem import FilesystemAdapter
from rigup.core.models.manifest import DotfilesStep
from rigup.core.services.steps import StepError, probe_step, run_step


@pytest.fixture
def real_fs(registry):
    registry.register(FilesystemAdapter())


@pytest.fixture
def sources(step_ctx) -> Path:
    src = step_ctx.dotfiles_dir
    (src / ".bashrc").write_text("eval \"$(starship init bash)\"\n")
    (src / ".inputrc").write_text("set completion-ignore-case on\n")
    (src / "starship.toml").write_text("add_newline = false\n")
    return src


class TestDotfilesStep:
    def test_copies_into_home(self, real_fs, step_ctx, sources, home: Path):
        result = run_step(DotfilesStep(name="dotfiles"), step_ctx)

        assert result.status == "installed"
        assert (home / ".bashrc").read_text() == (sources / ".bashrc").read_text()
        assert (home / ".inputrc").is_file()
        assert (home / ".config" / "starship.toml").read_text() == "add_newline = false\n"

    def test_overwrites_existing(self, real_fs, step_ctx, sources, home: Path):
        (home / ".bashrc").write_text("# old\n")
        run_step(DotfilesStep(name="dotfiles"), step_ctx)
        assert (home / ".bashrc").read_text() == (sources / ".bashrc").read_text()

    def test_running_twice_is_stable(self, real_fs, step_ctx, sources, home: Path):
        step = DotfilesStep(name="dotfiles")
        run_step(step, step_ctx)
        first = (home / ".bashrc").read_text()
        run_step(step, step_ctx)
        assert (home / ".bashrc").read_text() == first
        assert probe_step(step, step_ctx) is True

    def test_missing_source_warns(self, real_fs, step_ctx, home: Path, caplog):
        (step_ctx.dotfiles_dir / ".bashrc").write_text("# rc\n")
        with caplog.at_level(logging.WARNING):
            result = run_step(DotfilesStep(name="dotfiles"), step_ctx)

        assert result.status == "installed"
        assert "copied 1 of 3" in result.message
        assert ".inputrc not found in" in caplog.text
        assert "starship.toml not found in" in caplog.text
        assert not (home / ".inputrc").exists()

    def test_nothing_to_copy_is_skipped(self, step_ctx, mocks):
        result = run_step(DotfilesStep(name="dotfiles"), step_ctx)
        assert result.status == "skipped"
        assert mocks["filesystem"].call_count == 0

    def test_source_dir_override(self, real_fs, step_ctx, tmp_path: Path, home: Path):
        custom = tmp_path / "custom"
        custom.mkdir()
        (custom / ".inputrc").write_text("set bell-style none\n")

        run_step(DotfilesStep(name="dotfiles", source_dir=str(custom)), step_ctx)
        assert (home / ".inputrc").read_text() == "set bell-style none\n"

    def test_copy_failure_raises(self, step_ctx, mocks, sources):
        mocks["filesystem"].set_failure("dotfiles:copy-.bashrc")
        with pytest.raises(StepError, match="Failed to copy .bashrc."):
            run_step(DotfilesStep(name="dotfiles"), step_ctx)

    def test_dry_run_copies_nothing(self, real_fs, step_ctx, sources, home: Path):
        step_ctx.dry_run = True
        result = run_step(DotfilesStep(name="dotfiles"), step_ctx)
        assert result.status == "planned"
        assert not (home / ".bashrc").exists()

    def test_probe_detects_drift(self, real_fs, step_ctx, sources, home: Path):
        step = DotfilesStep(name="dotfiles")
        assert probe_step(step, step_ctx) is False
        run_step(step, step_ctx)
        (home / ".inputrc").write_text("changed\n")
        assert probe_step(step, step_ctx) is False
