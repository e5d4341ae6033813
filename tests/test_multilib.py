"""
Tests for enabling the [multilib] repository in pacman.conf.
"""

from pathlib import Path

import pytest

from rigup.adapters.shell.filesystem import FilesystemAdapter
from rigup.core.models.manifest import MultilibStep
from rigup.core.services.steps import StepError, probe_step, run_step
from rigup.core.services.steps.multilib import enable_multilib, multilib_enabled

STOCK_CONF = """\
[options]
Architecture = auto

[core]
Include = /etc/pacman.d/mirrorlist

[extra]
Include = /etc/pacman.d/mirrorlist

#[multilib-testing]
#Include = /etc/pacman.d/mirrorlist

#[multilib]
#Include = /etc/pacman.d/mirrorlist

# An example of a custom package repository.
#[custom]
#Server = file:///home/custompkgs
"""


class TestTextTransform:
    def test_stock_conf_is_disabled(self):
        assert not multilib_enabled(STOCK_CONF)

    def test_enable_uncomments_block(self):
        updated = enable_multilib(STOCK_CONF)
        assert "\n[multilib]\nInclude = /etc/pacman.d/mirrorlist\n" in updated
        assert multilib_enabled(updated)

    def test_enable_leaves_other_sections(self):
        updated = enable_multilib(STOCK_CONF)
        assert "#[multilib-testing]\n#Include = /etc/pacman.d/mirrorlist\n" in updated
        assert "#[custom]\n#Server = file:///home/custompkgs\n" in updated
        assert "# An example of a custom package repository." in updated

    def test_enable_only_touches_two_lines(self):
        before = STOCK_CONF.splitlines()
        after = enable_multilib(STOCK_CONF).splitlines()
        changed = [(a, b) for a, b in zip(before, after) if a != b]
        assert changed == [
            ("#[multilib]", "[multilib]"),
            ("#Include = /etc/pacman.d/mirrorlist", "Include = /etc/pacman.d/mirrorlist"),
        ]

    def test_enable_is_stable(self):
        once = enable_multilib(STOCK_CONF)
        assert enable_multilib(once) == once

    def test_no_section_unchanged(self):
        text = "[options]\nArchitecture = auto\n"
        assert enable_multilib(text) == text


class TestMultilibStep:
    @pytest.fixture
    def conf(self, tmp_path: Path, registry) -> Path:
        registry.register(FilesystemAdapter())
        path = tmp_path / "pacman.conf"
        path.write_text(STOCK_CONF)
        return path

    def test_enables_and_syncs(self, step_ctx, mocks, conf: Path):
        result = run_step(MultilibStep(name="multilib", pacman_conf=str(conf)), step_ctx)

        assert result.status == "installed"
        assert mocks["shell"].called_ids == ["multilib:write"]
        write = mocks["shell"].call_log[0].params
        assert write["argv"] == ["tee", str(conf)]
        assert write["sudo"] is True
        assert multilib_enabled(write["stdin"])
        assert mocks["pacman"].called_ids == ["multilib:sync"]

    def test_already_enabled_still_syncs(self, step_ctx, mocks, conf: Path):
        conf.write_text(enable_multilib(STOCK_CONF))
        result = run_step(MultilibStep(name="multilib", pacman_conf=str(conf)), step_ctx)

        assert result.status == "skipped"
        assert mocks["shell"].call_count == 0
        assert mocks["pacman"].called_ids == ["multilib:sync"]

    def test_missing_section_fails(self, step_ctx, mocks, conf: Path):
        conf.write_text("[options]\n")
        with pytest.raises(StepError, match="No commented"):
            run_step(MultilibStep(name="multilib", pacman_conf=str(conf)), step_ctx)
        assert mocks["pacman"].call_count == 0

    def test_sync_failure_raises(self, step_ctx, mocks, conf: Path):
        mocks["pacman"].set_failure("multilib:sync")
        with pytest.raises(StepError, match="synchronize"):
            run_step(MultilibStep(name="multilib", pacman_conf=str(conf)), step_ctx)

    def test_dry_run_reads_but_does_not_write(self, step_ctx, mocks, conf: Path):
        step_ctx.dry_run = True
        result = run_step(MultilibStep(name="multilib", pacman_conf=str(conf)), step_ctx)

        assert result.status == "planned"
        assert mocks["shell"].call_count == 0
        assert conf.read_text() == STOCK_CONF

    def test_probe(self, step_ctx, conf: Path):
        step = MultilibStep(name="multilib", pacman_conf=str(conf))
        assert probe_step(step, step_ctx) is False
        conf.write_text(enable_multilib(STOCK_CONF))
        assert probe_step(step, step_ctx) is True
