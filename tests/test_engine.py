"""
Tests for the engine executor — ordering, fail-fast and step selection.
"""

import logging

import pytest

from rigup.core.config.loader import ConfigError, load_default_manifest
from rigup.core.engine.executor import generate_run_id, run_manifest, select_steps
from rigup.core.models.action import Receipt
from rigup.core.models.manifest import Manifest


def _manifest(**overrides) -> Manifest:
    data = {
        "name": "test",
        "steps": [
            {"name": "rustup", "section": "Core Package Installations (pacman)"},
            {"name": "zoxide", "label": "Zoxide", "hints": ["init zoxide in your shell"]},
            {"name": "eza"},
        ],
        "final_hints": ["Please restart your terminal."],
    }
    data.update(overrides)
    return Manifest.model_validate(data)


class TestSelectSteps:
    def test_all_by_default(self):
        assert [s.name for s in select_steps(_manifest())] == ["rustup", "zoxide", "eza"]

    def test_only_keeps_manifest_order(self):
        steps = select_steps(_manifest(), ["eza", "rustup"])
        assert [s.name for s in steps] == ["rustup", "eza"]

    def test_unknown_name(self):
        with pytest.raises(ConfigError, match="Unknown step\\(s\\): nope"):
            select_steps(_manifest(), ["zoxide", "nope"])


class TestRunManifest:
    def test_runs_in_order(self, step_ctx, mocks):
        report = run_manifest(_manifest(), step_ctx)

        assert report.ok
        assert [r.name for r in report.results] == ["rustup", "zoxide", "eza"]
        assert mocks["pacman"].called_ids == ["rustup:install", "zoxide:install", "eza:install"]

    def test_stops_at_first_failure(self, step_ctx, mocks):
        mocks["pacman"].set_failure("zoxide:install", error="exit 1")
        report = run_manifest(_manifest(), step_ctx)

        assert not report.ok
        assert report.failed_step == "zoxide"
        assert report.error == "Zoxide installation failed. (exit 1)"
        assert [r.status for r in report.results] == ["installed", "failed"]
        assert "eza:install" not in mocks["pacman"].called_ids

    def test_failed_run_has_no_final_hints(self, step_ctx, mocks):
        mocks["pacman"].set_failure("eza:install")
        report = run_manifest(_manifest(), step_ctx)
        assert report.hints == ["init zoxide in your shell"]

    def test_hints_after_success(self, step_ctx):
        report = run_manifest(_manifest(), step_ctx)
        assert report.hints == ["init zoxide in your shell", "Please restart your terminal."]

    def test_mixed_skip_and_install(self, step_ctx, mocks, which):
        which.add("rustup")
        which.add("eza")
        report = run_manifest(_manifest(), step_ctx)

        assert [r.status for r in report.results] == ["skipped", "installed", "skipped"]
        assert mocks["pacman"].called_ids == ["zoxide:install"]

    def test_non_arch_runs_nothing(self, step_ctx, mocks, which):
        which.commands.discard("pacman")
        report = run_manifest(_manifest(), step_ctx)

        assert report.failed_step == "distro"
        assert report.results == []
        assert all(m.call_count == 0 for m in mocks.values())

    def test_only_subset(self, step_ctx, mocks):
        report = run_manifest(_manifest(), step_ctx, only=["eza"])

        assert [r.name for r in report.results] == ["eza"]
        assert mocks["pacman"].called_ids == ["eza:install"]
        assert report.hints == []

    def test_section_banner(self, step_ctx, caplog):
        with caplog.at_level(logging.INFO):
            run_manifest(_manifest(), step_ctx)
        assert "--- Starting Core Package Installations (pacman) ---" in caplog.text

    def test_dry_run_changes_nothing(self, step_ctx, mocks):
        step_ctx.dry_run = True
        report = run_manifest(_manifest(), step_ctx)

        assert report.ok
        assert report.dry_run
        assert report.count("planned") == 3
        assert mocks["pacman"].call_count == 0

    def test_report_to_dict(self, step_ctx):
        data = run_manifest(_manifest(), step_ctx).to_dict()
        assert data["status"] == "ok"
        assert data["failed_step"] is None
        assert len(data["results"]) == 3


class TestRunId:
    def test_format(self):
        run_id = generate_run_id()
        assert run_id.startswith("run-")
        assert run_id != generate_run_id()


class TestAurHelperChoice:
    def test_manifest_helper_is_used(self, step_ctx, mocks, which):
        which.add("yay")
        manifest = Manifest.model_validate({
            "steps": [
                {
                    "name": "yay",
                    "kind": "aur_helper",
                    "helper": "yay",
                    "repo_url": "https://aur.archlinux.org/yay.git",
                    "build_dir": "/tmp/yay-build",
                },
                {
                    "name": "vscode",
                    "source": "aur",
                    "packages": ["visual-studio-code-bin"],
                    "detect": {"command": "code"},
                },
            ]
        })
        report = run_manifest(manifest, step_ctx)

        assert report.ok, report.error
        assert [r.status for r in report.results] == ["skipped", "installed"]
        assert mocks["aur"].called_ids == ["vscode:install"]
        assert mocks["aur"].call_log[0].params["helper"] == "yay"

    def test_dry_run_names_custom_helper(self, step_ctx, which):
        which.add("paru")
        manifest = Manifest.model_validate({
            "steps": [
                {"name": "yay", "kind": "aur_helper", "helper": "yay"},
                {"name": "arch-update", "source": "aur"},
            ]
        })
        step_ctx.dry_run = True
        report = run_manifest(manifest, step_ctx)
        assert report.results[-1].message == "needs yay"


class TestDefaultManifestRun:
    MULTILIB_CONF = "[core]\nInclude = /etc/pacman.d/mirrorlist\n\n#[multilib]\n#Include = /etc/pacman.d/mirrorlist\n"

    @pytest.fixture
    def manifest(self, mocks) -> Manifest:
        mocks["filesystem"].set_response(
            "multilib:read",
            Receipt.success(adapter="filesystem", action_id="multilib:read", output=self.MULTILIB_CONF),
        )
        return load_default_manifest()

    def test_fresh_machine_runs_every_step(self, manifest, step_ctx, mocks, which):
        which.add("paru")
        report = run_manifest(manifest, step_ctx)

        assert report.ok, report.error
        assert [r.name for r in report.results] == manifest.step_names()
        assert mocks["aur"].called_ids == ["vscode:install", "arch-update:install"]
        assert mocks["shell"].called_ids == ["rustup:post-install-0", "multilib:write"]
        assert mocks["git"].called_ids == ["neovim:clone", "wallpapers:clone"]
        assert "steam:install" in mocks["pacman"].called_ids
        assert mocks["pacman"].called_ids.index("multilib:sync") < mocks["pacman"].called_ids.index(
            "steam:install"
        )
        assert report.hints[-len(manifest.final_hints):] == manifest.final_hints

    def test_stops_at_first_aur_step_without_helper(self, manifest, step_ctx, mocks):
        report = run_manifest(manifest, step_ctx)

        assert report.failed_step == "vscode"
        assert report.error == "paru is not installed. Cannot install VS Code from AUR."
        assert [r.name for r in report.results][-2:] == ["paru", "vscode"]
        assert mocks["aur"].call_count == 0
        assert "wallpapers:clone" not in mocks["git"].called_ids
