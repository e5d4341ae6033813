"""
Tests for domain models — Action/Receipt, manifest steps and reports.
"""

import json

import pytest
from pydantic import ValidationError

from rigup.core.models import (
    Action,
    AurHelperStep,
    Detection,
    DotfilesStep,
    LazyVimStep,
    Manifest,
    PackageStep,
    Receipt,
    RunReport,
    StepResult,
)


class TestReceipt:
    def test_success(self):
        r = Receipt.success(adapter="pacman", action_id="zoxide:install", output="done")
        assert r.ok
        assert not r.failed
        assert r.output == "done"

    def test_failure(self):
        r = Receipt.failure(adapter="pacman", action_id="x", error="exit 1")
        assert r.failed
        assert r.error == "exit 1"

    def test_skip(self):
        r = Receipt.skip(adapter="git", action_id="x", reason="dry-run")
        assert r.skipped
        assert r.output == "dry-run"

    def test_action_defaults_to_mutating(self):
        assert Action(id="a", adapter="shell").mutating


class TestDetection:
    def test_command(self):
        d = Detection(command="zoxide")
        assert d.describe() == "command 'zoxide'"

    def test_package(self):
        d = Detection(package="steam")
        assert d.describe() == "package 'steam'"

    def test_requires_exactly_one(self):
        with pytest.raises(ValidationError):
            Detection()
        with pytest.raises(ValidationError):
            Detection(command="a", package="b")


class TestPackageStep:
    def test_defaults_from_name(self):
        step = PackageStep(name="zoxide")
        assert step.detection.command == "zoxide"
        assert step.package_names == ["zoxide"]
        assert step.source == "pacman"
        assert step.display_name == "zoxide"

    def test_explicit_fields(self):
        step = PackageStep(
            name="vscode",
            label="VS Code",
            source="aur",
            packages=["visual-studio-code-bin"],
            detect=Detection(command="code"),
        )
        assert step.detection.command == "code"
        assert step.package_names == ["visual-studio-code-bin"]
        assert step.display_name == "VS Code"


class TestManifest:
    def test_kind_defaults_to_package(self):
        m = Manifest.model_validate({"steps": [{"name": "eza"}, {"name": "nvim", "kind": "lazyvim"}]})
        assert isinstance(m.steps[0], PackageStep)
        assert isinstance(m.steps[1], LazyVimStep)

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            Manifest.model_validate({"steps": [{"name": "x", "kind": "flatpak-app"}]})

    def test_duplicate_names_rejected(self):
        with pytest.raises(ValidationError, match="duplicate"):
            Manifest.model_validate({"steps": [{"name": "eza"}, {"name": "eza"}]})

    def test_aur_before_helper_rejected(self):
        with pytest.raises(ValidationError, match="aur_helper"):
            Manifest.model_validate({
                "steps": [
                    {"name": "arch-update", "source": "aur"},
                    {"name": "paru", "kind": "aur_helper"},
                ]
            })

    def test_aur_after_helper_accepted(self):
        m = Manifest(steps=[AurHelperStep(name="paru"), PackageStep(name="arch-update", source="aur")])
        assert m.step_names() == ["paru", "arch-update"]

    def test_get_step(self):
        m = Manifest(steps=[PackageStep(name="fzf"), DotfilesStep(name="dotfiles")])
        assert m.get_step("dotfiles").kind == "dotfiles"
        assert m.get_step("missing") is None

    def test_serialization_roundtrip(self):
        m = Manifest(
            name="laptop",
            steps=[PackageStep(name="kitty"), LazyVimStep(name="neovim")],
            final_hints=["reopen your terminal"],
        )
        m2 = Manifest.model_validate(json.loads(m.model_dump_json()))
        assert m2.name == "laptop"
        assert [s.kind for s in m2.steps] == ["package", "lazyvim"]

    def test_dotfiles_defaults(self):
        step = DotfilesStep(name="dotfiles")
        assert [f.src for f in step.files] == [".bashrc", ".inputrc", "starship.toml"]
        assert step.files[2].dest == "~/.config/starship.toml"


class TestRunReport:
    def test_ok_collects_final_hints(self):
        report = RunReport(
            results=[StepResult(name="zoxide", status="installed", hints=["init zoxide"])],
            final_hints=["reopen terminal"],
        )
        assert report.ok
        assert report.hints == ["init zoxide", "reopen terminal"]

    def test_failed_drops_final_hints(self):
        report = RunReport(
            results=[StepResult(name="eza", status="failed")],
            failed_step="eza",
            error="Eza installation failed.",
            final_hints=["reopen terminal"],
        )
        assert report.status == "failed"
        assert report.hints == []
        assert report.count("failed") == 1

    def test_to_dict(self):
        report = RunReport(run_id="run-1", results=[StepResult(name="fzf", status="skipped")])
        data = report.to_dict()
        assert data["status"] == "ok"
        assert data["results"][0]["status"] == "skipped"
