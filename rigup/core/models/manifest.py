"""
Manifest model — the ordered list of provisioning steps.

Loaded from rigup.yml (or the built-in default), this is the
canonical truth about what gets installed and in which order.
Each step is discriminated by its ``kind``.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, model_validator


class Detection(BaseModel):
    """How to tell that a tool is already present.

    ``command`` is looked up on PATH; ``package`` is queried from the
    pacman package database. Exactly one must be set.
    """

    command: str | None = None
    package: str | None = None

    @model_validator(mode="after")
    def _exactly_one(self) -> Detection:
        if bool(self.command) == bool(self.package):
            raise ValueError("detection needs exactly one of 'command' or 'package'")
        return self

    def describe(self) -> str:
        if self.command:
            return f"command '{self.command}'"
        return f"package '{self.package}'"


class _StepBase(BaseModel):
    name: str
    label: str = ""
    section: str = ""
    hints: list[str] = Field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.label or self.name


class PackageStep(_StepBase):
    """Generic idempotent install of one tool."""

    kind: Literal["package"] = "package"
    source: Literal["pacman", "aur"] = "pacman"
    packages: list[str] = Field(default_factory=list)
    detect: Detection | None = None
    interactive: bool = False
    post_install: list[list[str]] = Field(default_factory=list)

    @property
    def detection(self) -> Detection:
        return self.detect or Detection(command=self.name)

    @property
    def package_names(self) -> list[str]:
        return self.packages or [self.name]


class LazyVimStep(_StepBase):
    """Neovim plus a fresh LazyVim starter configuration."""

    kind: Literal["lazyvim"] = "lazyvim"
    packages: list[str] = Field(default_factory=lambda: ["neovim"])
    detect: Detection = Field(default_factory=lambda: Detection(command="nvim"))
    starter_url: str = "https://github.com/LazyVim/starter"
    config_dir: str = "~/.config/nvim"
    data_dirs: list[str] = Field(
        default_factory=lambda: [
            "~/.local/share/nvim",
            "~/.local/state/nvim",
            "~/.cache/nvim",
        ]
    )


class AurHelperStep(_StepBase):
    """Bootstrap the AUR helper itself with makepkg."""

    kind: Literal["aur_helper"] = "aur_helper"
    helper: str = "paru"
    repo_url: str = "https://aur.archlinux.org/paru.git"
    build_dir: str = "/tmp/paru-build"
    build_deps: list[str] = Field(default_factory=lambda: ["base-devel", "git"])


class MultilibStep(_StepBase):
    """Enable the [multilib] repository and resync databases."""

    kind: Literal["multilib"] = "multilib"
    pacman_conf: str = "/etc/pacman.conf"


class GitRepoStep(_StepBase):
    """Clone a repository, or pull it when already cloned."""

    kind: Literal["git_repo"] = "git_repo"
    url: str
    dest: str
    depth: int | None = 1


class DotfileEntry(BaseModel):
    src: str
    dest: str


class DotfilesStep(_StepBase):
    """Copy dotfiles from a source directory into place."""

    kind: Literal["dotfiles"] = "dotfiles"
    source_dir: str | None = None   # None = the directory rigup runs from
    files: list[DotfileEntry] = Field(
        default_factory=lambda: [
            DotfileEntry(src=".bashrc", dest="~/.bashrc"),
            DotfileEntry(src=".inputrc", dest="~/.inputrc"),
            DotfileEntry(src="starship.toml", dest="~/.config/starship.toml"),
        ]
    )


Step = Annotated[
    Union[PackageStep, LazyVimStep, AurHelperStep, MultilibStep, GitRepoStep, DotfilesStep],
    Field(discriminator="kind"),
]


class Manifest(BaseModel):
    """Ordered provisioning plan.

    Validation enforces unique step names and that every AUR package
    step comes after the step that installs the AUR helper.
    """

    name: str = "workstation"
    steps: list[Step] = Field(default_factory=list)
    final_hints: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _default_kind(cls, data: Any) -> Any:
        # Steps without a kind are plain package installs.
        if isinstance(data, dict) and isinstance(data.get("steps"), list):
            steps = []
            for raw in data["steps"]:
                if isinstance(raw, dict) and "kind" not in raw:
                    raw = {**raw, "kind": "package"}
                steps.append(raw)
            data = {**data, "steps": steps}
        return data

    @model_validator(mode="after")
    def _check_order(self) -> Manifest:
        seen: set[str] = set()
        helper_seen = False
        for step in self.steps:
            if step.name in seen:
                raise ValueError(f"duplicate step name '{step.name}'")
            seen.add(step.name)
            if step.kind == "aur_helper":
                helper_seen = True
            elif step.kind == "package" and step.source == "aur" and not helper_seen:
                raise ValueError(
                    f"AUR step '{step.name}' must come after an 'aur_helper' step"
                )
        return self

    def get_step(self, name: str) -> Step | None:
        """Look up a step by name."""
        for step in self.steps:
            if step.name == name:
                return step
        return None

    def step_names(self) -> list[str]:
        return [s.name for s in self.steps]
