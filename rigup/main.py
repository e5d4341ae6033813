"""
rigup — CLI entrypoint.

Usage:
    rigup                  # run the full provisioning sequence
    rigup install --dry-run
    rigup status
    rigup steps
    rigup config check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from rigup import __version__
from rigup.core.observability.logging_config import DEFAULT_LEVEL, setup_logging

_STATUS_STYLE = {
    "installed": ("✓", "green"),
    "updated": ("✓", "green"),
    "planned": ("→", "cyan"),
    "skipped": ("⊘", "yellow"),
    "failed": ("✗", "red"),
}


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="rigup")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Only show errors while running.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to a manifest (default: rigup.yml, else the built-in plan).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """rigup — bootstrap an Arch-based workstation.

    Without a command, installs everything in the manifest.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    if debug or verbose:
        level = "DEBUG"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("RIGUP_LOG_LEVEL", DEFAULT_LEVEL)

    setup_logging(
        level=level,
        log_file=os.environ.get("RIGUP_LOG_FILE"),
        log_file_level=os.environ.get("RIGUP_LOG_FILE_LEVEL"),
    )

    if ctx.invoked_subcommand is None:
        ctx.invoke(install)


@cli.command()
@click.option("--only", "only", multiple=True, help="Run only this step (repeatable).")
@click.option("--dry-run", is_flag=True, help="Detect and plan, but change nothing.")
@click.option(
    "--dotfiles-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding .bashrc, .inputrc, starship.toml (default: cwd).",
)
@click.option("--mock", is_flag=True, help="Use mock adapters (no real execution).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(
    ctx: click.Context,
    only: tuple[str, ...] = (),
    dry_run: bool = False,
    dotfiles_dir: str | None = None,
    as_json: bool = False,
    mock: bool = False,
) -> None:
    """Install every tool in the manifest, stopping at the first failure.

    Examples:

        rigup install

        rigup install --only zoxide --only eza

        rigup install --dry-run
    """
    from rigup.core.use_cases.install import run_install

    result = run_install(
        config_path=ctx.obj.get("config_path"),
        only=list(only) if only else None,
        dry_run=dry_run,
        dotfiles_dir=Path(dotfiles_dir) if dotfiles_dir else None,
        mock_mode=mock,
        ctx=ctx.obj.get("step_context"),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if not result.ok:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    report = result.report
    assert report is not None
    assert result.manifest is not None

    mode_label = "[dry-run] " if dry_run else "[mock] " if mock else ""
    click.echo()
    click.secho(f"⚡ {mode_label}rigup — {result.manifest.name}", fg="cyan", bold=True)
    for step_result in report.results:
        icon, color = _STATUS_STYLE.get(step_result.status, ("•", "white"))
        click.secho(f"   {icon} {step_result.label or step_result.name}", fg=color, nl=False)
        click.echo(f"  {step_result.message}")

    if not report.ok:
        click.echo()
        click.secho(f"[ERROR] {report.error}", fg="red", bold=True, err=True)
        sys.exit(1)

    click.echo()
    if dry_run:
        click.secho(
            f"   Dry run: {report.count('planned')} step(s) would change, "
            f"{report.count('skipped')} already in place.",
            fg="cyan",
        )
    else:
        click.secho("--- All installations are complete! ---", fg="green", bold=True)

    for hint in report.hints:
        click.secho(f"[INFO] {hint}", fg="blue")
    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def status(ctx: click.Context, as_json: bool) -> None:
    """Show which steps are already in place on this machine."""
    from rigup.core.use_cases.status import get_status

    result = get_status(
        config_path=ctx.obj.get("config_path"),
        ctx=ctx.obj.get("step_context"),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    assert result.manifest is not None
    click.echo()
    click.secho(f"📋 {result.manifest.name}", fg="cyan", bold=True)
    click.echo(f"   Manifest: {result.manifest_path}")
    click.echo()
    for entry in result.entries:
        if entry.error:
            click.secho(f"   ? {entry.label}", fg="yellow", nl=False)
            click.echo(f"  ({entry.error})")
        elif entry.present:
            click.secho(f"   ✓ {entry.label}", fg="green")
        else:
            click.secho(f"   ✗ {entry.label}", fg="red", nl=False)
            click.echo("  (missing)")

    click.echo()
    click.secho("   Tools:", fg="cyan")
    for name, info in result.adapters.items():
        icon, color = ("✓", "green") if info["available"] else ("✗", "red")
        click.secho(f"   {icon} {name}", fg=color)

    click.echo()
    click.secho(
        f"   {result.present_count}/{len(result.entries)} in place",
        fg="white",
        bold=True,
    )
    click.echo()


@cli.command()
@click.pass_context
def steps(ctx: click.Context) -> None:
    """List the manifest's steps in run order."""
    from rigup.core.config.loader import ConfigError, load_manifest

    try:
        manifest = load_manifest(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    for step in manifest.steps:
        if step.section:
            click.secho(step.section, fg="cyan", bold=True)
        click.echo(f"  {step.name:<14} {step.kind:<11} {step.display_name}")


@cli.group()
def config() -> None:
    """Manifest configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate a manifest."""
    from rigup.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.manifest is not None
        click.secho("✅ Manifest is valid", fg="green", bold=True)
        click.echo(f"   Manifest: {result.manifest.name}")
        click.echo(f"   Steps: {len(result.manifest.steps)}")
    else:
        click.secho("❌ Manifest errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        sys.exit(1)


if __name__ == "__main__":
    cli()
