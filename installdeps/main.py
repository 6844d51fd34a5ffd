"""
install-deps — CLI entrypoint.

Usage:
    install-deps --help
    install-deps detect
    install-deps plan
    install-deps install [--dry-run]
    install-deps catalog check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from installdeps import __version__
from installdeps.core.observability.logging_config import resolve_level, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="install-deps")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--catalog",
    "catalog_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to a catalog.yml (default: $INSTALLDEPS_CATALOG, then built-in).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    catalog_path: str | None,
) -> None:
    """install-deps — install cpp-ethereum build dependencies for this host."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["catalog_path"] = Path(catalog_path) if catalog_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(
            debug=debug,
            verbose=verbose,
            quiet=quiet,
            env_level=os.environ.get("INSTALLDEPS_LOG_LEVEL"),
        ),
        log_file=os.environ.get("INSTALLDEPS_LOG_FILE"),
        log_file_level=os.environ.get("INSTALLDEPS_LOG_FILE_LEVEL"),
    )


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def detect(as_json: bool) -> None:
    """Show the platform signals detected on this host."""
    from installdeps.core.services.detection import detect as detect_signal

    signal = detect_signal()

    if as_json:
        click.echo(json.dumps(signal.to_dict(), indent=2))
        return

    click.secho("\n🔍 Platform signals", fg="cyan", bold=True)
    for key, value in signal.to_dict().items():
        if isinstance(value, list):
            value = ", ".join(value) or "-"
        click.echo(f"   {key:<16} {value if value is not None else '-'}")
    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def plan(ctx: click.Context, as_json: bool) -> None:
    """Show what install would do on this host, without running it."""
    from installdeps.core.use_cases.install import resolve_plan

    result = resolve_plan(catalog_path=ctx.obj.get("catalog_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    if result.unsupported:
        _report_unsupported(result.unsupported)
        sys.exit(1)

    action = result.action
    click.secho(f"\n📋 {action.platform} ({action.manager})", fg="cyan", bold=True)
    click.echo(f"   Packages: {len(action.packages)}")
    if action.requires_elevation:
        click.secho("   Privileged steps run through sudo", fg="yellow")
    click.echo()
    for step in action.steps():
        click.echo(f"   • {step.command_line}")
    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--dry-run", is_flag=True, help="Resolve and print the steps but don't run them.")
@click.option("--mock", is_flag=True, help="Use mock adapter (no real execution).")
@click.pass_context
def install(ctx: click.Context, as_json: bool, dry_run: bool, mock: bool) -> None:
    """Install the build dependencies for this host.

    Examples:

        install-deps install

        install-deps install --dry-run
    """
    from installdeps.core.use_cases.install import execute_plan, resolve_plan

    plan_result = resolve_plan(catalog_path=ctx.obj.get("catalog_path"))

    if as_json:
        result = execute_plan(plan_result, dry_run=dry_run, mock_mode=mock)
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    if plan_result.error:
        click.secho(f"❌ {plan_result.error}", fg="red", err=True)
        sys.exit(1)

    if plan_result.unsupported:
        _report_unsupported(plan_result.unsupported)
        sys.exit(1)

    action = plan_result.action
    mode_label = "[dry-run] " if dry_run else "[mock] " if mock else ""
    click.secho(
        f"{mode_label}Installing {plan_result.project} dependencies on {action.platform}.",
        fg="cyan",
        bold=True,
    )
    if action.notes:
        click.echo()
        for note in action.notes:
            click.secho(note, fg="yellow")
        click.echo()

    verbose = ctx.obj.get("verbose", False)

    def on_progress(step, receipt) -> None:
        if receipt is None:
            if not dry_run:
                click.echo(f"   → {step.command_line}")
            return
        _print_receipt(receipt, verbose)

    result = execute_plan(
        plan_result, dry_run=dry_run, mock_mode=mock, on_progress=on_progress,
    )

    if result.report:
        for step_id in result.report.not_run:
            click.secho(f"   · {step_id} (not run)", fg="white", err=True)

    sys.exit(result.exit_code)


def _print_receipt(receipt, verbose: bool) -> None:
    """Print one step result line (plus output tail when verbose)."""
    if receipt.ok:
        click.secho(f"   ✓ {receipt.step_id}", fg="green", nl=False)
        timing = f" ({receipt.duration_ms}ms)" if receipt.duration_ms else ""
        click.echo(timing)
        if verbose and receipt.output:
            for line in receipt.output.split("\n")[-10:]:
                click.echo(f"     │ {line}")
    elif receipt.failed:
        click.secho(f"   ✗ {receipt.step_id}", fg="red", err=True)
        if receipt.error:
            for line in receipt.error.split("\n")[-5:]:
                click.echo(f"     │ {line}", err=True)
    else:
        click.secho(f"   ⊘ {receipt.output}", fg="yellow")


def _report_unsupported(unsupported) -> None:
    """Print an unsupported-platform error and its remediation to stderr."""
    click.secho(f"ERROR - {unsupported.reason}", fg="red", bold=True, err=True)
    for line in unsupported.remediation:
        click.echo(line, err=True)


# ── Register sub-command groups from installdeps/ui/cli/ ──────────

from installdeps.ui.cli.catalog import catalog  # noqa: E402

cli.add_command(catalog)


if __name__ == "__main__":
    cli()
