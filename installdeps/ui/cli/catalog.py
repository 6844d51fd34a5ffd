"""
CLI commands for the package catalog.

Thin wrappers over ``installdeps.core.config.loader``.
"""

from __future__ import annotations

import json
import sys

import click


@click.group()
def catalog() -> None:
    """Catalog — inspect and validate package lists."""


@catalog.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def check(ctx: click.Context, as_json: bool) -> None:
    """Validate the active catalog."""
    from installdeps.core.config.loader import (
        CatalogError,
        load_catalog,
        resolve_catalog_path,
    )

    path = resolve_catalog_path(ctx.obj.get("catalog_path"))
    try:
        cat = load_catalog(path)
    except CatalogError as e:
        if as_json:
            click.echo(json.dumps({"valid": False, "path": str(path), "error": str(e)}, indent=2))
        else:
            click.secho("❌ Catalog errors:", fg="red", bold=True, err=True)
            click.echo(f"   • {e}", err=True)
        sys.exit(1)

    summary = {
        "valid": True,
        "path": str(path),
        "project": cat.project,
        "managers": sorted(cat.managers),
        "macos_releases": [r.version for r in cat.macos.releases],
        "ubuntu_codenames": [c for r in cat.ubuntu.releases for c in r.codenames],
    }

    if as_json:
        click.echo(json.dumps(summary, indent=2))
        return

    click.secho("✅ Catalog is valid", fg="green", bold=True)
    click.echo(f"   Path: {path}")
    click.echo(f"   Project: {cat.project}")
    click.echo(f"   Managers: {', '.join(summary['managers'])}")
    click.echo(f"   macOS releases: {', '.join(summary['macos_releases'])}")
    click.echo(f"   Ubuntu codenames: {', '.join(summary['ubuntu_codenames'])}")
    click.echo()
