"""
prjenv — CLI entrypoint.

Usage:
    prjenv info
    prjenv get db_path
    prjenv new api --bin --add-member
    prjenv workspace members --json
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import NoReturn

import click

from prjenv import __version__
from prjenv.core.errors import EnvError
from prjenv.core.observability.logging_config import resolve_level, setup_logging


def _fail(err: EnvError) -> NoReturn:
    """Print an EnvError the way every command reports failures, then exit 1."""
    click.secho(f"❌ {err.message}", fg="red")
    if err.help:
        click.secho(f"   {err.help}", fg="yellow")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="prjenv")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, debug: bool) -> None:
    """prjenv — discover and manage the current Cargo workspace."""
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        flag_level = "DEBUG"
    elif verbose:
        flag_level = "INFO"
    elif quiet:
        flag_level = "ERROR"
    else:
        flag_level = None

    setup_logging(level=resolve_level(flag_level))


# ── Environment ─────────────────────────────────────────────────


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def info(as_json: bool) -> None:
    """Show the discovered environment."""
    from prjenv.core import context

    try:
        env = context.get()
    except EnvError as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps(env.model_dump(mode="json"), indent=2))
        return

    click.secho(f"\n📦 {env.summary()}", fg="cyan", bold=True)
    click.echo(f"   Kind:      {env.kind}")
    click.echo()
    click.secho("   Paths:", fg="white", bold=True)
    click.echo(f"     project   → {env.paths.project}")
    click.echo(f"     package   → {env.paths.package}")
    click.echo(f"     assets    → {env.paths.assets}")
    click.echo(f"     database  → {env.paths.database}")
    click.echo()
    click.secho("   Config:", fg="white", bold=True)
    click.echo(f"     bind      {env.config.bind_address}")
    click.echo(f"     db        {env.config.db}")
    if env.config.rust_log:
        click.echo(f"     rust_log  {env.config.rust_log}")

    if env.workspace.packages:
        click.echo()
        click.secho(f"   Packages: {env.workspace.package_count()}", fg="white", bold=True)
        for pkg in env.workspace:
            location = f"  → {pkg.path}" if pkg.path else ""
            click.echo(f"     • {pkg.metadata.display_name()}{location}")
    click.echo()


@cli.command()
def root() -> None:
    """Print the workspace root directory."""
    from prjenv.core.config.locator import find_cargo_root

    try:
        click.echo(str(find_cargo_root()))
    except EnvError as e:
        _fail(e)


@cli.command("get")
@click.argument("field")
def get_field(field: str) -> None:
    """Print one environment field (pkg_name, port, db_path, ...)."""
    from prjenv.core.accessors import getenv

    try:
        value = getenv(field)
    except EnvError as e:
        _fail(e)
    click.echo(str(value))


# ── Scaffolding ─────────────────────────────────────────────────


def _parse_dependency(spec: str) -> tuple[str, str]:
    name, sep, version = spec.partition("=")
    if not sep or not name.strip() or not version.strip():
        raise click.BadParameter(f"expected NAME=VERSION, got '{spec}'", param_hint="--dep")
    return name.strip(), version.strip()


@cli.command()
@click.argument("name")
@click.option("--bin/--lib", "binary", default=False, help="Binary or library package.")
@click.option("--description", "-d", default="", help="Package description.")
@click.option("--version", "pkg_version", default=None, help="Package version (default 0.1.0).")
@click.option("--edition", default=None, help="Rust edition (default 2024).")
@click.option("--author", "authors", multiple=True, help="Package author (repeatable).")
@click.option("--dep", "deps", multiple=True, help="Dependency as NAME=VERSION (repeatable).")
@click.option(
    "--dir",
    "base_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    help="Directory to create the package in.",
)
@click.option("--add-member", is_flag=True, help="Register the package in the workspace.")
@click.pass_context
def new(
    ctx: click.Context,
    name: str,
    binary: bool,
    description: str,
    pkg_version: str | None,
    edition: str | None,
    authors: tuple[str, ...],
    deps: tuple[str, ...],
    base_dir: Path,
    add_member: bool,
) -> None:
    """Scaffold a new package NAME."""
    from prjenv.core.services.scaffold import Scaffold

    dependencies = [_parse_dependency(d) for d in deps]

    scaffold = Scaffold(name=name).with_description(description)
    scaffold = scaffold.binary() if binary else scaffold.library()
    if pkg_version:
        scaffold = scaffold.with_version(pkg_version)
    if edition:
        scaffold = scaffold.with_edition(edition)
    for author in authors:
        scaffold = scaffold.with_author(author)
    for dep_name, dep_version in dependencies:
        scaffold = scaffold.with_dependency(dep_name, dep_version)

    try:
        package_dir = scaffold.create(base_dir)
        if add_member:
            member = _register_member(package_dir)
    except EnvError as e:
        _fail(e)

    if not ctx.obj.get("quiet", False):
        kind = "binary" if binary else "library"
        click.secho(f"✅ Created {kind} package {name} at {package_dir}", fg="green")
        if add_member:
            click.echo(f"   Added workspace member: {member}")


def _register_member(package_dir: Path) -> str:
    from prjenv.core.config.locator import find_cargo_root
    from prjenv.core.services.workspace_manager import WorkspaceManager

    root = find_cargo_root()
    member = Path(os.path.relpath(package_dir.resolve(), Path(root).resolve())).as_posix()
    WorkspaceManager(root).add_member(member)
    return member


# ── Workspace ───────────────────────────────────────────────────


@cli.group()
@click.option(
    "--root",
    "root_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Workspace root (default: auto-detect).",
)
@click.pass_context
def workspace(ctx: click.Context, root_dir: Path | None) -> None:
    """Workspace manifest commands."""
    ctx.obj["root"] = root_dir


def _manager(ctx: click.Context):
    from prjenv.core.config.locator import find_cargo_root
    from prjenv.core.services.workspace_manager import WorkspaceManager

    root_dir = ctx.obj.get("root") or find_cargo_root()
    return WorkspaceManager(root_dir)


@workspace.command("init")
@click.argument("name")
@click.option(
    "--dir",
    "parent_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    help="Directory to create the workspace in.",
)
def workspace_init(name: str, parent_dir: Path) -> None:
    """Create a new empty workspace NAME."""
    from prjenv.core.services.workspace_manager import WorkspaceManager

    try:
        path = WorkspaceManager.create(name, parent_dir)
    except EnvError as e:
        _fail(e)
    click.secho(f"✅ Created workspace at {path}", fg="green")


@workspace.command("add")
@click.argument("path")
@click.pass_context
def workspace_add(ctx: click.Context, path: str) -> None:
    """Register PATH as a workspace member."""
    try:
        _manager(ctx).add_member(path)
    except EnvError as e:
        _fail(e)
    click.secho(f"✅ Member {path} registered", fg="green")


@workspace.command("remove")
@click.argument("path")
@click.pass_context
def workspace_remove(ctx: click.Context, path: str) -> None:
    """Unregister PATH (no-op if it is not a member)."""
    try:
        _manager(ctx).remove_member(path)
    except EnvError as e:
        _fail(e)
    click.secho(f"✅ Member {path} removed", fg="green")


@workspace.command("members")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def workspace_members(ctx: click.Context, as_json: bool) -> None:
    """List workspace members in manifest order."""
    try:
        members = _manager(ctx).members()
    except EnvError as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps(members, indent=2))
        return
    if not members:
        click.echo("No members.")
        return
    for member in members:
        click.echo(f"  • {member}")


if __name__ == "__main__":
    cli()
