"""
matchergen — CLI entrypoint.

Usage:
    matchergen --help
    matchergen generate shop.models -o build/generated-matchers
    matchergen properties shop.models.Person
    matchergen config check
    matchergen history
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from matchergen import __version__
from matchergen.core.observability.logging_config import (
    ENV_LOG_FILE,
    ENV_LOG_FILE_LEVEL,
    resolve_level,
    setup_logging,
)
from matchergen.core.services.naming import NAMING_STRATEGIES

_STATUS_COLORS = {"ok": "green", "partial": "yellow", "failed": "red"}


@click.group()
@click.version_option(version=__version__, prog_name="matchergen")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to matchergen.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """matchergen — generate PyHamcrest matchers for your bean classes."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_LOG_FILE),
        log_file_level=os.environ.get(ENV_LOG_FILE_LEVEL),
        quiet_third_party=not debug,
    )


# ── generate ────────────────────────────────────────────────────


@cli.command()
@click.argument("names", nargs=-1)
@click.option(
    "--output", "-o", "output_root",
    type=click.Path(file_okay=False), default=None,
    help="Output root for generated modules.",
)
@click.option(
    "--path", "-p", "source_paths",
    multiple=True, type=click.Path(file_okay=False),
    help="Extra import root for the beans (repeatable).",
)
@click.option(
    "--naming", type=click.Choice(sorted(NAMING_STRATEGIES)), default=None,
    help="Naming strategy.",
)
@click.option("--suffix", default=None, help="Suffix of generated class names.")
@click.option(
    "--workers", type=click.IntRange(min=1), default=None,
    help="Generate in parallel with this many threads.",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--no-audit", is_flag=True, help="Don't append this run to the audit ledger.")
@click.pass_context
def generate(
    ctx: click.Context,
    names: tuple[str, ...],
    output_root: str | None,
    source_paths: tuple[str, ...],
    naming: str | None,
    suffix: str | None,
    workers: int | None,
    as_json: bool,
    no_audit: bool,
) -> None:
    """Generate matchers for modules, packages or classes.

    Examples:

        matchergen generate shop.models

        matchergen generate shop.models.Person -p src -o build/matchers

        matchergen generate shop --naming sub-package --workers 4
    """
    from matchergen.core.use_cases.generate import run_generate

    result = run_generate(
        names=names,
        config_path=ctx.obj.get("config_path"),
        output_root=output_root,
        source_paths=source_paths,
        naming=naming,
        suffix=suffix,
        workers=workers,
        audit=False if no_audit else None,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    report = result.report
    assert report is not None
    quiet = ctx.obj.get("quiet", False)

    if not quiet:
        click.secho(f"\n🧪 matchergen {report.run_id}", fg="cyan", bold=True)
        click.echo(
            f"   Candidates: {report.discovered} found | {report.eligible} eligible"
        )
        click.echo()

    for outcome in report.outcomes:
        if outcome.ok and outcome.artifact is not None:
            if not quiet:
                click.secho(f"   ✓ {outcome.candidate}", fg="green", nl=False)
                click.echo(f"  → {outcome.artifact.module_name}")
        elif outcome.failure is not None:
            click.secho(f"   ✗ {outcome.candidate} ", fg="red", nl=False)
            click.echo(f"[{outcome.failure.kind}] {outcome.failure.cause}")

    for failure in report.unresolved:
        click.secho(f"   ⚠️  {failure.candidate} ", fg="yellow", nl=False)
        click.echo(f"[{failure.kind}] {failure.cause}")

    click.echo()
    click.secho(
        f"   Result: {report.succeeded}/{report.eligible} generated",
        fg=_STATUS_COLORS.get(report.status, "white"),
        bold=True,
    )

    if report.failed > 0:
        click.echo()
        sys.exit(1)

    click.echo()


# ── properties ──────────────────────────────────────────────────


@cli.command()
@click.argument("name")
@click.option(
    "--path", "-p", "source_paths",
    multiple=True, type=click.Path(file_okay=False),
    help="Extra import root for the beans (repeatable).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def properties(
    ctx: click.Context,
    name: str,
    source_paths: tuple[str, ...],
    as_json: bool,
) -> None:
    """Show candidates and extracted properties for NAME."""
    from matchergen.core.use_cases.properties import display_type, inspect_input

    result = inspect_input(
        name,
        config_path=ctx.obj.get("config_path"),
        source_paths=source_paths,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.errors else 0)

    for report in result.candidates:
        click.secho(f"\n📦 {report.candidate.qualified_name}", fg="cyan", bold=True)
        if report.excluded_because:
            click.secho(f"   excluded: {report.excluded_because}", fg="yellow")
        if not report.properties:
            click.echo("   (no properties)")
        for prop in report.properties:
            flags = "rw" if prop.writable else "r-"
            click.echo(f"   • {prop.name}: {display_type(prop)}  [{prop.kind}, {flags}]")

    if result.errors:
        click.echo()
        for err in result.errors:
            click.secho(f"❌ {err}", fg="red")
        sys.exit(1)

    click.echo()


# ── config ──────────────────────────────────────────────────────


@cli.group()
def config() -> None:
    """Generator configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate matchergen.yml configuration."""
    from matchergen.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.config is not None  # guaranteed when valid
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   File: {result.config_path}")
        click.echo(f"   Inputs: {len(result.config.inputs)}")
        click.echo(f"   Output root: {result.config.output_root}")
        click.echo(f"   Naming: {result.config.naming.strategy}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)

    click.echo()


# ── history ─────────────────────────────────────────────────────


@cli.command()
@click.option("--limit", "-n", default=10, type=click.IntRange(min=1), help="Number of runs.")
@click.option(
    "--output", "-o", "output_root",
    type=click.Path(file_okay=False), default=None,
    help="Output root whose ledger to read.",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def history(ctx: click.Context, limit: int, output_root: str | None, as_json: bool) -> None:
    """Show recent generation runs from the audit ledger."""
    from matchergen.core.use_cases.history import recent_runs

    result = recent_runs(
        config_path=ctx.obj.get("config_path"),
        limit=limit,
        output_root=output_root,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    if not result.entries:
        click.echo("No runs recorded yet.")
        return

    click.secho(f"\n📜 {result.total} run(s) in {result.ledger_path}", fg="cyan", bold=True)
    for entry in result.entries:
        click.echo(f"   {entry.timestamp}  {entry.run_id}  ", nl=False)
        click.secho(entry.status, fg=_STATUS_COLORS.get(entry.status, "white"), nl=False)
        click.echo(
            f"  {entry.matchers_generated} generated, {entry.matchers_failed} failed"
            f"  ({', '.join(entry.inputs)})"
        )
    click.echo()


if __name__ == "__main__":
    cli()
