"""
Compiler selector CLI entrypoint.

Usage:
    ccsel --help
    ccsel --host host.yml select mypkg --needs cxx11 --fails-with gcc=4.8
    ccsel rules cxx11
    ccsel priority --family clang
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from compiler_selector import __version__
from compiler_selector.core.observability.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="ccsel")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (every candidate decision).")
@click.option(
    "--host",
    "host_path",
    type=click.Path(exists=False),
    default=None,
    envvar="CCSEL_HOST_PROFILE",
    help="Path to host.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    host_path: str | None,
) -> None:
    """Compiler selector: pick a working compiler for a package."""
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["host_path"] = Path(host_path) if host_path else None

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("CCSEL_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("CCSEL_LOG_FILE"),
        log_file_level=os.environ.get("CCSEL_LOG_FILE_LEVEL"),
        quiet_noisy=not debug,
    )


def _load_host(ctx: click.Context):
    """Load the host profile or exit with the config error."""
    from compiler_selector.core.config.loader import ConfigError, load_host_profile

    try:
        return load_host_profile(ctx.obj.get("host_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


def _parse_failure(text: str) -> tuple[object, int | None]:
    """``gcc=4.8`` is a series rule, ``clang@425`` a build rule, else a bare name."""
    if "=" in text:
        compiler, series = text.split("=", 1)
        return {compiler.strip(): series.strip()}, None
    if "@" in text:
        compiler, build = text.split("@", 1)
        try:
            return compiler.strip(), int(build)
        except ValueError:
            raise click.BadParameter(
                f"Build number must be an integer: {text!r}", param_hint="--fails-with",
            ) from None
    return text.strip(), None


# ── select ──────────────────────────────────────────────────────


@cli.command("select")
@click.argument("package")
@click.option("--needs", "standards", multiple=True, metavar="STANDARD",
              help="Standard the package requires (repeatable).")
@click.option("--fails-with", "failures", multiple=True, metavar="SPEC",
              help="Known failure: clang, clang@425 or gcc=4.8 (repeatable).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def select_cmd(
    ctx: click.Context,
    package: str,
    standards: tuple[str, ...],
    failures: tuple[str, ...],
    as_json: bool,
) -> None:
    """Select a compiler for PACKAGE on this host."""
    from compiler_selector.core.config.loader import ConfigError
    from compiler_selector.core.models.package import PackageSpec
    from compiler_selector.core.services.compiler_failure import (
        InvalidFailureSpecError,
        UnrecognizedStandardError,
    )
    from compiler_selector.core.services.compiler_selector import (
        CompilerSelectionError,
        CompilerSelector,
        default_priority_list,
    )

    try:
        spec = PackageSpec(name=package)
        for standard in standards:
            spec.needs_standard(standard)
        for text in failures:
            rule_spec, build = _parse_failure(text)
            spec.fails_with(rule_spec, build=build)
    except (UnrecognizedStandardError, InvalidFailureSpecError) as e:
        raise click.BadParameter(str(e)) from e

    host = _load_host(ctx)
    try:
        priority = host.priority or default_priority_list(host.default_compiler)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    try:
        chosen = CompilerSelector.select_for(spec, host, priority)
    except CompilerSelectionError as e:
        if as_json:
            click.echo(json.dumps({"package": package, "compiler": None, "error": str(e)}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps({
            "package": package,
            "compiler": chosen.value,
            "priority": [p.value for p in priority],
            "rules": len(spec.compiler_failures),
        }, indent=2))
        return

    if ctx.obj.get("quiet"):
        click.echo(chosen.value)
        return

    click.echo(f"{package}: ", nl=False)
    click.secho(chosen.value, fg="green", bold=True)


# ── standards / rules ───────────────────────────────────────────


@cli.command()
def standards() -> None:
    """List standards with registered failure rules."""
    from compiler_selector.core.services.compiler_failure import known_standards

    for name in known_standards():
        click.echo(name)


@cli.command()
@click.argument("standard")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def rules(standard: str, as_json: bool) -> None:
    """Show the failure rules registered for STANDARD."""
    from compiler_selector.core.services.compiler_failure import (
        UnrecognizedStandardError,
        rules_for_standard,
    )

    try:
        found = rules_for_standard(standard)
    except UnrecognizedStandardError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([
            {
                "compiler": r.name.value,
                "kind": r.version.kind.value,
                "version": str(r.version),
                "cause": r.cause,
            }
            for r in found
        ], indent=2))
        return

    for r in found:
        click.echo(f"  {r.name.value:<8} {str(r.version):<10} {r.cause}")


# ── priority ────────────────────────────────────────────────────


@cli.command()
@click.option("--family", default=None, help="Default compiler family (default: from host.yml).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def priority(ctx: click.Context, family: str | None, as_json: bool) -> None:
    """Show the compiler priority list for a default compiler family."""
    from compiler_selector.core.config.loader import ConfigError
    from compiler_selector.core.services.compiler_selector import (
        default_priority_list,
        expand_family,
    )

    try:
        if family is None:
            host = _load_host(ctx)
            order = tuple(host.priority or default_priority_list(host.default_compiler))
        else:
            order = default_priority_list(family)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([f.value for f in order], indent=2))
        return

    for i, entry in enumerate(order, 1):
        expanded = expand_family(entry)
        if len(expanded) > 1:
            click.echo(f"  {i}. {entry.value}  ({', '.join(f.value for f in expanded)})")
        else:
            click.echo(f"  {i}. {entry.value}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
