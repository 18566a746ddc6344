"""CLI entry point: autotypings.

Subcommands:
    autotypings deps app.ts                    # Print classified dependencies
    autotypings resolve app.ts -o typings/     # Write declaration documents
    autotypings builtins node typescript       # Builtin declaration packages
"""

from __future__ import annotations

import asyncio
import json
import sys
from dataclasses import asdict
from pathlib import Path

import click
import pydantic
import structlog

from autotypings.core.config import AutoTypingsOptions
from autotypings.core.logging import setup_logging
from autotypings.engines.dependency_parser import analyze_dependencies
from autotypings.manager import TypesManager
from autotypings.models import ExtraLib

log = structlog.get_logger("autotypings.cli")


def _read_source(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8", errors="replace")


def _write_libs(libs: list[ExtraLib], output: str | None) -> None:
    """Print *libs* as JSON, or write each under *output* by its filepath."""
    if output is None:
        click.echo(json.dumps([asdict(lib) for lib in libs], indent=2, ensure_ascii=False))
        return

    root = Path(output).resolve()
    written = 0
    for lib in libs:
        target = (root / lib.filepath).resolve()
        if not target.is_relative_to(root):
            log.warning("cli.unsafe_path", filepath=lib.filepath)
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(lib.content, encoding="utf-8")
        written += 1
    click.echo(f"Wrote {written} declaration file(s) to {root}")


async def _resolve(options: AutoTypingsOptions, source_text: str) -> list[ExtraLib]:
    async with TypesManager(options) as manager:
        return await manager.resolve_extra_libs(source_text)


async def _builtins(options: AutoTypingsOptions, tags: tuple[str, ...]) -> list[ExtraLib]:
    async with TypesManager(options) as manager:
        if tags:
            return await manager.resolve_builtins(tags)
        return await manager.resolve_configured_builtins()


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.option("--registry", default=None, help="General package registry base URL")
@click.option("--concurrency", type=int, default=None, help="Max simultaneous fetches (1-20)")
@click.option("--timeout", type=float, default=None, help="Per-request timeout in seconds")
@click.pass_context
def main(
    ctx: click.Context,
    verbose: bool,
    registry: str | None,
    concurrency: int | None,
    timeout: float | None,
) -> None:
    """autotypings: ambient type declarations for imported packages."""
    try:
        options = AutoTypingsOptions.from_env(
            verbose=verbose or None,
            registry=registry,
            max_concurrency=concurrency,
            request_timeout=timeout,
        )
    except pydantic.ValidationError as e:
        click.echo(f"Error: invalid configuration:\n{e}", err=True)
        sys.exit(1)

    setup_logging(verbose=options.verbose)
    ctx.obj = options


@main.command("deps")
@click.argument("source", type=click.Path(allow_dash=True))
def deps(source: str) -> None:
    """Print the external dependencies imported by SOURCE."""
    dependencies = analyze_dependencies(_read_source(source))
    click.echo(json.dumps([asdict(d) for d in dependencies], indent=2))


@main.command("resolve")
@click.argument("source", type=click.Path(allow_dash=True))
@click.option("-o", "--output", default=None, help="Directory to write declarations into")
@click.pass_obj
def resolve(options: AutoTypingsOptions, source: str, output: str | None) -> None:
    """Resolve declarations for the imports of SOURCE ('-' for stdin)."""
    libs = asyncio.run(_resolve(options, _read_source(source)))
    _write_libs(libs, output)


@main.command("builtins")
@click.argument("tags", nargs=-1)
@click.option("-o", "--output", default=None, help="Directory to write declarations into")
@click.pass_obj
def builtins(options: AutoTypingsOptions, tags: tuple[str, ...], output: str | None) -> None:
    """Resolve builtin declaration packages (default: those enabled in config)."""
    libs = asyncio.run(_builtins(options, tags))
    _write_libs(libs, output)


if __name__ == "__main__":
    main()
