"""CLI interface for svglinter using Typer framework."""

import asyncio
import glob
import json as jsonlib
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __description__, __version__
from .api import FileFailure, lint_files
from .config import LogLevel, OutputFormat, load_config
from .errors import SvglintError
from .lint.linting import Linting, LintState
from .lint.normalize import NormalizedConfig, normalize_config
from .logs import configure_logging
from .rules.registry import builtin_rules, default_registry

app = typer.Typer(
    name="svglinter",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

STATE_COLORS = {
    LintState.SUCCESS: "green",
    LintState.WARN: "yellow",
    LintState.ERROR: "red",
    LintState.IGNORED: "dim",
    LintState.LINTING: "blue",
}


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"svglinter version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True, help="Show version and exit")
    ] = False,
) -> None:
    """svglinter - lint SVG files against structural rules."""


def expand_paths(patterns: list[str]) -> list[Path]:
    """Expand glob patterns, keeping plain paths as given and dropping duplicates."""
    paths: list[Path] = []
    seen = set()
    for pattern in patterns:
        if glob.has_magic(pattern):
            matches = sorted(glob.glob(pattern, recursive=True))
        else:
            matches = [pattern]
        for match in matches:
            path = Path(match)
            key = path.resolve()
            if key not in seen:
                seen.add(key)
                paths.append(path)
    return paths


def render_linting(linting: Linting) -> None:
    """Print the results of one finished Linting as a table."""
    color = STATE_COLORS[linting.state]
    console.print(f"[{color}]{linting.state.value.upper()}[/{color}] {escape(linting.name)}")
    if linting.state == LintState.IGNORED:
        return

    table = Table()
    table.add_column("Rule", style="cyan")
    table.add_column("Type", style="white")
    table.add_column("Message", style="white")
    table.add_column("Location", style="dim")

    for reporter in linting.iter_reporters():
        for result in reporter.messages:
            type_color = "yellow" if result.type.value == "warn" else "red"
            location = f"{result.line}:{result.column}" if result.line is not None else ""
            table.add_row(
                reporter.name,
                f"[{type_color}]{result.type.value.upper()}[/{type_color}]",
                escape(result.reason),
                location,
            )

    if table.row_count:
        console.print(table)


def render_failure(failure: FileFailure) -> None:
    console.print(f"[red]FAILED[/red] {escape(failure.path)}: {escape(str(failure.error))}")


async def _lint_all(paths: list[Path], config: NormalizedConfig, output: OutputFormat,
                    ci: bool) -> tuple[list[Linting], list[FileFailure]]:
    if output == OutputFormat.TABLE and not ci:
        return await lint_files(paths, config, on_linting=render_linting, on_failure=render_failure)
    return await lint_files(paths, config)


def _summary_table(lintings: list[Linting], failures: list[FileFailure]) -> Table:
    counts = {state: 0 for state in LintState if state != LintState.LINTING}
    for linting in lintings:
        counts[linting.state] += 1

    table = Table(title="Summary")
    table.add_column("State", style="cyan")
    table.add_column("Files", style="white", justify="right")
    for state, count in counts.items():
        table.add_row(state.value, str(count))
    if failures:
        table.add_row("failed", str(len(failures)))
    return table


@app.command()
def lint(
    files: Annotated[
        list[str],
        typer.Argument(help="SVG files or glob patterns to lint")
    ],
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .svglintrc.py/.json)")
    ] = None,
    debug: Annotated[
        bool,
        typer.Option("--debug", "-d", help="Show debug logging")
    ] = False,
    ci: Annotated[
        bool,
        typer.Option("--ci", "-C", help="Only print results once every file finished")
    ] = False,
    format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format: table, json (default: table)")
    ] = OutputFormat.TABLE,
) -> None:
    """Lint SVG files."""
    try:
        lint_config = load_config(config)
    except SvglintError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    level = LogLevel.DEBUG if debug else lint_config.logging.level
    configure_logging(level)

    try:
        normalized = normalize_config(lint_config)
    except SvglintError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    normalized.log_level = level

    paths = expand_paths(files)
    if not paths:
        console.print("[red]Error:[/red] No files matched")
        raise typer.Exit(1)

    lintings, failures = asyncio.run(_lint_all(paths, normalized, format, ci))

    if format == OutputFormat.JSON:
        data = {
            "files": [linting.to_dict() for linting in lintings],
            "failures": [failure.to_dict() for failure in failures],
        }
        typer.echo(jsonlib.dumps(data, indent=2))
    else:
        if ci:
            for linting in lintings:
                render_linting(linting)
            for failure in failures:
                render_failure(failure)
        console.print()
        console.print(_summary_table(lintings, failures))

    failed = bool(failures) or any(linting.state == LintState.ERROR for linting in lintings)
    raise typer.Exit(1 if failed else 0)


@app.command("rules")
def list_rules() -> None:
    """List the rules that can be used in a config."""
    builtins = set(builtin_rules())
    table = Table()
    table.add_column("Rule", style="cyan")
    table.add_column("Source", style="white")
    for name in default_registry().names():
        table.add_row(name, "built-in" if name in builtins else "plugin")
    console.print(table)


if __name__ == "__main__":
    app()
