from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from routeguard.domain.errors import ProjectLoadFailure
from routeguard.orchestrator.pipeline import run_analyze
from routeguard.report.render import (
    FORMATS,
    filter_unguarded,
    render_json,
    render_lines,
    render_table,
)

app = typer.Typer(add_completion=False)

console = Console()
err_console = Console(stderr=True)


@app.command()
def scan(
    project: Optional[str] = typer.Argument(None, help="Path to the Maven/Gradle project to analyze"),
    format: str = typer.Option("lines", help="Output format: lines|table|json"),
    unguarded: bool = typer.Option(False, "--unguarded", help="Only show routes without any guard"),
    max_files: Optional[int] = typer.Option(None, help="Limit scanned files (debug)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
) -> None:
    """List every controller route with its method-security expressions."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if project is None:
        err_console.print("Error: Please provide the project path as a command-line argument.")
        raise typer.Exit(code=1)

    fmt = format.lower().strip()
    if fmt not in FORMATS:
        raise typer.BadParameter(f"format must be one of: {', '.join(FORMATS)}")

    try:
        result = run_analyze(Path(project), max_files=max_files)
    except ProjectLoadFailure as exc:
        err_console.print(f"Error: {exc}", markup=False)
        raise typer.Exit(code=1)

    for diag in result.diagnostics:
        err_console.print(str(diag), markup=False, highlight=False)

    records = filter_unguarded(result.records) if unguarded else result.records

    if fmt == "json":
        typer.echo(render_json(records))
    elif fmt == "table":
        console.print(
            f"[bold]{result.build_tool}[/bold] project: {result.project_root} "
            f"({result.files_scanned} files, {result.controllers} controllers)",
            highlight=False,
        )
        console.print(render_table(records))
        console.print(f"Routes: [bold]{len(records)}[/bold]")
    elif records:
        typer.echo(render_lines(records))

    if result.failed:
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
