"""Validate hand-authored week context files."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.append(str(REPO_ROOT))

from lernscope.core.config import DEFAULT_MAX_WEEK, DEFAULT_MIN_WEEK
from lernscope.weeks.loader import PACKAGED_DATA_DIR, duplicate_keys, lint_week_files, load_week_files

app = typer.Typer(help="Lint week context files for schema and consistency issues.")
console = Console()


@app.command()
def validate(
    weeks_dir: Optional[Path] = typer.Argument(
        None, exists=True, file_okay=False, help="Defaults to the packaged data."
    ),
    fail_on_warning: bool = typer.Option(
        False, "--fail-on-warning", help="Exit non-zero when warnings are present."
    ),
    reject_duplicates: bool = typer.Option(
        False, "--reject-duplicates", help="Treat a (course, week) defined twice as an error."
    ),
    min_week: int = typer.Option(DEFAULT_MIN_WEEK, "--min-week"),
    max_week: int = typer.Option(DEFAULT_MAX_WEEK, "--max-week"),
) -> None:
    files = load_week_files(weeks_dir or PACKAGED_DATA_DIR)
    errors, warnings = lint_week_files(files, min_week=min_week, max_week=max_week)
    if reject_duplicates:
        for (course, week), paths in duplicate_keys(files).items():
            errors.append(f"{course.value} week {week} is defined {len(paths)} times")

    table = Table(title="Week Context Validation", show_header=True)
    table.add_column("Severity", justify="center")
    table.add_column("Message")
    for issue in errors:
        table.add_row("error", issue, style="bold red")
    for issue in warnings:
        table.add_row("warning", issue, style="yellow")
    console.print(table)

    if errors or (fail_on_warning and warnings):
        raise typer.Exit(code=1)

    valid = sum(1 for week_file in files if week_file.valid)
    console.print(f"[green]{valid} week file(s) look good![/green]")


if __name__ == "__main__":
    app()
