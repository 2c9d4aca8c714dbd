"""Rich console singleton and output helpers."""

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

# Status/progress to stderr so it doesn't pollute piped JSON output
console = Console(stderr=True)

# Data output to stdout (pipeable to jq)
stdout_console = Console()


def print_ok(msg: str) -> None:
    """Print a success message to stderr."""
    console.print(f"[green]✓[/green] {escape(msg)}")


def print_err(msg: str) -> None:
    """Print an error message to stderr."""
    console.print(f"[red]✗[/red] {escape(msg)}")


def print_warn(msg: str) -> None:
    """Print a warning message to stderr."""
    console.print(f"[yellow]![/yellow] {escape(msg)}")


def output_json(data) -> None:
    """Print data as JSON to stdout."""
    stdout_console.print_json(data=data, default=str)


def output_table(rows: list[dict], *, ctx: typer.Context, title: str = "") -> None:
    """Print rows as JSON array or Rich table."""
    if ctx.obj.get("json"):
        output_json(rows)
        return

    if not rows:
        console.print("[dim]No data[/dim]")
        return

    table = Table(title=escape(title), show_lines=False)
    for col in rows[0]:
        table.add_column(col)
    for row in rows:
        table.add_row(*[escape(str(value)) for value in row.values()])
    console.print(table)
