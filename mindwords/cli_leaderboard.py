"""CLI subcommand for the Dreamlo leaderboard."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from mindwords.cli_mindwords import _load_config_or_exit, build_leaderboard
from shared.adapters.dreamlo_adapter import sanitize_name

app = typer.Typer(help="Show or update the MindWords leaderboard")
console = Console()


def _format_seconds(seconds: int) -> str:
    minutes, secs = divmod(max(int(seconds), 0), 60)
    return f"{minutes}:{secs:02d}"


@app.command()
def show(
    limit: Optional[int] = typer.Option(None, help="Number of rows to show (defaults to the configured limit)"),
    config_file: Optional[Path] = typer.Option(None, "--config", help="YAML settings override"),
):
    """Show the top scores."""
    config = _load_config_or_exit(config_file)
    board = build_leaderboard(config)

    with console.status("Loading leaderboard..."):
        rows = board.top_scores(limit or config.leaderboard_limit)

    if board.last_error:
        console.print(f"[red]Leaderboard unavailable: {board.last_error}[/red]")
        raise typer.Exit(1)
    if not rows:
        console.print("[yellow]No scores yet[/yellow]")
        return

    table = Table(title="🏆 MindWords Leaderboard")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Score", style="green", justify="right")
    table.add_column("Time", style="magenta", justify="right")

    for rank, row in enumerate(rows, start=1):
        table.add_row(str(rank), row.name, str(row.score), _format_seconds(row.seconds))

    console.print(table)


@app.command()
def submit(
    name: str = typer.Argument(..., help="Player name"),
    score: int = typer.Argument(..., help="Total score"),
    seconds: int = typer.Argument(0, help="Elapsed seconds"),
    config_file: Optional[Path] = typer.Option(None, "--config", help="YAML settings override"),
):
    """Submit a score by hand."""
    if score < 0 or seconds < 0:
        console.print("[red]Error: score and seconds must not be negative[/red]")
        raise typer.Exit(1)

    config = _load_config_or_exit(config_file)
    board = build_leaderboard(config)
    clean = sanitize_name(name, config.name_max_length, config.placeholder_name)

    with console.status("Uploading score..."):
        ok = board.add_score(clean, score, seconds)

    if not ok:
        console.print(f"[red]Leaderboard update failed ({board.last_error})[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Leaderboard updated: {clean} {score}[/green]")
