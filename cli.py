"""Command-line interface for MindWords.

This is the unified CLI entry point:
- `mindwords game` - Play rounds and poke at the word/tip sources
- `mindwords board` - Show or update the Dreamlo leaderboard
- `mindwords analytics` - Reports over local controllog data
"""

import typer
from rich.console import Console

from mindwords.cli_leaderboard import app as board_app
from mindwords.cli_mindwords import app as game_app
from shared.cli_analytics import app as analytics_app

# Main application
app = typer.Typer(
    help="MindWords - guess the hidden word, spend points on clues",
    no_args_is_help=True,
)
console = Console()

# Register subcommands
app.add_typer(game_app, name="game", help="Play MindWords")
app.add_typer(board_app, name="board", help="Show or update the leaderboard")
app.add_typer(analytics_app, name="analytics", help="Analytics and reporting tools")


@app.callback()
def main():
    """MindWords - a single-player word-guessing game.

    Examples:

        # Play against the online word API
        mindwords game play --name Ada

        # Play offline with a fixed seed
        mindwords game play --offline --seed 7

        # Check the leaderboard
        mindwords board show --limit 10

        # Check analytics
        mindwords analytics trial-balance
        mindwords analytics rounds
    """
    pass


@app.command()
def version():
    """Show version information."""
    from mindwords import __version__ as mindwords_version
    from mindwords.game import MindWordsGame
    from shared import __version__ as shared_version

    console.print("[bold]MindWords[/bold]")
    console.print(f"  mindwords: {mindwords_version}")
    console.print(f"  game rules: {MindWordsGame.VERSION}")
    console.print(f"  shared: {shared_version}")


if __name__ == "__main__":
    app()
