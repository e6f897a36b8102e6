"""CLI subcommand for playing MindWords."""

import logging
import random
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from mindwords.config import DEFAULT_WORDS_FILE, GameConfig, load_config
from mindwords.errors import InvalidGuessError, NoActiveRoundError, RoundOverError
from mindwords.game import STATUS_LOAD_FAILED, MindWordsGame
from mindwords.game_engine import Outcome
from mindwords.prefs import Prefs
from shared.adapters.dreamlo_adapter import DreamloClient, sanitize_name
from shared.adapters.words_api import RandomWordApiSource, TipSource, WordSource, YamlWordSource, WordSourceError
from shared.utils.logging import setup_logging

app = typer.Typer(help="Play MindWords rounds")
console = Console()
logger = logging.getLogger(__name__)

HELP_TEXT = """[bold]Commands[/bold]
  [cyan]<word>[/cyan]   guess the whole word (-10, uses a try)
  [cyan]?x[/cyan]       how many times letter x appears (-5)
  [cyan]#[/cyan]        how many letters the word has (-5)
  [cyan]![/cyan]        reveal one letter plus a tip, after 5 wrong guesses (-5)
  [cyan]new[/cyan]      skip to a new word
  [cyan]retry[/cyan]    try fetching a word again
  [cyan]upload[/cyan]   submit your total to the leaderboard
  [cyan]help[/cyan]     show this list
  [cyan]quit[/cyan]     leave the game"""


def _load_config_or_exit(config_file: Optional[Path]) -> GameConfig:
    try:
        return load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error loading config: {e}[/red]")
        raise typer.Exit(1)


def build_word_source(config: GameConfig, offline: bool, rng: random.Random) -> WordSource:
    """Bundled word list when offline, random-word-api otherwise."""
    if offline:
        return YamlWordSource(DEFAULT_WORDS_FILE, rng=rng)
    return RandomWordApiSource(url=config.word_url, timeout=config.timeout, rng=rng)


def build_leaderboard(config: GameConfig) -> DreamloClient:
    return DreamloClient(
        public_code=config.dreamlo_public_code,
        private_code=config.dreamlo_private_code,
        base_url=config.leaderboard_url,
        timeout=config.timeout,
        name_max_length=config.name_max_length,
        placeholder_name=config.placeholder_name,
    )


def _render(game: MindWordsGame) -> None:
    snap = game.snapshot()
    rnd = snap["round"]
    header = (
        f"[dim]Level {snap['level']} · Total {snap['total']} · "
        f"Solved {snap['solved']} · {snap['elapsed']}s[/dim]"
    )
    if rnd is None:
        if snap["status"] == STATUS_LOAD_FAILED:
            console.print(f"{header}\n[yellow]No word loaded. Type 'retry'.[/yellow]")
        return
    console.print(header)
    console.print(
        f"[bold]{' '.join(rnd['mask'])}[/bold]   "
        f"score [green]{rnd['score']}[/green]   tries {rnd['tries']}/{rnd['max_tries']}"
    )


def _wait_for_word(game: MindWordsGame) -> bool:
    with console.status("Fetching a word..."):
        ready = game.wait_for_word()
    if not ready:
        console.print(f"[red]{game.message}[/red]")
    return ready


def _upload(game: MindWordsGame, board: DreamloClient, name: str) -> None:
    future = game.submit_score(board, name)
    with console.status("Uploading score..."):
        ok = future.result()
    style = "green" if ok else "red"
    console.print(f"[{style}]{game.message}[/{style}]")


def dispatch(game: MindWordsGame, line: str, board: Optional[DreamloClient] = None, name: str = "Player") -> bool:
    """Handle one line of player input. Returns False when the player quits."""
    text = line.strip()
    command = text.lower()

    if not text:
        return True
    if command in ("quit", "exit", "q"):
        return False
    if command in ("help", "h"):
        console.print(HELP_TEXT)
        return True
    if command == "new":
        game.request_new_word()
        _wait_for_word(game)
        return True
    if command == "retry":
        game.retry()
        _wait_for_word(game)
        return True
    if command == "upload":
        if board is None:
            console.print("[yellow]No leaderboard configured[/yellow]")
        else:
            _upload(game, board, name)
        return True

    try:
        if text.startswith("?"):
            game.letter_count(text[1:])
        elif text == "#":
            game.length_clue()
        elif text == "!":
            result = game.hint()
            if result.granted and game.pending_tip is not None:
                console.print(f"[cyan]{result.message}[/cyan]")
                with console.status("Looking for a tip..."):
                    game.pending_tip.result()
        else:
            result = game.guess(text)
            console.print(f"[{'green' if result.outcome == Outcome.WIN else 'yellow'}]{game.message}[/]")
            if game.round is None:
                _wait_for_word(game)
            return True
    except (InvalidGuessError, NoActiveRoundError, RoundOverError) as e:
        console.print(f"[yellow]{e}[/yellow]")
        return True

    console.print(f"[cyan]{game.message}[/cyan]")
    if game.round is None:
        _wait_for_word(game)
    return True


@app.command()
def play(
    name: Optional[str] = typer.Option(None, help="Player name for the leaderboard (remembered)"),
    offline: bool = typer.Option(False, help="Use the bundled word list instead of the word API"),
    seed: Optional[int] = typer.Option(None, help="Random seed for reproducible words and hints"),
    config_file: Optional[Path] = typer.Option(None, "--config", help="YAML file overriding the default settings"),
    log_path: str = typer.Option("logs/mindwords", help="Directory for log files"),
    verbose: bool = typer.Option(False, help="Enable verbose logging"),
):
    """Play MindWords interactively.

    Guess the hidden word in 10 tries. Clues cost points; solving a word adds
    its remaining score to your total and moves you to longer words.
    """
    config = _load_config_or_exit(config_file)

    log_dir = Path(log_path)
    log_dir.mkdir(parents=True, exist_ok=True)
    setup_logging(log_dir, verbose)

    rng = random.Random(seed)
    if seed is not None:
        logger.info(f"Random seed set to: {seed}")

    prefs = Prefs(config.home_dir)
    if name:
        name = sanitize_name(name, config.name_max_length, config.placeholder_name)
        try:
            prefs.save_name(name)
        except OSError as e:
            logger.warning(f"Could not remember player name: {e}")
    else:
        name = prefs.load_name() or config.placeholder_name

    word_source = build_word_source(config, offline, rng)
    tip_source = None if offline else TipSource(
        api_ninjas_key=config.api_ninjas_key,
        timeout=config.timeout,
        datamuse_url=config.datamuse_url,
        api_ninjas_url=config.api_ninjas_url,
    )
    board = build_leaderboard(config)

    run_id = f"{datetime.utcnow().strftime('%Y-%m-%dT%H-%M-%S')}_mindwords_{name}"

    with MindWordsGame(word_source, tip_source, prefs=prefs, config=config, rng=rng, quiet=True) as game:
        game.init_controllog(log_dir, run_id)
        console.print(f"[bold]🧠 MindWords[/bold] - welcome, {name}!")
        console.print(HELP_TEXT)

        game.start()
        _wait_for_word(game)

        while True:
            _render(game)
            try:
                line = console.input("[bold]> [/bold]")
            except (EOFError, KeyboardInterrupt):
                console.print()
                break
            if not dispatch(game, line, board, name):
                break

        console.print(
            f"\n[bold]Session over:[/bold] {game.solved} solved, "
            f"total {game.total}, level {game.level}, {game.session_timer.elapsed_seconds}s"
        )


@app.command()
def word(
    level: int = typer.Option(1, help="Level whose length range to use"),
    offline: bool = typer.Option(False, help="Use the bundled word list"),
    config_file: Optional[Path] = typer.Option(None, "--config", help="YAML settings override"),
):
    """Fetch one word for a level (handy for checking the word source)."""
    config = _load_config_or_exit(config_file)
    min_len, max_len = config.level_range(level)
    source = build_word_source(config, offline, random.Random())

    try:
        fetched = source.fetch_random_word(min_len, max_len)
    except WordSourceError as e:
        console.print(f"[red]Error fetching word: {e}[/red]")
        raise typer.Exit(1)

    in_range = min_len <= len(fetched) <= max_len
    style = "green" if in_range else "yellow"
    console.print(f"[{style}]{fetched}[/{style}] ({len(fetched)} letters, level {level} wants {min_len}-{max_len})")


@app.command()
def tip(
    target: str = typer.Argument(..., help="Word to get a tip for"),
    config_file: Optional[Path] = typer.Option(None, "--config", help="YAML settings override"),
):
    """Show the tip a hint would give for a word."""
    config = _load_config_or_exit(config_file)
    source = TipSource(
        api_ninjas_key=config.api_ninjas_key,
        timeout=config.timeout,
        datamuse_url=config.datamuse_url,
        api_ninjas_url=config.api_ninjas_url,
    )
    with console.status("Looking for a tip..."):
        text = source.tip_for(target)
    console.print(text)


@app.command()
def levels(
    config_file: Optional[Path] = typer.Option(None, "--config", help="YAML settings override"),
):
    """List word lengths per level."""
    config = _load_config_or_exit(config_file)

    table = Table(title="MindWords Levels")
    table.add_column("Level", style="cyan", justify="right")
    table.add_column("Min letters", style="green", justify="right")
    table.add_column("Max letters", style="magenta", justify="right")

    last = len(config.levels)
    for i, (lo, hi) in enumerate(config.levels, start=1):
        label = f"{i}+" if i == last else str(i)
        table.add_row(label, str(lo), str(hi))

    console.print(table)
