"""CLI subcommand for shared analytics commands."""

from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, List

import typer
from rich.console import Console
from rich.table import Table

from shared import controllog as cl

app = typer.Typer(help="Analytics commands over local controllog data")
console = Console()


def _controllog_dir(log_path: str) -> Path:
    directory = Path(log_path) / "controllog"
    if not directory.exists():
        console.print(f"❌ No controllog data in {directory}", style="red")
        raise typer.Exit(1)
    return directory


def summarize_rounds(events: List[Dict[str, Any]]) -> Dict[str, Dict[str, float]]:
    """Group round_complete events by outcome: count, average score and tries."""
    buckets: Dict[str, Dict[str, float]] = defaultdict(lambda: {"rounds": 0, "score": 0, "tries": 0, "hints": 0})
    for e in events:
        if e.get("kind") != "round_complete":
            continue
        payload = e.get("payload_json") or {}
        b = buckets[payload.get("outcome", "unknown")]
        b["rounds"] += 1
        b["score"] += payload.get("score", 0)
        b["tries"] += payload.get("tries", 0)
        b["hints"] += 1 if payload.get("hint_used") else 0

    summary = {}
    for outcome, b in buckets.items():
        n = b["rounds"]
        summary[outcome] = {
            "rounds": n,
            "avg_score": b["score"] / n,
            "avg_tries": b["tries"] / n,
            "hint_rate": b["hints"] / n,
        }
    return summary


@app.command()
def trial_balance(
    log_path: str = typer.Option("logs/mindwords", help="Directory holding the controllog folder"),
):
    """Run trial balance check on controllog data.

    Validates that all postings sum to zero (double-entry accounting).
    """
    directory = _controllog_dir(log_path)
    console.print(f"⚖️  Running trial balance check on {directory}...", style="bold blue")

    totals = cl.trial_balance(directory)
    unbalanced = {k: v for k, v in totals.items() if abs(v) > 1e-9}

    table = Table(title="Trial Balance")
    table.add_column("Account type", style="cyan")
    table.add_column("Unit", style="magenta")
    table.add_column("Sum", justify="right")
    for (account_type, unit), total in sorted(totals.items()):
        table.add_row(account_type, unit, f"{total:g}")
    console.print(table)

    if unbalanced:
        console.print("❌ Trial balance failed - some accounts are unbalanced", style="red")
        raise typer.Exit(1)
    console.print("✅ Trial balance passed - all accounts balanced", style="green")


@app.command()
def rounds(
    log_path: str = typer.Option("logs/mindwords", help="Directory holding the controllog folder"),
):
    """Show how rounds ended, with average score and tries."""
    directory = _controllog_dir(log_path)
    events_file = directory / "events.jsonl"
    if not events_file.exists():
        console.print("No rounds recorded yet", style="yellow")
        return

    summary = summarize_rounds(list(cl.read_jsonl(events_file)))
    if not summary:
        console.print("No rounds recorded yet", style="yellow")
        return

    table = Table(title="Rounds by Outcome")
    table.add_column("Outcome", style="cyan")
    table.add_column("Rounds", justify="right")
    table.add_column("Avg score", style="green", justify="right")
    table.add_column("Avg tries", justify="right")
    table.add_column("Hint rate", style="magenta", justify="right")

    for outcome, row in sorted(summary.items(), key=lambda kv: -kv[1]["rounds"]):
        table.add_row(
            outcome,
            str(int(row["rounds"])),
            f"{row['avg_score']:.1f}",
            f"{row['avg_tries']:.1f}",
            f"{row['hint_rate'] * 100:.0f}%",
        )
    console.print(table)
