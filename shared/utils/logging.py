"""JSON-formatted logging utilities."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

ROUND_LOGGER = "mindwords.rounds"


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logger(name: str, log_file: Optional[Path] = None, level: int = logging.INFO) -> logging.Logger:
    """Create (or reconfigure) a named logger writing JSON lines to log_file."""
    logger = logging.getLogger(name)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        logger.propagate = False

    return logger


def setup_logging(log_dir: Path, verbose: bool = False) -> None:
    """Configure root logging for a CLI run.

    Everything goes to <log_dir>/mindwords.log as JSON. The console only gets
    warnings (or debug output with verbose) so it doesn't fight the game UI.
    Round summaries go to <log_dir>/rounds.jsonl.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    file_handler = logging.FileHandler(log_dir / f"mindwords_{timestamp}.log")
    file_handler.setFormatter(JSONFormatter())
    root.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root.addHandler(console_handler)

    # Round summaries are plain JSON lines, no envelope
    rounds = logging.getLogger(ROUND_LOGGER)
    for handler in list(rounds.handlers):
        rounds.removeHandler(handler)
        handler.close()
    rounds_handler = logging.FileHandler(log_dir / "rounds.jsonl")
    rounds_handler.setFormatter(logging.Formatter("%(message)s"))
    rounds.addHandler(rounds_handler)
    rounds.setLevel(logging.INFO)
    rounds.propagate = False


def log_round_summary(
    session_id: str,
    generation: int,
    outcome: str,
    answer: str,
    score: int,
    tries: int,
    hint_used: bool,
    level: int,
    total: int,
    duration_sec: float,
) -> None:
    """Write one JSON line describing a finished round."""
    data = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "session_id": session_id,
        "generation": generation,
        "outcome": outcome,
        "answer": answer,
        "length": len(answer),
        "score": score,
        "tries": tries,
        "hint_used": int(hint_used),
        "level": level,
        "total": total,
        "duration_sec": round(duration_sec, 3),
    }
    logging.getLogger(ROUND_LOGGER).info(json.dumps(data))
