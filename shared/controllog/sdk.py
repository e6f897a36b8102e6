"""Core controllog SDK: events and balanced postings written as JSONL.

Every event goes to <log_dir>/controllog/events.jsonl. An event may carry
postings (double-entry lines) which go to postings.jsonl; the postings of a
single event must sum to zero per (account_type, unit).
"""

import json
import threading
import uuid
from collections import defaultdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

_lock = threading.Lock()
_state: Dict[str, Any] = {"project_id": None, "dir": None}


def init(project_id: str, log_dir: Path) -> Path:
    """Point the SDK at a log directory. Returns the controllog directory."""
    target = Path(log_dir) / "controllog"
    target.mkdir(parents=True, exist_ok=True)
    _state["project_id"] = project_id
    _state["dir"] = target
    return target


def is_initialized() -> bool:
    return _state["dir"] is not None


def log_dir() -> Optional[Path]:
    return _state["dir"]


def new_id() -> str:
    return uuid.uuid4().hex


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _write_jsonl(path: Path, data: Dict[str, Any]) -> None:
    with _lock:
        with open(path, "a", encoding="utf-8") as f:
            f.write(json.dumps(data, default=str) + "\n")


def post(
    account_type: str,
    account_id: str,
    unit: str,
    delta: float,
    dims: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Build a single posting line."""
    return {
        "account_type": account_type,
        "account_id": account_id,
        "unit": unit,
        "delta_numeric": delta,
        "dims_json": dims or {},
    }


def _check_balanced(postings: List[Dict[str, Any]]) -> None:
    totals: Dict[Tuple[str, str], float] = defaultdict(float)
    for p in postings:
        totals[(p["account_type"], p["unit"])] += p["delta_numeric"]
    unbalanced = {k: v for k, v in totals.items() if abs(v) > 1e-9}
    if unbalanced:
        raise ValueError(f"Postings do not balance: {unbalanced}")


def event(
    kind: str,
    *,
    project_id: Optional[str] = None,
    run_id: Optional[str] = None,
    task_id: Optional[str] = None,
    agent_id: Optional[str] = None,
    payload: Optional[Dict[str, Any]] = None,
    postings: Optional[List[Dict[str, Any]]] = None,
    event_id: Optional[str] = None,
) -> str:
    """Write an event (and its postings). Returns the event id."""
    if _state["dir"] is None:
        raise RuntimeError("controllog.init() must be called before emitting events")

    postings = postings or []
    _check_balanced(postings)

    event_id = event_id or new_id()
    ts = _now()
    record = {
        "event_id": event_id,
        "ts": ts,
        "kind": kind,
        "project_id": project_id or _state["project_id"],
        "run_id": run_id,
        "task_id": task_id,
        "agent_id": agent_id,
        "payload_json": payload or {},
    }
    _write_jsonl(_state["dir"] / "events.jsonl", record)

    for p in postings:
        _write_jsonl(
            _state["dir"] / "postings.jsonl",
            {"posting_id": new_id(), "event_id": event_id, "ts": ts, **p},
        )
    return event_id


def read_jsonl(path: Path) -> Iterator[Dict[str, Any]]:
    """Yield records from a JSONL file, skipping blank lines."""
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line:
                yield json.loads(line)


def trial_balance(directory: Optional[Path] = None) -> Dict[Tuple[str, str], float]:
    """Sum every posting by (account_type, unit). All values are 0 when balanced."""
    directory = Path(directory) if directory is not None else _state["dir"]
    if directory is None:
        raise RuntimeError("No controllog directory given or initialized")
    path = directory / "postings.jsonl"
    totals: Dict[Tuple[str, str], float] = defaultdict(float)
    if not path.exists():
        return {}
    for p in read_jsonl(path):
        totals[(p["account_type"], p["unit"])] += float(p["delta_numeric"])
    return dict(totals)
