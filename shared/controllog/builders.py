"""Event builders on top of the controllog SDK."""

from typing import Any, Dict, Optional

from . import sdk


def state_move(
    task_id: str,
    from_: str,
    to: str,
    project_id: str,
    agent_id: str,
    run_id: Optional[str] = None,
    payload: Optional[Dict[str, Any]] = None,
) -> str:
    """Record a task moving between states (e.g. NEW -> WIP -> DONE)."""
    postings = [
        sdk.post("truth.state", f"{task_id}:{from_}", "task", -1, {"state": from_}),
        sdk.post("truth.state", f"{task_id}:{to}", "task", 1, {"state": to}),
    ]
    return sdk.event(
        "state_move",
        project_id=project_id,
        run_id=run_id,
        task_id=task_id,
        agent_id=agent_id,
        payload={"from": from_, "to": to, **(payload or {})},
        postings=postings,
    )


def utility(
    task_id: str,
    value: float,
    project_id: str,
    agent_id: str,
    run_id: Optional[str] = None,
    metric: str = "score",
    payload: Optional[Dict[str, Any]] = None,
) -> str:
    """Credit utility to the agent, balanced against the project."""
    postings = [
        sdk.post("value.utility", agent_id, metric, value, {"task_id": task_id}),
        sdk.post("value.utility", f"project:{project_id}", metric, -value, {"task_id": task_id}),
    ]
    return sdk.event(
        "utility",
        project_id=project_id,
        run_id=run_id,
        task_id=task_id,
        agent_id=agent_id,
        payload={"metric": metric, "value": value, **(payload or {})},
        postings=postings,
    )


def round_complete(
    task_id: str,
    project_id: str,
    session_id: str,
    outcome: str,
    answer: str,
    score: int,
    tries: int,
    hint_used: bool,
    level: int,
    total: int,
    wall_ms: int,
    run_id: Optional[str] = None,
    agent_id: str = "agent:player",
    payload: Optional[Dict[str, Any]] = None,
) -> str:
    """Summarize a finished round; books its wall time against the session clock."""
    postings = [
        sdk.post("resource.time_ms", task_id, "ms", wall_ms),
        sdk.post("resource.time_ms", f"session:{session_id}", "ms", -wall_ms),
    ]
    return sdk.event(
        "round_complete",
        project_id=project_id,
        run_id=run_id,
        task_id=task_id,
        agent_id=agent_id,
        payload={
            "session_id": session_id,
            "outcome": outcome,
            "answer": answer,
            "score": score,
            "tries": tries,
            "hint_used": hint_used,
            "level": level,
            "total": total,
            "wall_ms": wall_ms,
            **(payload or {}),
        },
        postings=postings,
    )
