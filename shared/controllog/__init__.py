"""Controllable logging SDK (events + balanced postings).

Double-entry accounting for:
- State transitions (truth.state)
- Round wall time (resource.time_ms)
- Utility/score (value.utility)
"""

from .sdk import init, event, post, new_id, is_initialized, read_jsonl, trial_balance
from .builders import (
    state_move,
    utility,
    round_complete,
)

__all__ = [
    "init",
    "event",
    "post",
    "new_id",
    "is_initialized",
    "read_jsonl",
    "trial_balance",
    "state_move",
    "utility",
    "round_complete",
]
