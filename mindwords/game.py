"""Session controller for MindWords.

Owns the round lifecycle and the cross-round counters:
- Asks the word source for a word matching the current level (in a worker)
- Forwards player actions to the Round engine
- Wins add the round score to the total and raise the level
- Out-of-tries reveals the answer, a score of 0 silently restarts

Word and tip requests are tagged with a generation number. Whenever a new
word is requested the generation moves on, and any response that arrives
for an older generation is dropped instead of being applied.
"""

import logging
import random
import threading
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from rich.console import Console

from mindwords.config import GameConfig
from mindwords.errors import NoActiveRoundError
from mindwords.game_engine import (
    GuessResult,
    HintResult,
    LengthClueResult,
    LetterCountResult,
    Outcome,
    Round,
    validate_guess,
)
from mindwords.prefs import Prefs
from shared import controllog as cl
from shared.adapters.dreamlo_adapter import DreamloClient, sanitize_name
from shared.adapters.words_api import TipSource, WordSource, WordSourceError
from shared.utils.logging import log_round_summary
from shared.utils.timing import Timer

console = Console()
logger = logging.getLogger(__name__)

STATUS_IDLE = "idle"
STATUS_LOADING = "loading"
STATUS_PLAYING = "playing"
STATUS_LOAD_FAILED = "load_failed"


class MindWordsGame:
    """The session controller for MindWords.

    One round is active at a time. All round mutations and counter updates
    happen under a single re-entrant lock; worker jobs take the same lock
    to apply their results.
    """

    VERSION = "1.0.0"

    def __init__(
        self,
        word_source: WordSource,
        tip_source: Optional[TipSource] = None,
        prefs: Optional[Prefs] = None,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
        executor: Optional[ThreadPoolExecutor] = None,
        quiet: bool = False,
    ):
        self.word_source = word_source
        self.tip_source = tip_source
        self.prefs = prefs
        self.config = config or GameConfig()
        self.quiet = quiet

        self._rng = rng or random.Random()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="mindwords")
        self._lock = threading.RLock()

        # Session state
        self.level = 1
        self.total = 0
        self.solved = 0
        self.round: Optional[Round] = None
        self.generation = 0
        self.status = STATUS_IDLE
        self.message = ""
        self.last_answer: Optional[str] = None
        self.last_tip: Optional[str] = None

        self.pending_load: Optional[Future] = None
        self.pending_tip: Optional[Future] = None

        self.session_id = str(uuid.uuid4())[:8]
        self.session_timer = Timer()
        self.round_timer = Timer()
        # Restarted whenever a word is installed; the upload reports this clock
        self.word_timer = Timer()

        # Controllog state
        self._controllog_initialized = False
        self._run_id: Optional[str] = None

    def _print(self, *args, **kwargs):
        """Print to console unless in quiet mode."""
        if not self.quiet:
            console.print(*args, **kwargs)

    def _task_id(self, generation: Optional[int] = None) -> str:
        gen = self.generation if generation is None else generation
        return f"round:{self.session_id}:{gen}"

    def init_controllog(self, log_path: Path, run_id: str) -> None:
        """Initialize controllog SDK for round analytics."""
        try:
            cl.init(project_id="mindwords", log_dir=log_path)
            self._controllog_initialized = True
            self._run_id = run_id
            logger.info(f"Controllog initialized for session {self.session_id}")
        except OSError as e:
            logger.warning(f"Failed to initialize controllog: {e}")
            self._controllog_initialized = False

    def _emit_state_move(self, from_state: str, to_state: str, payload: Optional[Dict] = None) -> None:
        if not self._controllog_initialized:
            return
        try:
            cl.state_move(
                task_id=self._task_id(),
                from_=from_state,
                to=to_state,
                project_id="mindwords",
                agent_id="agent:player",
                run_id=self._run_id,
                payload=payload or {"session_id": self.session_id},
            )
        except (OSError, ValueError) as e:
            logger.debug(f"Failed to emit state move: {e}")

    def _emit_round_events(self, outcome: str, rnd: Round, duration: float) -> None:
        if not self._controllog_initialized:
            return
        try:
            if outcome == "win":
                cl.utility(
                    task_id=self._task_id(),
                    value=rnd.score,
                    project_id="mindwords",
                    agent_id="agent:player",
                    run_id=self._run_id,
                    payload={"level": self.level},
                )
            cl.round_complete(
                task_id=self._task_id(),
                project_id="mindwords",
                session_id=self.session_id,
                outcome=outcome,
                answer=rnd.answer,
                score=rnd.score,
                tries=rnd.tries,
                hint_used=rnd.hint_used,
                level=self.level,
                total=self.total,
                wall_ms=int(duration * 1000),
                run_id=self._run_id,
            )
        except (OSError, ValueError) as e:
            logger.debug(f"Failed to emit round events: {e}")

    def level_range(self, level: Optional[int] = None) -> Tuple[int, int]:
        """Word length range for a level (defaults to the current level)."""
        return self.config.level_range(self.level if level is None else level)

    # ------------------------------------------------------------------
    # Round lifecycle
    # ------------------------------------------------------------------

    def start(self) -> Future:
        """Load the saved level, start the session clock and fetch the first word."""
        with self._lock:
            if self.prefs is not None:
                self.level = self.prefs.load_level()
            self.session_timer.start()
            logger.info(f"Session {self.session_id} started at level {self.level}")
            return self.request_new_word()

    def request_new_word(self) -> Future:
        """Discard the current round and load a new word for the current level.

        Returns a future that resolves (True when a round was installed) once
        the load has been applied or discarded as stale.
        """
        with self._lock:
            if self.round is not None:
                self._finish_round("superseded")

            self.generation += 1
            generation = self.generation
            self.status = STATUS_LOADING
            self.last_tip = None
            min_len, max_len = self.level_range()
            logger.info(f"Requesting word for generation {generation}, length {min_len}-{max_len}")

            future = self._executor.submit(self._load_word, generation, min_len, max_len)
            self.pending_load = future
            return future

    def retry(self) -> Future:
        """Explicit retry after a failed load."""
        return self.request_new_word()

    def _fetch_word(self, min_len: int, max_len: int) -> Optional[str]:
        """Ask the word source up to fetch_retries times for a usable word."""
        attempts = self.config.fetch_retries
        for attempt in range(1, attempts + 1):
            try:
                word = self.word_source.fetch_random_word(min_len, max_len)
            except WordSourceError as e:
                logger.warning(f"Word fetch attempt {attempt}/{attempts} failed: {e}")
                continue

            word = (word or "").strip().lower()
            if word.isalpha() and min_len <= len(word) <= max_len:
                return word
            logger.debug(f"Rejected word of length {len(word)} (wanted {min_len}-{max_len})")

        logger.error(f"No usable word after {attempts} attempts")
        return None

    def _load_word(self, generation: int, min_len: int, max_len: int) -> bool:
        word = self._fetch_word(min_len, max_len)

        with self._lock:
            if generation != self.generation:
                logger.info(f"Discarding word for superseded generation {generation} (now {self.generation})")
                return False

            if word is None:
                self.status = STATUS_LOAD_FAILED
                self.message = "Failed to fetch word. Type 'retry' to try again."
                self._print(f"[red]{self.message}[/red]")
                return False

            self.round = Round(word, rules=self.config.scoring, rng=self._rng)
            self.status = STATUS_PLAYING
            self.round_timer.start()
            self.word_timer.start()
            self._emit_state_move("NEW", "WIP", {
                "session_id": self.session_id,
                "generation": generation,
                "level": self.level,
                "length": len(word),
            })
            logger.info(f"Round {generation} ready ({len(word)} letters, level {self.level})")
            return True

    def wait_for_word(self, timeout: Optional[float] = None) -> bool:
        """Block until the latest word request settles. True if a round is active."""
        while True:
            future = self.pending_load
            if future is None:
                break
            future.result(timeout)
            if future is self.pending_load:
                break
        return self.round is not None

    def _finish_round(self, outcome: str) -> None:
        """Record the end of the current round and drop it."""
        rnd = self.round
        if rnd is None:
            return
        duration = self.round_timer.stop() if self.round_timer.running else 0.0

        log_round_summary(
            session_id=self.session_id,
            generation=self.generation,
            outcome=outcome,
            answer=rnd.answer,
            score=rnd.score,
            tries=rnd.tries,
            hint_used=rnd.hint_used,
            level=self.level,
            total=self.total,
            duration_sec=duration,
        )
        self._emit_round_events(outcome, rnd, duration)
        self._emit_state_move("WIP", "DONE", {
            "session_id": self.session_id,
            "generation": self.generation,
            "outcome": outcome,
            "score": rnd.score,
        })
        logger.info(f"Round {self.generation} ended: {outcome} (score {rnd.score}, tries {rnd.tries})")
        self.round = None

    def _require_round(self) -> Round:
        if self.round is None:
            if self.status == STATUS_LOAD_FAILED:
                raise NoActiveRoundError("Couldn't fetch a word. Retry to load one.")
            raise NoActiveRoundError("Loading word...")
        return self.round

    def _check_out_of_score(self) -> None:
        """A score of 0 forces a new word without touching the counters."""
        rnd = self.round
        if rnd is not None and rnd.score <= 0:
            self.message = "Score reached 0. New word…"
            self._print(f"[yellow]{self.message}[/yellow]")
            self._finish_round("out_of_score")
            self.request_new_word()

    def _save_level(self) -> None:
        if self.prefs is None:
            return
        try:
            self.prefs.save_level(self.level)
        except OSError as e:
            logger.warning(f"Could not persist level {self.level}: {e}")

    # ------------------------------------------------------------------
    # Player actions
    # ------------------------------------------------------------------

    def guess(self, candidate: str) -> GuessResult:
        """Full-word guess. Raises InvalidGuessError for malformed input."""
        with self._lock:
            rnd = self._require_round()
            cleaned = validate_guess(candidate, len(rnd))
            result = rnd.guess(cleaned)

            if result.outcome == Outcome.WIN:
                self.total += result.score
                self.solved += 1
                self.message = f"Correct! +{result.score}"
                self._print(f"[green]✓ {self.message}[/green]")
                self._finish_round("win")
                self.level += 1
                self._save_level()
                self.request_new_word()
            elif result.outcome == Outcome.OUT_OF_TRIES:
                self.last_answer = result.answer
                self.message = f"Out of tries. It was {result.answer.upper()}"
                self._print(f"[red]✗ {self.message}[/red]")
                self._finish_round("out_of_tries")
                self.request_new_word()
            else:
                self.message = "Nope. Keep trying…"
                self._check_out_of_score()
            return result

    def letter_count(self, letter: str) -> LetterCountResult:
        """Letter-count clue (costs points, not tries)."""
        with self._lock:
            result = self._require_round().letter_count(letter)
            self.message = result.message
            self._check_out_of_score()
            return result

    def length_clue(self) -> LengthClueResult:
        """Length clue (costs points, not tries)."""
        with self._lock:
            result = self._require_round().length_clue()
            self.message = result.message
            self._check_out_of_score()
            return result

    def hint(self) -> HintResult:
        """One-time hint; when granted a rhyme/similar-word tip is fetched too."""
        with self._lock:
            rnd = self._require_round()
            result = rnd.hint_letter()
            self.message = result.message
            if result.granted and self.tip_source is not None:
                self.pending_tip = self._executor.submit(self._load_tip, self.generation, rnd.answer)
            self._check_out_of_score()
            return result

    def _load_tip(self, generation: int, answer: str) -> Optional[str]:
        tip = self.tip_source.tip_for(answer)
        with self._lock:
            if generation != self.generation:
                logger.info(f"Discarding tip for superseded generation {generation}")
                return None
            self.last_tip = tip
            self.message = tip
            return tip

    def submit_score(self, leaderboard: DreamloClient, name: str) -> Future:
        """Upload the session total and the seconds since the current word loaded."""
        with self._lock:
            total = self.total
            seconds = self.word_timer.elapsed_seconds
        clean = sanitize_name(name, self.config.name_max_length, self.config.placeholder_name)
        return self._executor.submit(self._submit_score, leaderboard, clean, total, seconds)

    def _submit_score(self, leaderboard: DreamloClient, name: str, total: int, seconds: int) -> bool:
        ok = leaderboard.add_score(name, total, seconds)
        with self._lock:
            if ok:
                self.message = "Leaderboard updated"
            else:
                err = f" ({leaderboard.last_error[:60]})" if leaderboard.last_error else ""
                self.message = f"Leaderboard update failed{err}"
        return ok

    def snapshot(self) -> Dict[str, Any]:
        """Display view of the session; the answer itself is never included."""
        with self._lock:
            return {
                "session_id": self.session_id,
                "level": self.level,
                "total": self.total,
                "solved": self.solved,
                "status": self.status,
                "message": self.message,
                "generation": self.generation,
                "elapsed": self.word_timer.elapsed_seconds,
                "round": self.round.to_dict(include_answer=False) if self.round else None,
            }

    def close(self) -> None:
        """Shut down the worker pool if this game created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=False)

    def __enter__(self) -> "MindWordsGame":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
