from __future__ import annotations
import json
import time
from pathlib import Path
from typing import Callable
import structlog
from pydantic import BaseModel
from huntclient.schemas.hunt import Progress, Question

log = structlog.get_logger()

class PuzzleHint(BaseModel):
    question: str | None = None
    hint: str

def load_puzzle_hints(path: Path | None) -> dict[str, PuzzleHint]:
    """Read `{"<question number>": {"question": ..., "hint": ...}}`. Missing file means no hints."""
    if path is None:
        return {}
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError:
        log.warning("puzzle_hints_missing", path=str(path))
        return {}
    return {str(k): PuzzleHint.model_validate(v) for k, v in raw.items()}

def question_key(question: Question | None, progress: Progress | None) -> str | None:
    # "7.png" -> "7"; otherwise the numeric id, then the team's current step
    if question is not None and question.image:
        stem = Path(question.image).stem
        digits = "".join(ch for ch in stem if ch.isdigit())
        if digits:
            return str(int(digits))
    if question is not None and question.id is not None:
        return str(question.id)
    if progress is not None:
        return str(progress.current_number)
    return None

def format_clock(seconds: int) -> str:
    return f"{seconds // 60}:{seconds % 60:02d}"

class HintTimer:
    """Stopwatch for the puzzle on screen; its static hint unlocks after `reveal_after` seconds."""

    def __init__(self, hints: dict[str, PuzzleHint] | None = None, reveal_after: int = 420, clock: Callable[[], float] = time.monotonic):
        self.hints = hints or {}
        self.reveal_after = reveal_after
        self.clock = clock
        self.key: str | None = None
        self._started_at: float | None = None
        self._hidden = False

    @property
    def running(self) -> bool:
        return self._started_at is not None

    def start(self, key: str | None) -> None:
        if self.running and key == self.key:
            return
        self.key = key
        self._started_at = self.clock()
        self._hidden = False

    def stop(self) -> None:
        self.key = None
        self._started_at = None
        self._hidden = False

    def hide(self) -> None:
        self._hidden = True

    @property
    def elapsed(self) -> int:
        if self._started_at is None:
            return 0
        return int(self.clock() - self._started_at)

    @property
    def time_until_hint(self) -> int:
        return max(0, self.reveal_after - self.elapsed)

    def current_hint(self) -> PuzzleHint | None:
        if not self.running or self._hidden or self.elapsed < self.reveal_after:
            return None
        return self.hints.get(self.key or "")
