from __future__ import annotations
import asyncio
from enum import Enum
from typing import Awaitable, Callable
import structlog
from pydantic import BaseModel, Field
from huntclient.config import Settings, settings as default_settings
from huntclient.errors import (
    ApiError, HuntError, RejectedSubmission, StaleResponse, TransportError, Unauthorized, ValidationFailed,
)
from huntclient.gateway import ApiGateway, parse_body
from huntclient.schemas.hunt import CodeResponse, AnswerResponse, HuntComplete, PhaseStatus, Progress, Question
from huntclient.services.hints import COMPLETION_MESSAGE, HintEngine, is_completion_message
from huntclient.services.puzzle_hints import HintTimer, PuzzleHint, load_puzzle_hints, question_key
from huntclient.services.request_guard import RequestGuard
from huntclient.services.timing import TimingResolver
from huntclient.services.validation import validate_answer, validate_location_code

log = structlog.get_logger()

HINT_FAILED_MSG = "Failed to fetch hint. Please try again."
PROGRESS_FAILED_MSG = "Failed to fetch progress. Please try again."
STATUS_FAILED_MSG = "Failed to load hunt status. Please try again."
SESSION_EXPIRED_MSG = "Your session has expired. Please log in again."
INVALID_CODE_MSG = "Invalid location code. Please check and try again."
WRONG_ANSWER_MSG = "Incorrect answer. Try again!"
CODE_ACCEPTED_MSG = "Code accepted! Answer the puzzle below."
SUBMIT_FAILED_MSG = "Submission failed. Please try again."

class Screen(str, Enum):
    LOADING = "loading"
    COUNTDOWN = "countdown"
    LOCATION = "location"
    QUESTION = "question"
    WINNER = "winner"
    COMPLETED = "completed"
    ENDED = "ended"

ACTIONS: dict[Screen, tuple[str, ...]] = {
    Screen.LOADING: ("retry",),
    Screen.COUNTDOWN: ("retry",),
    Screen.LOCATION: ("submit_code", "leaderboard", "logout"),
    Screen.QUESTION: ("submit_code", "submit_answer", "leaderboard", "logout"),
    Screen.WINNER: (),
    Screen.COMPLETED: ("leaderboard",),
    Screen.ENDED: ("leaderboard",),
}

class HuntView(BaseModel):
    screen: Screen = Screen.LOADING
    team_name: str | None = None
    hint: str | None = None
    question: Question | None = None
    progress: Progress | None = None
    status: PhaseStatus | None = None
    message: str | None = None
    error: str | None = None
    field_errors: dict[str, str] = Field(default_factory=dict)
    puzzle_hint: PuzzleHint | None = None
    redirect: str | None = None

    @property
    def question_number(self) -> int | None:
        return self.progress.current_number if self.progress else None

    @property
    def actions(self) -> tuple[str, ...]:
        return ACTIONS[self.screen]

def _error_text(e: HuntError, fallback: str) -> str:
    if isinstance(e, TransportError):
        return e.message
    if isinstance(e, Unauthorized):
        return SESSION_EXPIRED_MSG
    return fallback

class HuntFlow:
    """
    Main-hunt state machine: countdown -> location -> question -> advance -> location ... -> completed.

    The screen is always rebuilt from the latest server answers (phase status,
    hint, question). Reloading mid-puzzle lands back on the question because
    the hint reports `alreadyScanned`. Every HuntError is turned into text on
    the returned view; nothing propagates to the caller.
    """

    def __init__(
        self,
        gateway: ApiGateway,
        cfg: Settings | None = None,
        *,
        timing: TimingResolver | None = None,
        engine: HintEngine | None = None,
        hint_timer: HintTimer | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.gateway = gateway
        self.settings = cfg or default_settings
        self.guard = RequestGuard()
        self.timing = timing or TimingResolver(gateway, self.settings)
        self.engine = engine or HintEngine(gateway, self.guard)
        self.hint_timer = hint_timer or HintTimer(
            load_puzzle_hints(self.settings.hints_path), reveal_after=self.settings.puzzle_hint_after_seconds
        )
        self.sleep = sleep
        session = gateway.store.current
        self.view = HuntView(team_name=session.team_name if session else None)

    def snapshot(self) -> HuntView:
        on_puzzle = self.view.screen == Screen.QUESTION
        self.view.puzzle_hint = self.hint_timer.current_hint() if on_puzzle else None
        return self.view.model_copy(deep=True)

    def _go(self, screen: Screen, **changes) -> None:
        if screen != self.view.screen:
            log.info("flow_transition", flow="hunt", src=self.view.screen.value, dst=screen.value)
        if screen == Screen.QUESTION:
            self.hint_timer.start(question_key(changes.get("question", self.view.question), self.view.progress))
        else:
            self.hint_timer.stop()
        self.view = self.view.model_copy(update={"screen": screen, **changes})

    def _fail(self, e: HuntError, fallback: str) -> HuntView:
        if isinstance(e, Unauthorized):
            self.view.redirect = "/login"
        self.view.error = _error_text(e, fallback)
        return self.snapshot()

    async def enter(self) -> HuntView:
        self.view.error = None
        if not self.settings.dev_mode:
            status = await self.timing.resolve("main")
            self.view.status = status
            if status.is_ended:
                self._go(Screen.ENDED, hint=None, question=None, message="The hunt has ended.")
                return self.snapshot()
            if not status.is_started:
                self._go(Screen.COUNTDOWN, hint=None, question=None)
                if status.source == "fallback":
                    self.view.error = STATUS_FAILED_MSG
                return self.snapshot()
        return await self.refresh()

    async def refresh(self) -> HuntView:
        """Rebuild the screen from /hunt/hint (and /hunt/question when already scanned)."""
        try:
            result = await self.engine.fetch_hint()
            question = None
            if not isinstance(result, HuntComplete) and result.already_scanned:
                question = await self.engine.fetch_question()
        except StaleResponse:
            return self.snapshot()
        except HuntError as e:
            log.warning("hint_fetch_failed", error=str(e))
            return self._fail(e, HINT_FAILED_MSG)

        # Progress first so the puzzle-hint key sees the current step
        progress_error = await self._load_progress()
        if isinstance(result, HuntComplete):
            self._go(Screen.COMPLETED, hint=None, question=None, message=result.message, field_errors={})
        elif question is not None:
            self._go(Screen.QUESTION, hint=result.hint, question=question, message=None, field_errors={})
        else:
            self._go(Screen.LOCATION, hint=result.hint, question=None, message=None, field_errors={})
        self.view.error = progress_error
        return self.snapshot()

    async def _load_progress(self) -> str | None:
        try:
            self.view.progress = await self.engine.fetch_progress()
        except StaleResponse:
            return None
        except HuntError as e:
            log.warning("progress_fetch_failed", error=str(e))
            return _error_text(e, PROGRESS_FAILED_MSG)
        return None

    async def submit_code(self, code: str) -> HuntView:
        if self.view.screen not in (Screen.LOCATION, Screen.QUESTION):
            return self.snapshot()
        self.view.field_errors = {}
        self.view.error = None
        try:
            validate_location_code(code)
            data = await self.guard.run("code", self.gateway.post("/hunt/code", json={"code": code.strip()}))
            resp = parse_body(CodeResponse, data)
            question = resp.question or await self.engine.fetch_question()
        except ValidationFailed as e:
            self.view.field_errors = e.field_errors
            return self.snapshot()
        except StaleResponse:
            return self.snapshot()
        except Unauthorized as e:
            return self._fail(e, SESSION_EXPIRED_MSG)
        except ApiError as e:
            if is_completion_message(e.message):
                self._go(Screen.COMPLETED, hint=None, question=None, message=COMPLETION_MESSAGE, field_errors={})
                return self.snapshot()
            if 400 <= e.status_code < 500:
                rejected = RejectedSubmission.from_api_error(e, code, INVALID_CODE_MSG)
                log.info("code_rejected", status=e.status_code)
                self.view.field_errors = {"location_code": rejected.message}
                return self.snapshot()
            return self._fail(e, SUBMIT_FAILED_MSG)
        except HuntError as e:
            return self._fail(e, INVALID_CODE_MSG)
        self._go(Screen.QUESTION, question=question, message=resp.msg or CODE_ACCEPTED_MSG)
        return self.snapshot()

    async def submit_answer(self, answer: str) -> HuntView:
        if self.view.screen != Screen.QUESTION:
            return self.snapshot()
        self.view.field_errors = {}
        self.view.error = None
        try:
            validate_answer(answer)
            data = await self.guard.run("answer", self.gateway.post("/hunt/answer", json={"answer": answer}))
            resp = parse_body(AnswerResponse, data)
        except ValidationFailed as e:
            self.view.field_errors = e.field_errors
            return self.snapshot()
        except StaleResponse:
            return self.snapshot()
        except Unauthorized as e:
            return self._fail(e, SESSION_EXPIRED_MSG)
        except ApiError as e:
            if 400 <= e.status_code < 500:
                rejected = RejectedSubmission.from_api_error(e, answer, WRONG_ANSWER_MSG)
                log.info("answer_rejected", status=e.status_code)
                self.view.field_errors = {"puzzle_answer": rejected.message}
                return self.snapshot()
            return self._fail(e, SUBMIT_FAILED_MSG)
        except HuntError as e:
            return self._fail(e, WRONG_ANSWER_MSG)
        self._go(Screen.WINNER, message=resp.msg)
        return self.snapshot()

    async def advance(self) -> HuntView:
        """Pause for the success message, then let the next /hunt/hint decide the screen."""
        if self.view.screen != Screen.WINNER:
            return self.snapshot()
        await self.sleep(self.settings.advance_delay_seconds)
        return await self.refresh()

    async def close(self) -> None:
        self.hint_timer.stop()
