from __future__ import annotations
import asyncio
from enum import Enum
from typing import Awaitable, Callable
import structlog
from pydantic import BaseModel, Field
from huntclient.config import Settings, settings as default_settings
from huntclient.errors import ApiError, HuntError, RejectedSubmission, StaleResponse, TransportError, Unauthorized, ValidationFailed
from huntclient.gateway import ApiGateway, parse_body
from huntclient.schemas.bonus import BonusScanResponse, BonusSubmission, WinnerRequest
from huntclient.schemas.hunt import PhaseStatus
from huntclient.services.request_guard import RequestGuard
from huntclient.services.timing import TimingResolver, as_aware
from huntclient.services.validation import validate_answer, validate_location_code, validate_winner

log = structlog.get_logger()

ROUND_IDS = (1, 2)

class BonusStep(str, Enum):
    LOADING = "loading"
    COUNTDOWN = "countdown"
    LOCATION = "location"
    QUESTION = "question"
    WINNER = "winner"
    SUBMITTED = "submitted"
    LEADERBOARD = "leaderboard"

class BonusView(BaseModel):
    round_id: int
    step: BonusStep = BonusStep.LOADING
    status: PhaseStatus | None = None
    location_hint: str | None = None
    question_image: str | None = None
    submissions: list[BonusSubmission] = Field(default_factory=list)
    message: str | None = None
    error: str | None = None
    field_errors: dict[str, str] = Field(default_factory=dict)

def order_submissions(subs: list[BonusSubmission]) -> list[BonusSubmission]:
    # First correct wins: ordered by submission time, never by score
    return sorted(subs, key=lambda s: as_aware(s.submitted_at))

class BonusRoundFlow:
    """
    Bonus round: countdown -> location -> question -> winner form -> (back to question).
    Once the round has ended the whole flow is replaced by the winners list.
    """

    def __init__(
        self,
        gateway: ApiGateway,
        round_id: int,
        cfg: Settings | None = None,
        *,
        timing: TimingResolver | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if round_id not in ROUND_IDS:
            raise ValueError(f"unknown bonus round: {round_id}")
        self.gateway = gateway
        self.round_id = round_id
        self.phase = f"bonus{round_id}"
        self.settings = cfg or default_settings
        self.timing = timing or TimingResolver(gateway, self.settings)
        self.guard = RequestGuard()
        self.sleep = sleep
        self.view = BonusView(round_id=round_id)
        self._winner_pending = False

    @property
    def base(self) -> str:
        return f"/bonus/{self.round_id}"

    def snapshot(self) -> BonusView:
        return self.view.model_copy(deep=True)

    def _go(self, step: BonusStep, **changes) -> None:
        if step != self.view.step:
            log.info("flow_transition", flow=self.phase, src=self.view.step.value, dst=step.value)
        self.view = self.view.model_copy(update={"step": step, **changes})

    def _error(self, e: HuntError, fallback: str) -> str:
        if isinstance(e, TransportError):
            return e.message
        if isinstance(e, Unauthorized):
            return "Your session has expired. Please log in again."
        return fallback

    async def enter(self) -> BonusView:
        status = await self.timing.resolve(self.phase)
        error = None
        if status.source == "fallback":
            error = "Failed to load bonus round status. Please try again."
        self.view.status = status
        self.view.error = error
        if status.is_ended:
            self._go(BonusStep.LEADERBOARD)
            return await self.refresh_leaderboard()
        if status.is_started:
            hint = status.location_hint
            # Already scanned for this round: resume on the puzzle
            if status.question_image or status.already_scanned:
                self._go(BonusStep.QUESTION, location_hint=hint, question_image=status.question_image)
            else:
                self._go(BonusStep.LOCATION, location_hint=hint, question_image=None)
            return self.snapshot()
        self._go(BonusStep.COUNTDOWN)
        return self.snapshot()

    async def start(self) -> BonusView:
        """Countdown reached zero: ask the server again rather than trusting the local clock."""
        return await self.enter()

    async def refresh_leaderboard(self) -> BonusView:
        try:
            data = await self.guard.run("leaderboard", self.gateway.get(f"{self.base}/leaderboard"))
            rows = data if isinstance(data, list) else data.get("submissions", [])
            subs = [BonusSubmission.model_validate(r) for r in rows]
        except StaleResponse:
            return self.snapshot()
        except HuntError as e:
            log.warning("bonus_leaderboard_failed", round=self.round_id, error=str(e))
            self.view.error = self._error(e, "Failed to load winners. Please try again.")
            return self.snapshot()
        except (ValueError, AttributeError) as e:
            log.warning("bonus_leaderboard_invalid", round=self.round_id, error=str(e))
            self.view.error = "Failed to load winners. Please try again."
            return self.snapshot()
        self.view.submissions = order_submissions(subs)
        return self.snapshot()

    async def submit_location(self, code: str) -> BonusView:
        if self.view.step != BonusStep.LOCATION:
            return self.snapshot()
        self.view.field_errors, self.view.error = {}, None
        try:
            validate_location_code(code)
            data = await self.guard.run("scan", self.gateway.post(f"{self.base}/scan", json={"code": code.strip()}))
            resp = parse_body(BonusScanResponse, data)
        except ValidationFailed as e:
            self.view.field_errors = e.field_errors
            return self.snapshot()
        except StaleResponse:
            return self.snapshot()
        except ApiError as e:
            if 400 <= e.status_code < 500 and not isinstance(e, Unauthorized):
                rejected = RejectedSubmission.from_api_error(e, code, "Invalid location code. Please check and try again.")
                self.view.field_errors = {"location_code": rejected.message}
            else:
                self.view.error = self._error(e, "Submission failed. Please try again.")
            return self.snapshot()
        except HuntError as e:
            self.view.error = self._error(e, "Submission failed. Please try again.")
            return self.snapshot()
        self._go(
            BonusStep.QUESTION,
            question_image=resp.question_image or self.view.question_image,
            message="Location code accepted! Now solve the puzzle below.",
        )
        return self.snapshot()

    async def submit_answer(self, answer: str) -> BonusView:
        if self.view.step != BonusStep.QUESTION:
            return self.snapshot()
        self.view.field_errors, self.view.error = {}, None
        try:
            validate_answer(answer, field="answer", label="Answer")
            await self.guard.run("answer", self.gateway.post(f"{self.base}/answer", json={"answer": answer}))
        except ValidationFailed as e:
            self.view.field_errors = e.field_errors
            return self.snapshot()
        except StaleResponse:
            return self.snapshot()
        except ApiError as e:
            if 400 <= e.status_code < 500 and not isinstance(e, Unauthorized):
                rejected = RejectedSubmission.from_api_error(e, answer, "Incorrect answer")
                self.view.field_errors = {"answer": rejected.message}
            else:
                self.view.error = self._error(e, "Submission failed. Please try again.")
            return self.snapshot()
        except HuntError as e:
            self.view.error = self._error(e, "Submission failed. Please try again.")
            return self.snapshot()
        self._go(BonusStep.WINNER, message="Correct answer! Please enter your details below.")
        return self.snapshot()

    async def submit_winner(self, leader_name: str, team_name: str) -> BonusView:
        # One winner record per correct answer: a second submit while one is in flight is dropped
        if self.view.step != BonusStep.WINNER or self._winner_pending:
            return self.snapshot()
        self.view.field_errors, self.view.error = {}, None
        try:
            validate_winner(leader_name, team_name)
            body = WinnerRequest(leader_name=leader_name.strip(), team_name=team_name.strip())
            self._winner_pending = True
            await self.guard.run("winner", self.gateway.post(f"{self.base}/winner", json=body.model_dump()))
        except ValidationFailed as e:
            self.view.field_errors = e.field_errors
            return self.snapshot()
        except StaleResponse:
            return self.snapshot()
        except ApiError as e:
            self.view.error = self._error(e, e.message or "Failed to submit winner info")
            return self.snapshot()
        except HuntError as e:
            self.view.error = self._error(e, "Failed to submit winner info")
            return self.snapshot()
        finally:
            self._winner_pending = False
        self._go(BonusStep.SUBMITTED, message="Congratulations! Your submission has been recorded.")
        return self.snapshot()

    async def reset_after_submission(self) -> BonusView:
        if self.view.step != BonusStep.SUBMITTED:
            return self.snapshot()
        await self.sleep(self.settings.bonus_reset_delay_seconds)
        self._go(BonusStep.QUESTION, message=None)
        return self.snapshot()
