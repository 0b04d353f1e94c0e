from __future__ import annotations
import structlog
from huntclient.errors import ApiError
from huntclient.gateway import ApiGateway, parse_body
from huntclient.schemas.hunt import (
    ActiveHint, HintResponse, HintResult, HuntComplete, Progress, Question, QuestionResponse,
)
from huntclient.services.request_guard import RequestGuard

log = structlog.get_logger()

# The server is the only writer of these phrases; matching them is how
# completion is detected until it exposes an explicit status field.
COMPLETION_PHRASES = ("hunt completed", "completed the treasure hunt", "completed the hunt")
COMPLETION_MESSAGE = "Congratulations! You have completed the treasure hunt!"

def is_completion_message(msg: str | None) -> bool:
    if not msg:
        return False
    low = msg.lower()
    return any(p in low for p in COMPLETION_PHRASES)

class HintEngine:
    def __init__(self, gateway: ApiGateway, guard: RequestGuard | None = None):
        self.gateway = gateway
        self.guard = guard or RequestGuard()

    async def fetch_hint(self) -> HintResult:
        try:
            data = await self.guard.run("hint", self.gateway.get("/hunt/hint"))
        except ApiError as e:
            if is_completion_message(e.message):
                return HuntComplete(message=COMPLETION_MESSAGE)
            raise
        resp = parse_body(HintResponse, data)
        if is_completion_message(resp.msg):
            return HuntComplete(message=resp.msg or COMPLETION_MESSAGE)
        if not resp.hint:
            raise ApiError(200, resp.msg or "No hint available. Please try again.")
        return ActiveHint(hint=resp.hint, already_scanned=resp.already_scanned)

    async def fetch_progress(self) -> Progress:
        data = await self.guard.run("progress", self.gateway.get("/hunt/progress"))
        return parse_body(Progress, data)

    async def fetch_question(self) -> Question:
        data = await self.guard.run("question", self.gateway.get("/hunt/question"))
        return parse_body(QuestionResponse, data).question
