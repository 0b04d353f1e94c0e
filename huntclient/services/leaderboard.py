from __future__ import annotations
import math
from typing import Any, Callable
import structlog
from pydantic import ValidationError
from huntclient.config import Settings, settings as default_settings
from huntclient.errors import ApiError, HuntError, StaleResponse, TransportError
from huntclient.gateway import ApiGateway
from huntclient.schemas.leaderboard import (
    LeaderboardEntry, LeaderboardEnvelope, LeaderboardPage, LeaderboardStats, MainBoard, Pagination,
    SolveRecord, TeamHistory,
)
from huntclient.services.request_guard import RequestGuard
from huntclient.services.ticker import RepeatingTask
from huntclient.services.timing import TimingResolver

log = structlog.get_logger()

LEADERBOARD_FAILED_MSG = "Failed to fetch leaderboard data. Please try again."

def normalize_leaderboard(payload: Any, page: int, page_size: int) -> LeaderboardPage:
    """
    Accept either {"teams": [...], "pagination": {...}} or the older bare ranked
    array. A bare array holds every team, so it is paginated here.
    """
    if isinstance(payload, list):
        entries = [LeaderboardEntry.model_validate(t) for t in payload]
        for i, e in enumerate(entries):
            if e.rank is None:
                e.rank = i + 1
        total = len(entries)
        total_pages = max(1, math.ceil(total / page_size))
        current = min(max(1, page), total_pages)
        start = (current - 1) * page_size
        return LeaderboardPage(
            teams=entries[start:start + page_size],
            pagination=Pagination(
                current_page=current, total_pages=total_pages, total_teams=total, page_size=page_size,
                has_next_page=current < total_pages, has_prev_page=current > 1,
            ),
            legacy=True,
        )
    if isinstance(payload, dict) and "teams" in payload:
        env = LeaderboardEnvelope.model_validate(payload)
        p = env.pagination
        if p.page_size is None:
            p.page_size = page_size
        if p.has_next_page is None:
            p.has_next_page = p.current_page < p.total_pages
        if p.has_prev_page is None:
            p.has_prev_page = p.current_page > 1
        if not p.total_teams:
            p.total_teams = len(env.teams)
        offset = (p.current_page - 1) * p.page_size
        for i, e in enumerate(env.teams):
            if e.rank is None:
                e.rank = offset + i + 1
        return LeaderboardPage(teams=env.teams, pagination=p)
    raise ApiError(200, "Unexpected leaderboard response")

def status_text(score: int, total_puzzles: int) -> str:
    if score >= total_puzzles:
        return "Completed"
    if score > 0:
        return "Active"
    return "Not Started"

def compute_stats(page: LeaderboardPage, total_puzzles: int) -> LeaderboardStats:
    return LeaderboardStats(
        active_teams=page.pagination.total_teams or len(page.teams),
        completed=sum(1 for t in page.teams if t.score >= total_puzzles),
        total_puzzles=total_puzzles,
    )

class LeaderboardViewer:
    def __init__(self, gateway: ApiGateway, cfg: Settings | None = None, *, timing: TimingResolver | None = None):
        self.gateway = gateway
        self.settings = cfg or default_settings
        self.timing = timing or TimingResolver(gateway, self.settings)
        self.guard = RequestGuard()

    async def fetch_leaderboard(self, page: int = 1, page_size: int | None = None) -> LeaderboardPage:
        size = page_size if page_size is not None else self.settings.leaderboard_page_size
        if size < 1:
            raise ValueError("page_size must be at least 1")
        data = await self.guard.run(
            "leaderboard", self.gateway.get("/leaderboard", params={"page": page, "limit": size})
        )
        try:
            return normalize_leaderboard(data, page, size)
        except ValidationError as e:
            raise ApiError(200, "Unexpected leaderboard response") from e

    async def fetch_team_progress(self, team_id: int | str) -> list[SolveRecord]:
        data = await self.gateway.get(f"/leaderboard/team/{team_id}")
        rows = data if isinstance(data, list) else data.get("progress", [])
        solves = [SolveRecord.model_validate(r) for r in rows]
        return sorted(solves, key=lambda s: s.question_number)

    async def team_history(self, entry: LeaderboardEntry) -> TeamHistory:
        """Drill-down for one row; zero-score teams are answered without a request."""
        if entry.score <= 0:
            return TeamHistory(status="no_progress")
        if entry.id is None:
            return TeamHistory(status="error", error="Team details are unavailable.")
        try:
            solves = await self.fetch_team_progress(entry.id)
        except TransportError as e:
            return TeamHistory(status="error", error=e.message)
        except (HuntError, ValidationError, AttributeError) as e:
            log.warning("team_progress_failed", team_id=entry.id, error=str(e))
            return TeamHistory(status="error", error="Failed to load team progress. Please try again.")
        if not solves:
            return TeamHistory(status="no_progress")
        return TeamHistory(status="ok", solves=solves)

    async def main_board(self, team_name: str | None, page: int = 1, page_size: int | None = None) -> MainBoard:
        """
        Main-hunt leaderboard. Until the hunt has ended only the viewer's own
        row is kept; the ranked list is revealed once `isEnded` is true.
        """
        status = await self.timing.resolve("main")
        try:
            if status.is_ended:
                board = await self.fetch_leaderboard(page, page_size)
                own = next((t for t in board.teams if t.team_name == team_name), None)
                return MainBoard(revealed=True, page=board, own=own, stats=compute_stats(board, self.settings.total_puzzles))
            own = await self._find_own(team_name, page_size) if team_name else None
        except StaleResponse:
            return MainBoard(revealed=status.is_ended)
        except HuntError as e:
            log.warning("leaderboard_failed", error=str(e))
            msg = e.message if isinstance(e, TransportError) else LEADERBOARD_FAILED_MSG
            return MainBoard(revealed=status.is_ended, error=msg)
        return MainBoard(revealed=False, own=own)

    async def _find_own(self, team_name: str, page_size: int | None) -> LeaderboardEntry | None:
        page = 1
        while True:
            board = await self.fetch_leaderboard(page, page_size)
            for t in board.teams:
                if t.team_name == team_name:
                    return t
            if not board.pagination.has_next_page or page >= board.pagination.total_pages:
                return None
            page += 1

    def poll(self, callback: Callable[[], Any], interval: float | None = None) -> RepeatingTask:
        if interval is None:
            interval = self.settings.leaderboard_poll_seconds
        return RepeatingTask(interval, callback, name="leaderboard-poll")
