from __future__ import annotations
from datetime import datetime
from typing import Literal
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

class LeaderboardEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int | str | None = Field(default=None, validation_alias=AliasChoices("id", "team_id", "teamId"))
    rank: int | None = None
    team_name: str = Field(validation_alias=AliasChoices("team_name", "teamName"))
    score: int = 0
    avatar_seed: str | None = Field(default=None, validation_alias=AliasChoices("avatar_seed", "avatarSeed"))
    last_solve_time: datetime | None = Field(default=None, validation_alias=AliasChoices("last_solve_time", "lastSolveTime"))

class Pagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_page: int = Field(default=1, validation_alias=AliasChoices("currentPage", "current_page", "page"))
    total_pages: int = Field(default=1, validation_alias=AliasChoices("totalPages", "total_pages"))
    total_teams: int = Field(default=0, validation_alias=AliasChoices("totalTeams", "total_teams", "total"))
    page_size: int | None = Field(default=None, validation_alias=AliasChoices("limit", "pageSize", "page_size"))
    has_next_page: bool | None = Field(default=None, validation_alias=AliasChoices("hasNextPage", "hasNext", "has_next_page"))
    has_prev_page: bool | None = Field(default=None, validation_alias=AliasChoices("hasPrevPage", "hasPrev", "has_prev_page"))

class LeaderboardEnvelope(BaseModel):
    teams: list[LeaderboardEntry]
    pagination: Pagination = Field(default_factory=Pagination)

class LeaderboardPage(BaseModel):
    teams: list[LeaderboardEntry]
    pagination: Pagination
    legacy: bool = False

class LeaderboardStats(BaseModel):
    active_teams: int
    completed: int
    total_puzzles: int

class SolveRecord(BaseModel):
    question_number: int = Field(validation_alias=AliasChoices("question_number", "questionNumber"))
    solved_at: datetime = Field(validation_alias=AliasChoices("solved_at", "solvedAt"))

class TeamHistory(BaseModel):
    status: Literal["ok", "no_progress", "error"]
    solves: list[SolveRecord] = Field(default_factory=list)
    error: str | None = None

class MainBoard(BaseModel):
    """Main-hunt leaderboard view: the ranked list stays hidden until the hunt ends."""
    revealed: bool
    page: LeaderboardPage | None = None
    own: LeaderboardEntry | None = None
    stats: LeaderboardStats | None = None
    error: str | None = None
