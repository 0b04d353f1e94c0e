from __future__ import annotations
from datetime import datetime
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

class BonusScanResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question_image: str | None = Field(default=None, validation_alias=AliasChoices("questionImage", "question_image"))
    msg: str | None = None

class WinnerRequest(BaseModel):
    leader_name: str
    team_name: str

class BonusSubmission(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int | str | None = None
    leader_name: str = Field(validation_alias=AliasChoices("leader_name", "leaderName"))
    team_name: str = Field(validation_alias=AliasChoices("team_name", "teamName"))
    submitted_at: datetime = Field(validation_alias=AliasChoices("submitted_at", "submittedAt"))
