from __future__ import annotations
from datetime import datetime
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

class AdminQuestion(BaseModel):
    id: int | str | None = None
    hint: str = ""
    code: str = ""
    question: str = ""
    answer: str = ""

class QuestionForm(BaseModel):
    hint: str
    code: str
    question: str
    answer: str

class Location(BaseModel):
    id: int | str | None = None
    name: str = ""
    code: str = ""
    hint: str | None = None

class LocationForm(BaseModel):
    name: str
    code: str
    hint: str | None = None

class AdminTeam(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int | str
    team_name: str = Field(validation_alias=AliasChoices("team_name", "teamName"))
    score: int = 0
    completed_locations: int = Field(default=0, validation_alias=AliasChoices("completed_locations", "completedLocations"))

class PhaseTiming(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start_time: datetime | None = Field(default=None, validation_alias=AliasChoices("startTime", "start_time"))
    end_time: datetime | None = Field(default=None, validation_alias=AliasChoices("endTime", "end_time"))

    def to_wire(self) -> dict:
        return {
            "startTime": self.start_time.isoformat() if self.start_time else None,
            "endTime": self.end_time.isoformat() if self.end_time else None,
        }

class AdminLoginResponse(BaseModel):
    token: str
