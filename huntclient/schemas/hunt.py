from __future__ import annotations
from datetime import datetime
from typing import Any, Literal, Union
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

Phase = Literal["main", "bonus1", "bonus2"]
PHASES: tuple[str, ...] = ("main", "bonus1", "bonus2")

IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg")

class PhaseStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_started: bool = Field(default=False, validation_alias=AliasChoices("isStarted", "is_started"))
    is_ended: bool = Field(default=False, validation_alias=AliasChoices("isEnded", "is_ended"))
    start_time: datetime | None = Field(default=None, validation_alias=AliasChoices("startTime", "start_time"))
    end_time: datetime | None = Field(default=None, validation_alias=AliasChoices("endTime", "end_time"))
    location_hint: str | None = Field(default=None, validation_alias=AliasChoices("location_hint", "locationHint"))
    question_image: str | None = Field(default=None, validation_alias=AliasChoices("question_image", "questionImage"))
    already_scanned: bool = Field(default=False, validation_alias=AliasChoices("alreadyScanned", "already_scanned"))
    # "server" when fetched, "static" when built from configured times, "fallback" after a failed fetch
    source: Literal["server", "static", "fallback"] = "server"

    @classmethod
    def not_started(cls) -> PhaseStatus:
        return cls(is_started=False, is_ended=False, source="fallback")

class Question(BaseModel):
    """
    Puzzle content. Exactly one of image / link / text is expected.

    The server has sent this as a bare string ("7.png"), as
    {"id", "text"|"image"|"link"} and, for admin-authored rows, with a
    `question` field; all of them are normalized here.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: int | str | None = None
    text: str | None = None
    image: str | None = None
    link: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any):
        if isinstance(data, str):
            return _classify(data)
        if isinstance(data, dict):
            data = dict(data)
            kind = data.pop("type", None)
            if kind == "image" and "src" in data:
                data["image"] = data.pop("src")
            elif kind == "link" and "href" in data:
                data["link"] = data.pop("href")
                data.pop("text", None)
            if not any(data.get(k) for k in ("text", "image", "link")) and isinstance(data.get("question"), str):
                data.update(_classify(data.pop("question")))
        return data

    @property
    def kind(self) -> Literal["image", "link", "text", "empty"]:
        if self.image:
            return "image"
        if self.link:
            return "link"
        if self.text:
            return "text"
        return "empty"

    def asset_url(self, base_url: str) -> str | None:
        if not self.image:
            return None
        if self.image.startswith(("http://", "https://")):
            return self.image
        return f"{base_url.rstrip('/')}/{self.image.lstrip('/')}"

def _classify(value: str) -> dict[str, str]:
    v = value.strip()
    if v.startswith(("http://", "https://")):
        return {"link": v}
    if v.lower().endswith(IMAGE_SUFFIXES):
        return {"image": v}
    return {"text": v}

class HintResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    hint: str | None = None
    already_scanned: bool = Field(default=False, validation_alias=AliasChoices("alreadyScanned", "already_scanned"))
    msg: str | None = None

class QuestionResponse(BaseModel):
    question: Question

class CodeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: Question | None = None
    already_scanned: bool = Field(default=False, validation_alias=AliasChoices("alreadyScanned", "already_scanned"))
    msg: str | None = None

class AnswerResponse(BaseModel):
    msg: str = "Correct answer!"

class Progress(BaseModel):
    completed: int = 0
    total: int = 0

    @property
    def current_number(self) -> int:
        return self.completed + 1

# Hint engine results: a tagged union so screens never sniff raw payloads.
class ActiveHint(BaseModel):
    kind: Literal["hint"] = "hint"
    hint: str
    already_scanned: bool = False

class HuntComplete(BaseModel):
    kind: Literal["complete"] = "complete"
    message: str

HintResult = Union[ActiveHint, HuntComplete]
