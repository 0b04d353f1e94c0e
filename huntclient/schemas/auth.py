from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field

class LoginRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    team_name: str = Field(alias="teamName")
    password: str

class SignupRequest(LoginRequest):
    pass

class TokenResponse(BaseModel):
    token: str
    msg: str | None = None

class AuthResult(BaseModel):
    success: bool
    error: str | None = None
    field_errors: dict[str, str] = Field(default_factory=dict)
