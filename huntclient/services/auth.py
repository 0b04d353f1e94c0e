from __future__ import annotations
import structlog
from huntclient.errors import ApiError, HuntError, TransportError, ValidationFailed
from huntclient.gateway import ApiGateway
from huntclient.schemas.auth import AuthResult, LoginRequest, SignupRequest, TokenResponse
from huntclient.session_store import Session
from huntclient.services.validation import validate_login, validate_signup

log = structlog.get_logger()

class AuthService:
    def __init__(self, gateway: ApiGateway):
        self.gateway = gateway

    async def login(self, team_name: str, password: str) -> AuthResult:
        try:
            validate_login(team_name, password)
        except ValidationFailed as e:
            return AuthResult(success=False, field_errors=e.field_errors)
        body = LoginRequest(team_name=team_name.strip(), password=password)
        return await self._authenticate("/auth/login", body, "Login failed")

    async def signup(self, team_name: str, password: str, confirm_password: str) -> AuthResult:
        try:
            validate_signup(team_name, password, confirm_password)
        except ValidationFailed as e:
            return AuthResult(success=False, field_errors=e.field_errors)
        body = SignupRequest(team_name=team_name.strip(), password=password)
        return await self._authenticate("/auth/signup", body, "Signup failed")

    async def _authenticate(self, path: str, body: LoginRequest, fallback: str) -> AuthResult:
        try:
            data = await self.gateway.post(path, json=body.model_dump(by_alias=True), auth="none")
            resp = TokenResponse.model_validate(data)
        except TransportError as e:
            return AuthResult(success=False, error=e.message)
        except ApiError as e:
            log.info("auth_rejected", path=path, status=e.status_code)
            msg = e.message if not e.message.startswith("HTTP error!") else fallback
            return AuthResult(success=False, error=msg)
        except HuntError:
            return AuthResult(success=False, error=fallback)
        except ValueError:
            return AuthResult(success=False, error=fallback)
        self.gateway.store.save(Session(team_name=body.team_name, token=resp.token))
        return AuthResult(success=True)

    def logout(self) -> None:
        self.gateway.store.clear()
