from __future__ import annotations
import json
from pathlib import Path
import structlog
from pydantic import BaseModel, ConfigDict
from huntclient.config import settings
from huntclient.security import token_expired

log = structlog.get_logger()

class Session(BaseModel):
    model_config = ConfigDict(frozen=True)

    team_name: str
    token: str

class AdminSession(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str

class SessionStore:
    """
    Durable holder of the team session and the admin token.

    Only save*/clear* write; everything else reads `current` / `admin`.
    Sessions are immutable and replaced wholesale, so readers never see a
    half-written value. The on-disk keys match the browser client's
    local-storage keys (token, teamName, adminToken).
    """

    def __init__(self, path: Path | None = None):
        self.path = Path(path or settings.session_path)
        self._session: Session | None = None
        self._admin: AdminSession | None = None
        self._load()

    @property
    def current(self) -> Session | None:
        return self._session

    @property
    def admin(self) -> AdminSession | None:
        return self._admin

    def team_token(self) -> str | None:
        return self._session.token if self._session else None

    def admin_token(self) -> str | None:
        return self._admin.token if self._admin else None

    def save(self, session: Session) -> None:
        self._session = session
        self._write()
        log.info("session_saved", team=session.team_name)

    def save_admin(self, token: str) -> None:
        self._admin = AdminSession(token=token)
        self._write()
        log.info("admin_session_saved")

    def clear(self) -> None:
        if self._session is not None:
            log.info("session_cleared", team=self._session.team_name)
        self._session = None
        self._write()

    def clear_admin(self) -> None:
        self._admin = None
        self._write()

    def _load(self) -> None:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except (json.JSONDecodeError, OSError) as e:
            log.warning("session_file_unreadable", path=str(self.path), error=str(e))
            return
        if not isinstance(data, dict):
            return
        token, team = data.get("token"), data.get("teamName")
        if token and team:
            if token_expired(token):
                log.info("session_expired", team=team)
            else:
                self._session = Session(team_name=team, token=token)
        admin = data.get("adminToken")
        if admin and not token_expired(admin):
            self._admin = AdminSession(token=admin)

    def _write(self) -> None:
        data: dict[str, str] = {}
        if self._session:
            data["token"] = self._session.token
            data["teamName"] = self._session.team_name
        if self._admin:
            data["adminToken"] = self._admin.token
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(json.dumps(data), encoding="utf-8")
        tmp.replace(self.path)
