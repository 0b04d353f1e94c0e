import json
from datetime import datetime, timedelta, timezone

import jwt

from huntclient.session_store import Session, SessionStore

SECRET = "session-store-test-secret-0123456789"


def _jwt(exp: datetime) -> str:
    return jwt.encode({"sub": "1", "exp": int(exp.timestamp())}, SECRET, algorithm="HS256")


def test_save_and_rehydrate(tmp_path):
    path = tmp_path / "session.json"
    store = SessionStore(path)
    assert store.current is None
    store.save(Session(team_name="Foxes", token="token-1"))

    again = SessionStore(path)
    assert again.current == Session(team_name="Foxes", token="token-1")
    assert again.team_token() == "token-1"
    # same keys as the browser client's local storage
    assert json.loads(path.read_text()) == {"token": "token-1", "teamName": "Foxes"}


def test_admin_token_independent_of_team_session(tmp_path):
    path = tmp_path / "session.json"
    store = SessionStore(path)
    store.save(Session(team_name="Foxes", token="token-1"))
    store.save_admin("admin-token")
    store.clear()

    again = SessionStore(path)
    assert again.current is None
    assert again.admin_token() == "admin-token"

    again.clear_admin()
    assert SessionStore(path).admin is None


def test_expired_jwt_dropped_on_load(tmp_path):
    path = tmp_path / "session.json"
    expired = _jwt(datetime.now(timezone.utc) - timedelta(minutes=5))
    path.write_text(json.dumps({"token": expired, "teamName": "Foxes", "adminToken": expired}))
    store = SessionStore(path)
    assert store.current is None
    assert store.admin is None


def test_valid_jwt_kept(tmp_path):
    path = tmp_path / "session.json"
    token = _jwt(datetime.now(timezone.utc) + timedelta(hours=1))
    path.write_text(json.dumps({"token": token, "teamName": "Foxes"}))
    assert SessionStore(path).team_token() == token


def test_corrupt_file_means_logged_out(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json")
    assert SessionStore(path).current is None


def test_partial_session_ignored(tmp_path):
    path = tmp_path / "session.json"
    path.write_text(json.dumps({"token": "token-1"}))
    assert SessionStore(path).current is None
