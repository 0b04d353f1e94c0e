import pytest
from typer.testing import CliRunner

from huntclient.config import settings
from huntclient.main import app
from huntclient.session_store import Session, SessionStore

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_settings(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "session_path", tmp_path / "session.json")
    monkeypatch.setattr(settings, "dev_mode", True)
    monkeypatch.setattr("huntclient.main.configure_logging", lambda level=None: None)
    return settings


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert f"huntclient {settings.app_version}" in result.output


def test_open_redirects_to_login():
    result = runner.invoke(app, ["open", "/hunt"])
    assert result.exit_code == 0, result.output
    assert "/login -> huntclient auth login" in result.output


def test_open_with_session_and_logout(cli_settings):
    SessionStore(cli_settings.session_path).save(Session(team_name="Foxes", token="t"))
    result = runner.invoke(app, ["open", "/hunt"])
    assert "/hunt -> huntclient hunt play" in result.output

    assert "Team: Foxes" in runner.invoke(app, ["auth", "whoami"]).output
    assert runner.invoke(app, ["auth", "logout"]).exit_code == 0
    result = runner.invoke(app, ["auth", "whoami"])
    assert result.exit_code == 1
    assert "Not logged in." in result.output


def test_hunt_requires_login():
    result = runner.invoke(app, ["hunt", "play"])
    assert result.exit_code == 1
    assert "Not logged in." in result.output
