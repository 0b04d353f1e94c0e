import pytest

from huntclient.services.auth import AuthService
from huntclient.services.avatar import avatar_choices, avatar_url, update_avatar
from huntclient.session_store import SessionStore
from tests.fake_backend import open_gateway


@pytest.mark.asyncio
async def test_signup_then_login(state, cfg):
    async with open_gateway(state, cfg) as gw:
        auth = AuthService(gw)
        result = await auth.signup("Foxes", "secret1", "secret1")
        assert result.success
        assert gw.store.current.team_name == "Foxes"

        auth.logout()
        assert gw.store.current is None

        result = await auth.login(" Foxes ", "secret1")
        assert result.success
    again = SessionStore(cfg.session_path)
    assert again.current.team_name == "Foxes"
    assert again.team_token() == state.teams["Foxes"].token
    assert ("POST", "/auth/login", None) in state.calls


@pytest.mark.asyncio
async def test_wrong_password_shows_server_message(state, cfg):
    state.add_team("Foxes", "secret1")
    async with open_gateway(state, cfg) as gw:
        result = await AuthService(gw).login("Foxes", "nope-nope")
    assert not result.success
    assert result.error == "Invalid team name or password"
    assert SessionStore(cfg.session_path).current is None


@pytest.mark.asyncio
async def test_duplicate_signup(state, cfg):
    state.add_team("Foxes")
    async with open_gateway(state, cfg) as gw:
        result = await AuthService(gw).signup("Foxes", "secret1", "secret1")
    assert result.error == "Team name already taken"


@pytest.mark.asyncio
async def test_signup_validation_is_local(state, cfg):
    async with open_gateway(state, cfg) as gw:
        result = await AuthService(gw).signup("Fx", "12345", "54321")
    assert not result.success
    assert result.field_errors == {
        "team_name": "Team name must be at least 3 characters",
        "password": "Password must be at least 6 characters",
        "confirm_password": "Passwords do not match",
    }
    assert state.calls == []


@pytest.mark.asyncio
async def test_backend_down(state, cfg):
    state.down = True
    async with open_gateway(state, cfg) as gw:
        result = await AuthService(gw).login("Foxes", "secret1")
    assert result.error == "Service unavailable"


def test_avatar_choices():
    seeds = avatar_choices()
    assert len(seeds) == 8
    assert len(set(seeds)) == 8
    for i, seed in enumerate(seeds):
        prefix, idx, rand = seed.split("-")
        assert (prefix, idx, len(rand)) == ("avatar", str(i), 13)


def test_avatar_url(cfg):
    assert avatar_url("avatar-1-abc", 80, cfg) == f"{cfg.avatar_base_url}?seed=avatar-1-abc&size=80"
    assert "seed=default" in avatar_url(None, cfg=cfg)


@pytest.mark.asyncio
async def test_update_avatar(state, cfg):
    async with open_gateway(state, cfg) as gw:
        await AuthService(gw).signup("Foxes", "secret1", "secret1")
        await update_avatar(gw, "avatar-3-zzzzzzzzzzzzz")
        with pytest.raises(ValueError):
            await update_avatar(gw, " ")
    assert state.teams["Foxes"].avatar_seed == "avatar-3-zzzzzzzzzzzzz"
