from datetime import datetime, timezone

import pytest

from huntclient.errors import ApiError, Unauthorized, ValidationFailed
from huntclient.schemas.admin import LocationForm, PhaseTiming, QuestionForm
from huntclient.services.admin import AdminConsole
from huntclient.session_store import Session, SessionStore
from tests.fake_backend import ADMIN_PASSWORD, ADMIN_TOKEN, open_gateway


@pytest.mark.asyncio
async def test_login_and_question_crud(state, cfg):
    async with open_gateway(state, cfg) as gw:
        admin = AdminConsole(gw)
        assert not admin.logged_in
        await admin.login(ADMIN_PASSWORD)
        assert admin.logged_in

        q = await admin.add_question(QuestionForm(hint="By the lake", code="LAKE", question="q1.png", answer="duck"))
        assert q.id == 1
        await admin.update_question(q.id, QuestionForm(hint="By the lake", code="LAKE", question="q1.png", answer="swan"))
        assert [x.answer for x in await admin.list_questions()] == ["swan"]
        await admin.delete_question(q.id)
        assert await admin.list_questions() == []

        with pytest.raises(ValidationFailed) as exc:
            await admin.add_question(QuestionForm(hint="", code="X", question="Q", answer="A"))
        assert exc.value.field_errors == {"general": "All fields are required"}

    assert SessionStore(cfg.session_path).admin_token() == ADMIN_TOKEN
    assert all(auth == f"Bearer {ADMIN_TOKEN}" for _, path, auth in state.calls if path.startswith("/admin/q"))


@pytest.mark.asyncio
async def test_admin_token_separate_from_team(state, cfg):
    team = state.add_team("Foxes")
    store = SessionStore(cfg.session_path)
    store.save(Session(team_name="Foxes", token=team.token))
    async with open_gateway(state, cfg, store) as gw:
        with pytest.raises(Unauthorized):
            await AdminConsole(gw).list_teams()
    assert store.team_token() == team.token


@pytest.mark.asyncio
async def test_bad_password(state, cfg):
    async with open_gateway(state, cfg) as gw:
        admin = AdminConsole(gw)
        with pytest.raises(ApiError) as exc:
            await admin.login("guess")
    assert exc.value.message == "Invalid admin password"
    assert not admin.logged_in


@pytest.mark.asyncio
async def test_locations_and_teams(state, cfg):
    foxes = state.add_team("Foxes", completed=4)
    owls = state.add_team("Owls", completed=1)
    async with open_gateway(state, cfg) as gw:
        admin = AdminConsole(gw)
        await admin.login(ADMIN_PASSWORD)

        loc = await admin.add_location(LocationForm(name="Library", code="LIB-1"))
        await admin.update_location(loc.id, LocationForm(name="Old Library", code="LIB-1", hint="Books"))
        assert [(x.name, x.hint) for x in await admin.list_locations()] == [("Old Library", "Books")]
        with pytest.raises(ValidationFailed):
            await admin.add_location(LocationForm(name="", code="X"))
        await admin.delete_location(loc.id)

        teams = await admin.list_teams()
        assert {t.team_name: t.completed_locations for t in teams} == {"Foxes": 4, "Owls": 1}
        await admin.reset_team(foxes.id)
        await admin.delete_team(owls.id)
        with pytest.raises(ApiError) as exc:
            await admin.delete_team(999)
        assert exc.value.message == "Team not found"
        await admin.regenerate_sequences()
    assert foxes.completed == 0
    assert "Owls" not in state.teams
    assert state.regenerated == 1


@pytest.mark.asyncio
async def test_timing(state, cfg):
    async with open_gateway(state, cfg) as gw:
        admin = AdminConsole(gw)
        await admin.login(ADMIN_PASSWORD)
        timing = await admin.get_timing()
        assert set(timing) == {"main", "bonus1", "bonus2"}
        assert timing["main"].end_time == datetime(2026, 1, 1, 19, 0, tzinfo=timezone.utc)

        start = datetime(2026, 2, 1, 9, 0, tzinfo=timezone.utc)
        end = datetime(2026, 2, 1, 18, 0, tzinfo=timezone.utc)
        with pytest.raises(ValueError):
            await admin.set_timing("main", PhaseTiming(start_time=end, end_time=start))
        with pytest.raises(ValueError):
            await admin.set_timing("finale", PhaseTiming(start_time=start))
        saved = await admin.set_timing("main", PhaseTiming(start_time=start, end_time=end))
    assert saved.start_time == start
    assert state.phases["main"]["endTime"] == end.isoformat()


@pytest.mark.asyncio
async def test_end_bonus_round(state, cfg):
    async with open_gateway(state, cfg) as gw:
        admin = AdminConsole(gw)
        await admin.login(ADMIN_PASSWORD)
        await admin.end_bonus_round(2)
    assert state.phases["bonus2"]["isEnded"] is True
