from datetime import datetime, timedelta, timezone

import pytest

from huntclient.schemas.leaderboard import LeaderboardEntry
from huntclient.services.leaderboard import LeaderboardViewer, compute_stats, normalize_leaderboard, status_text
from huntclient.session_store import Session, SessionStore
from tests.fake_backend import open_gateway

T0 = datetime(2026, 1, 1, 10, 0, tzinfo=timezone.utc)


def _store(state, cfg, team):
    store = SessionStore(cfg.session_path)
    store.save(Session(team_name=team.name, token=team.token))
    return store


@pytest.mark.asyncio
async def test_pages_are_disjoint(state, cfg):
    teams = [state.add_team(f"Team {i:02d}", completed=i % 10, solved_at=T0 + timedelta(minutes=i)) for i in range(25)]
    async with open_gateway(state, cfg, _store(state, cfg, teams[0])) as gw:
        viewer = LeaderboardViewer(gw, cfg)
        p1 = await viewer.fetch_leaderboard(1, 10)
        p2 = await viewer.fetch_leaderboard(2, 10)
        p3 = await viewer.fetch_leaderboard(3, 10)
    assert len(p1.teams) == len(p2.teams) == 10
    assert len(p3.teams) == 5
    assert not {t.team_name for t in p1.teams} & {t.team_name for t in p2.teams}
    assert [t.rank for t in p2.teams] == list(range(11, 21))
    assert p1.pagination.has_next_page and p2.pagination.has_next_page
    assert not p3.pagination.has_next_page and p3.pagination.has_prev_page
    assert p3.pagination.total_teams == 25
    assert ("GET", "/leaderboard", f"Bearer {teams[0].token}") in state.calls


@pytest.mark.asyncio
async def test_legacy_array_paginated_locally(state, cfg):
    state.leaderboard_style = "legacy"
    teams = [state.add_team(f"Team {i:02d}", completed=i, solved_at=T0) for i in range(7)]
    async with open_gateway(state, cfg, _store(state, cfg, teams[0])) as gw:
        page = await LeaderboardViewer(gw, cfg).fetch_leaderboard(2, 5)
    assert page.legacy
    assert [t.team_name for t in page.teams] == ["Team 01", "Team 00"]
    assert [t.rank for t in page.teams] == [6, 7]
    assert page.pagination.total_pages == 2
    assert page.pagination.has_next_page is False


def test_legacy_page_clamped():
    rows = [{"team_name": f"T{i}", "score": 5 - i} for i in range(3)]
    page = normalize_leaderboard(rows, page=9, page_size=2)
    assert page.pagination.current_page == 2
    assert [t.team_name for t in page.teams] == ["T2"]


def test_envelope_ranks_filled_from_page_offset():
    payload = {
        "teams": [{"teamName": "A", "score": 3}, {"teamName": "B", "score": 2}],
        "pagination": {"currentPage": 3, "totalPages": 4, "totalTeams": 8, "limit": 2},
    }
    page = normalize_leaderboard(payload, page=3, page_size=2)
    assert [t.rank for t in page.teams] == [5, 6]
    assert page.pagination.has_next_page is True
    assert page.pagination.has_prev_page is True


def test_status_text_and_stats():
    assert status_text(16, 16) == "Completed"
    assert status_text(3, 16) == "Active"
    assert status_text(0, 16) == "Not Started"
    page = normalize_leaderboard([{"team_name": "A", "score": 16}, {"team_name": "B", "score": 4}], 1, 10)
    stats = compute_stats(page, 16)
    assert (stats.active_teams, stats.completed, stats.total_puzzles) == (2, 1, 16)


@pytest.mark.asyncio
async def test_ranked_list_hidden_until_hunt_ends(state, cfg):
    teams = [state.add_team(f"Team {i:02d}", completed=9 - i, solved_at=T0) for i in range(6)]
    me = teams[4]
    async with open_gateway(state, cfg, _store(state, cfg, me)) as gw:
        viewer = LeaderboardViewer(gw, cfg)
        hidden = await viewer.main_board(me.name, page_size=2)
        state.phases["main"]["isEnded"] = True
        shown = await viewer.main_board(me.name, page_size=10)
    assert hidden.revealed is False
    assert hidden.page is None
    assert hidden.own.team_name == me.name
    assert hidden.own.rank == 5
    assert shown.revealed is True
    assert len(shown.page.teams) == 6
    assert shown.own.rank == 5
    assert shown.stats.active_teams == 6


@pytest.mark.asyncio
async def test_team_history(state, cfg):
    solver = state.add_team("Solvers", completed=3, solved_at=T0)
    idle = state.add_team("Idle")
    async with open_gateway(state, cfg, _store(state, cfg, solver)) as gw:
        viewer = LeaderboardViewer(gw, cfg)
        ok = await viewer.team_history(LeaderboardEntry(id=solver.id, team_name="Solvers", score=3))
        calls_before = len(state.calls)
        none = await viewer.team_history(LeaderboardEntry(id=idle.id, team_name="Idle", score=0))
        assert len(state.calls) == calls_before
        missing = await viewer.team_history(LeaderboardEntry(id=999, team_name="Gone", score=2))
    assert ok.status == "ok"
    assert [s.question_number for s in ok.solves] == [1, 2, 3]
    assert none.status == "no_progress"
    assert missing.status == "error"
    assert missing.error == "Failed to load team progress. Please try again."


@pytest.mark.asyncio
async def test_leaderboard_failure_reported(state, cfg):
    team = state.add_team("Foxes")
    async with open_gateway(state, cfg, _store(state, cfg, team)) as gw:
        state.down = True
        board = await LeaderboardViewer(gw, cfg).main_board("Foxes")
    assert board.revealed is False
    assert board.own is None
    assert board.error == "Failed to fetch leaderboard data. Please try again."


@pytest.mark.asyncio
async def test_poll_ticks_until_stopped(state, cfg):
    ticks = []
    async with open_gateway(state, cfg) as gw:
        task = LeaderboardViewer(gw, cfg).poll(lambda: ticks.append(1) if len(ticks) < 2 else False, interval=0)
        async with task:
            await task.wait()
    assert task.interval == 0
    assert task.ticks == 3


@pytest.mark.asyncio
async def test_poll_and_page_size_defaults(state, cfg):
    async with open_gateway(state, cfg) as gw:
        viewer = LeaderboardViewer(gw, cfg)
        assert viewer.poll(lambda: None).interval == cfg.leaderboard_poll_seconds
        with pytest.raises(ValueError):
            await viewer.fetch_leaderboard(1, 0)
