from datetime import datetime, timedelta, timezone

import httpx
import pytest

from huntclient.gateway import ApiGateway
from huntclient.schemas.hunt import PhaseStatus
from huntclient.services.timing import TimingResolver, countdown_parts, format_remaining, hunt_clock
from huntclient.session_store import SessionStore
from tests.fake_backend import open_gateway

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_server_status_parsed(state, cfg):
    async with open_gateway(state, cfg) as gw:
        status = await TimingResolver(gw, cfg).resolve("main")
    assert status.is_started and not status.is_ended
    assert status.end_time == datetime(2026, 1, 1, 19, 0, tzinfo=timezone.utc)
    assert status.source == "server"


@pytest.mark.asyncio
async def test_failure_means_not_started(state, cfg):
    state.down = True
    async with open_gateway(state, cfg) as gw:
        status = await TimingResolver(gw, cfg).resolve("bonus1")
    assert status.is_started is False
    assert status.is_ended is False
    assert status.source == "fallback"


@pytest.mark.asyncio
async def test_static_times_never_override_server(state, cfg):
    # configured start is in the past, but the server says not started
    state.phases["main"]["isStarted"] = False
    cfg = cfg.model_copy(update={"main_hunt_start": NOW - timedelta(days=1)})
    async with open_gateway(state, cfg) as gw:
        status = await TimingResolver(gw, cfg).resolve("main")
    assert status.is_started is False
    assert status.source == "server"


@pytest.mark.asyncio
async def test_static_times_when_server_timing_off(cfg):
    cfg = cfg.model_copy(update={
        "use_server_timing": False,
        "main_hunt_start": NOW - timedelta(hours=1),
        "main_hunt_end": NOW + timedelta(hours=1),
    })

    def handler(request):
        raise AssertionError("server must not be asked")

    async with ApiGateway(SessionStore(cfg.session_path), cfg, transport=httpx.MockTransport(handler)) as gw:
        resolver = TimingResolver(gw, cfg, clock=lambda: NOW)
        main = await resolver.resolve("main")
        bonus = await resolver.resolve("bonus2")
    assert main.is_started and not main.is_ended and main.source == "static"
    assert not bonus.is_started


@pytest.mark.asyncio
async def test_unknown_phase_rejected(cfg):
    with pytest.raises(ValueError):
        await TimingResolver(None, cfg).resolve("bonus3")


def test_countdown_parts():
    cd = countdown_parts(NOW + timedelta(days=2, hours=3, minutes=4, seconds=5), NOW)
    assert (cd.days, cd.hours, cd.minutes, cd.seconds, cd.expired) == (2, 3, 4, 5, False)
    assert cd.label() == "2d 03:04:05"
    assert countdown_parts(NOW - timedelta(seconds=1), NOW).expired


def test_format_remaining():
    assert format_remaining(3 * 3600 + 61) == "03:01:01"
    assert format_remaining(0) == "00:00:00"
    assert format_remaining(-5) == "00:00:00"


def test_hunt_clock():
    running = PhaseStatus(is_started=True, end_time=NOW + timedelta(minutes=90))
    assert hunt_clock(running, NOW) == "01:30:00"
    assert hunt_clock(running, NOW + timedelta(hours=2)) == "HUNT ENDED"
    assert hunt_clock(PhaseStatus(is_started=True, is_ended=True, end_time=NOW + timedelta(hours=1)), NOW) == "HUNT ENDED"
    assert hunt_clock(PhaseStatus(is_started=True), NOW) is None
