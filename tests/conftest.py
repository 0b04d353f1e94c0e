import pytest

from huntclient.config import Settings
from tests.fake_backend import HuntState


@pytest.fixture
def state():
    return HuntState()


@pytest.fixture
def cfg(tmp_path):
    return Settings(
        api_base_url="http://test",
        session_path=tmp_path / "session.json",
        advance_delay_seconds=2,
        bonus_reset_delay_seconds=3,
        use_server_timing=True,
        dev_mode=False,
        hints_path=None,
        total_puzzles=10,
    )


@pytest.fixture
def sleeps():
    calls = []

    async def fake_sleep(seconds):
        calls.append(seconds)

    fake_sleep.calls = calls
    return fake_sleep
