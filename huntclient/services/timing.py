from __future__ import annotations
from datetime import datetime, timezone
from typing import Callable
import structlog
from pydantic import BaseModel
from huntclient.config import Settings, settings as default_settings
from huntclient.errors import HuntError
from huntclient.gateway import ApiGateway
from huntclient.schemas.hunt import PHASES, PhaseStatus

log = structlog.get_logger()

STATUS_PATHS = {
    "main": "/hunt/status",
    "bonus1": "/bonus/1/status",
    "bonus2": "/bonus/2/status",
}

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

def as_aware(dt: datetime) -> datetime:
    """Naive timestamps are wall-clock times of this machine, as a browser would read them."""
    return dt if dt.tzinfo is not None else dt.astimezone()

class Countdown(BaseModel):
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    expired: bool = False

    def label(self) -> str:
        return f"{self.days}d {self.hours:02d}:{self.minutes:02d}:{self.seconds:02d}"

def countdown_parts(target: datetime, now: datetime | None = None) -> Countdown:
    """
    Break the time left until `target` into days/hours/minutes/seconds.

    Examples:
        >>> from datetime import datetime, timezone
        >>> now = datetime(2025, 9, 30, 12, 0, tzinfo=timezone.utc)
        >>> countdown_parts(datetime(2025, 10, 1, 13, 30, 5, tzinfo=timezone.utc), now)
        Countdown(days=1, hours=1, minutes=30, seconds=5, expired=False)
    """
    now = now or utcnow()
    diff = (as_aware(target) - as_aware(now)).total_seconds()
    if diff <= 0:
        return Countdown(expired=True)
    total = int(diff)
    return Countdown(
        days=total // 86400,
        hours=(total % 86400) // 3600,
        minutes=(total % 3600) // 60,
        seconds=total % 60,
    )

def format_remaining(seconds: float | None) -> str:
    if not seconds or seconds <= 0:
        return "00:00:00"
    total = int(seconds)
    return f"{total // 3600:02d}:{(total % 3600) // 60:02d}:{total % 60:02d}"

def hunt_clock(status: PhaseStatus, now: datetime | None = None) -> str | None:
    """Text for the running hunt timer, or None when no end time is known."""
    if status.end_time is None:
        return None
    now = now or utcnow()
    remaining = (as_aware(status.end_time) - as_aware(now)).total_seconds()
    if status.is_ended or remaining <= 0:
        return "HUNT ENDED"
    return format_remaining(remaining)

class TimingResolver:
    """
    Decides whether a phase (main, bonus1, bonus2) has started or ended.

    The server is asked first. Any failure degrades to "not started" so no
    puzzle content leaks on error. Configured static start times are used
    only when server timing is switched off, never to override a response.
    """

    def __init__(self, gateway: ApiGateway | None, cfg: Settings | None = None, clock: Callable[[], datetime] = utcnow):
        self.gateway = gateway
        self.settings = cfg or default_settings
        self.clock = clock

    async def resolve(self, phase: str) -> PhaseStatus:
        if phase not in PHASES:
            raise ValueError(f"unknown phase: {phase}")
        if not self.settings.use_server_timing or self.gateway is None:
            return self.static_status(phase)
        try:
            data = await self.gateway.get(STATUS_PATHS[phase])
            status = PhaseStatus.model_validate(data)
        except HuntError as e:
            log.warning("phase_status_failed", phase=phase, error=str(e))
            return PhaseStatus.not_started()
        except ValueError as e:
            log.warning("phase_status_invalid", phase=phase, error=str(e))
            return PhaseStatus.not_started()
        return status

    def static_status(self, phase: str) -> PhaseStatus:
        start, end = self._static_times(phase)
        if start is None:
            return PhaseStatus(is_started=False, is_ended=False, source="static")
        now = self.clock()
        started = as_aware(now) >= as_aware(start)
        ended = end is not None and as_aware(now) >= as_aware(end)
        return PhaseStatus(is_started=started, is_ended=ended, start_time=start, end_time=end, source="static")

    def _static_times(self, phase: str) -> tuple[datetime | None, datetime | None]:
        s = self.settings
        if phase == "main":
            return s.main_hunt_start, s.main_hunt_end
        if phase == "bonus1":
            return s.bonus1_start, None
        return s.bonus2_start, None
