from __future__ import annotations
import os
from datetime import datetime
from pathlib import Path
from pydantic import BaseModel

def _env_time(name: str) -> datetime | None:
    raw = os.getenv(name, "").strip()
    return datetime.fromisoformat(raw) if raw else None

class Settings(BaseModel):
    environment: str = os.getenv("ENVIRONMENT", "dev")
    app_name: str = os.getenv("APP_NAME", "huntclient")
    app_version: str = os.getenv("APP_VERSION", "0.1.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    api_base_url: str = os.getenv("HUNT_API_URL", "http://localhost:5000/api")
    asset_base_url: str = os.getenv("HUNT_ASSET_URL", "http://localhost:5173")
    avatar_base_url: str = os.getenv("AVATAR_URL", "https://api.dicebear.com/9.x/lorelei/svg")
    # Explicit timeouts; the browser original relied on fetch defaults
    request_timeout_seconds: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))
    connect_timeout_seconds: float = float(os.getenv("CONNECT_TIMEOUT_SECONDS", "5"))
    session_path: Path = Path(os.getenv("HUNT_SESSION_PATH", str(Path.home() / ".huntclient" / "session.json")))

    # Pacing
    advance_delay_seconds: float = float(os.getenv("ADVANCE_DELAY_SECONDS", "2"))
    bonus_reset_delay_seconds: float = float(os.getenv("BONUS_RESET_DELAY_SECONDS", "3"))
    puzzle_hint_after_seconds: int = int(os.getenv("PUZZLE_HINT_AFTER_SECONDS", "420"))
    hints_path: Path | None = Path(os.environ["HINTS_PATH"]) if os.getenv("HINTS_PATH") else None

    # Leaderboard
    total_puzzles: int = int(os.getenv("TOTAL_PUZZLES", "16"))
    leaderboard_page_size: int = int(os.getenv("LEADERBOARD_PAGE_SIZE", "10"))
    leaderboard_poll_seconds: float = float(os.getenv("LEADERBOARD_POLL_SECONDS", "30"))

    # Timing. Static times are only consulted when use_server_timing is off.
    use_server_timing: bool = os.getenv("USE_SERVER_TIMING", "1") == "1"
    main_hunt_start: datetime | None = _env_time("MAIN_HUNT_START")
    main_hunt_end: datetime | None = _env_time("MAIN_HUNT_END")
    bonus1_start: datetime | None = _env_time("BONUS1_START")
    bonus2_start: datetime | None = _env_time("BONUS2_START")
    dev_mode: bool = os.getenv("HUNT_DEV_MODE", "0") == "1"

settings = Settings()
