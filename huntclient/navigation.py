from __future__ import annotations
from typing import Literal
from pydantic import BaseModel
from huntclient.schemas.hunt import PhaseStatus
from huntclient.session_store import SessionStore

Guard = Literal["public", "team", "admin"]

class Route(BaseModel):
    path: str
    screen: str
    guard: Guard = "public"

ROUTES: dict[str, Route] = {r.path: r for r in [
    Route(path="/login", screen="login"),
    Route(path="/signup", screen="signup"),
    Route(path="/hunt", screen="hunt", guard="team"),
    Route(path="/leaderboard", screen="leaderboard", guard="team"),
    Route(path="/bonus1", screen="bonus1"),
    Route(path="/bonus2", screen="bonus2"),
    Route(path="/admin/login", screen="admin_login"),
    Route(path="/admin/dashboard", screen="admin_dashboard", guard="admin"),
]}

COUNTDOWN = Route(path="/countdown", screen="countdown")

def resolve(
    path: str,
    store: SessionStore,
    main_status: PhaseStatus | None = None,
    dev_mode: bool = False,
    max_redirects: int = 5,
) -> Route:
    """
    Map a client path to the screen that should render.

    While the main hunt has not started (and dev mode is off) every path shows
    the countdown. Team routes need a session, the dashboard needs an admin
    token; `/` and unknown paths go to /login.
    """
    if main_status is not None and not main_status.is_started and not dev_mode:
        return COUNTDOWN
    for _ in range(max_redirects):
        route = ROUTES.get(path.rstrip("/") or "/")
        if route is None:
            path = "/login"
            continue
        if route.guard == "team" and store.current is None:
            path = "/login"
            continue
        if route.guard == "admin" and store.admin is None:
            path = "/admin/login"
            continue
        return route
    return ROUTES["/login"]
