from __future__ import annotations
import structlog
from huntclient.errors import ApiError
from huntclient.gateway import ApiGateway, parse_body
from huntclient.schemas.admin import (
    AdminLoginResponse, AdminQuestion, AdminTeam, Location, LocationForm, PhaseTiming, QuestionForm,
)
from huntclient.schemas.hunt import PHASES
from huntclient.services.validation import require, validate_location_form, validate_question_form

log = structlog.get_logger()

# Older timing payloads used "mainHunt" for the main phase
_TIMING_KEYS = {"mainHunt": "main", "main_hunt": "main"}

class AdminConsole:
    """Admin dashboard operations. Every request uses the admin token, never the team one."""

    def __init__(self, gateway: ApiGateway):
        self.gateway = gateway

    @property
    def logged_in(self) -> bool:
        return self.gateway.store.admin is not None

    async def login(self, password: str) -> None:
        require({"password": password}, {"password": "Password"})
        data = await self.gateway.post("/admin/login", json={"password": password}, auth="none")
        resp = parse_body(AdminLoginResponse, data)
        self.gateway.store.save_admin(resp.token)
        log.info("admin_login")

    def logout(self) -> None:
        self.gateway.store.clear_admin()

    async def _get(self, path: str):
        return await self.gateway.get(path, auth="admin")

    # questions
    async def list_questions(self) -> list[AdminQuestion]:
        return [parse_body(AdminQuestion, q) for q in await self._get("/admin/questions")]

    async def add_question(self, form: QuestionForm) -> AdminQuestion:
        validate_question_form(form.hint, form.code, form.question, form.answer)
        data = await self.gateway.post("/admin/questions", json=form.model_dump(), auth="admin")
        return parse_body(AdminQuestion, data)

    async def update_question(self, question_id: int | str, form: QuestionForm) -> AdminQuestion:
        validate_question_form(form.hint, form.code, form.question, form.answer)
        data = await self.gateway.put(f"/admin/questions/{question_id}", json=form.model_dump(), auth="admin")
        return parse_body(AdminQuestion, data)

    async def delete_question(self, question_id: int | str) -> None:
        await self.gateway.delete(f"/admin/questions/{question_id}", auth="admin")

    # locations
    async def list_locations(self) -> list[Location]:
        return [parse_body(Location, x) for x in await self._get("/admin/locations")]

    async def add_location(self, form: LocationForm) -> Location:
        validate_location_form(form.name, form.code)
        data = await self.gateway.post("/admin/locations", json=form.model_dump(), auth="admin")
        return parse_body(Location, data)

    async def update_location(self, location_id: int | str, form: LocationForm) -> Location:
        validate_location_form(form.name, form.code)
        data = await self.gateway.put(f"/admin/locations/{location_id}", json=form.model_dump(), auth="admin")
        return parse_body(Location, data)

    async def delete_location(self, location_id: int | str) -> None:
        await self.gateway.delete(f"/admin/locations/{location_id}", auth="admin")

    # teams
    async def list_teams(self) -> list[AdminTeam]:
        return [parse_body(AdminTeam, t) for t in await self._get("/admin/teams")]

    async def delete_team(self, team_id: int | str) -> None:
        await self.gateway.delete(f"/admin/teams/{team_id}", auth="admin")

    async def reset_team(self, team_id: int | str) -> None:
        await self.gateway.post(f"/admin/teams/{team_id}/reset", auth="admin")

    async def regenerate_sequences(self) -> dict:
        return await self.gateway.post("/admin/sequences/regenerate", auth="admin")

    # timing
    async def get_timing(self) -> dict[str, PhaseTiming]:
        data = await self._get("/admin/timing")
        if not isinstance(data, dict):
            raise ApiError(200, "Unexpected timing response")
        out: dict[str, PhaseTiming] = {}
        for key, val in data.items():
            phase = _TIMING_KEYS.get(key, key)
            if phase in PHASES and isinstance(val, dict):
                out[phase] = parse_body(PhaseTiming, val)
        return out

    async def set_timing(self, phase: str, timing: PhaseTiming) -> PhaseTiming:
        if phase not in PHASES:
            raise ValueError(f"unknown phase: {phase}")
        if timing.start_time and timing.end_time and timing.end_time <= timing.start_time:
            raise ValueError("endTime must be after startTime")
        data = await self.gateway.put(f"/admin/timing/{phase}", json=timing.to_wire(), auth="admin")
        return parse_body(PhaseTiming, data) if data else timing

    async def end_bonus_round(self, round_id: int) -> dict:
        return await self.gateway.post(f"/bonus/{round_id}/end", auth="admin")
