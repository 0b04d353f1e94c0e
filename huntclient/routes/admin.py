from __future__ import annotations
import asyncio
from datetime import datetime
from typing import Awaitable, Callable, TypeVar
import typer
from rich.table import Table
from huntclient.errors import HuntError, ValidationFailed
from huntclient.routes.deps import client_context, console, require_admin
from huntclient.schemas.admin import LocationForm, PhaseTiming, QuestionForm
from huntclient.services.admin import AdminConsole

T = TypeVar("T")

router = typer.Typer(name="admin", help="Admin console", no_args_is_help=True)
questions = typer.Typer(name="questions", help="Manage questions", no_args_is_help=True)
locations = typer.Typer(name="locations", help="Manage locations", no_args_is_help=True)
teams = typer.Typer(name="teams", help="Manage teams", no_args_is_help=True)
timing = typer.Typer(name="timing", help="Event timing", no_args_is_help=True)
router.add_typer(questions)
router.add_typer(locations)
router.add_typer(teams)
router.add_typer(timing)

def _run(op: Callable[[AdminConsole], Awaitable[T]], *, needs_login: bool = True) -> T:
    async def _go() -> T:
        async with client_context() as gw:
            if needs_login:
                require_admin(gw.store)
            return await op(AdminConsole(gw))
    try:
        return asyncio.run(_go())
    except ValidationFailed as e:
        for msg in e.field_errors.values():
            console.print(f"[red]{msg}[/red]")
        raise typer.Exit(1)
    except HuntError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

@router.command("login")
def login(password: str = typer.Option(..., "--password", "-p", prompt="Admin password", hide_input=True)) -> None:
    _run(lambda c: c.login(password), needs_login=False)
    console.print("[green]Admin logged in.[/green]")

@router.command("logout")
def logout() -> None:
    async def _out(c: AdminConsole) -> None:
        c.logout()
    _run(_out, needs_login=False)
    console.print("Admin logged out.")

@questions.command("list")
def questions_list() -> None:
    rows = _run(lambda c: c.list_questions())
    table = Table(title="Questions", show_header=True, header_style="bold")
    for col in ("ID", "Hint", "Code", "Question", "Answer"):
        table.add_column(col)
    for q in rows:
        table.add_row(str(q.id), q.hint, q.code, q.question, q.answer)
    console.print(table)

@questions.command("add")
def questions_add(
    hint: str = typer.Option(..., prompt=True),
    code: str = typer.Option(..., prompt="Location code"),
    question: str = typer.Option(..., prompt=True),
    answer: str = typer.Option(..., prompt=True),
) -> None:
    form = QuestionForm(hint=hint, code=code, question=question, answer=answer)
    q = _run(lambda c: c.add_question(form))
    console.print(f"Added question {q.id}")

@questions.command("update")
def questions_update(
    question_id: str,
    hint: str = typer.Option(..., prompt=True),
    code: str = typer.Option(..., prompt="Location code"),
    question: str = typer.Option(..., prompt=True),
    answer: str = typer.Option(..., prompt=True),
) -> None:
    form = QuestionForm(hint=hint, code=code, question=question, answer=answer)
    _run(lambda c: c.update_question(question_id, form))
    console.print(f"Updated question {question_id}")

@questions.command("delete")
def questions_delete(question_id: str, yes: bool = typer.Option(False, "--yes", "-y")) -> None:
    if not yes:
        typer.confirm("Are you sure you want to delete this question?", abort=True)
    _run(lambda c: c.delete_question(question_id))
    console.print(f"Deleted question {question_id}")

@locations.command("list")
def locations_list() -> None:
    rows = _run(lambda c: c.list_locations())
    table = Table(title="Locations", show_header=True, header_style="bold")
    for col in ("ID", "Name", "Code", "Hint"):
        table.add_column(col)
    for loc in rows:
        table.add_row(str(loc.id), loc.name, loc.code, loc.hint or "")
    console.print(table)

@locations.command("add")
def locations_add(
    name: str = typer.Option(..., prompt=True),
    code: str = typer.Option(..., prompt=True),
    hint: str = typer.Option(None),
) -> None:
    loc = _run(lambda c: c.add_location(LocationForm(name=name, code=code, hint=hint)))
    console.print(f"Added location {loc.id}")

@locations.command("update")
def locations_update(
    location_id: str,
    name: str = typer.Option(..., prompt=True),
    code: str = typer.Option(..., prompt=True),
    hint: str = typer.Option(None),
) -> None:
    _run(lambda c: c.update_location(location_id, LocationForm(name=name, code=code, hint=hint)))
    console.print(f"Updated location {location_id}")

@locations.command("delete")
def locations_delete(location_id: str, yes: bool = typer.Option(False, "--yes", "-y")) -> None:
    if not yes:
        typer.confirm("Are you sure you want to delete this location?", abort=True)
    _run(lambda c: c.delete_location(location_id))
    console.print(f"Deleted location {location_id}")

@teams.command("list")
def teams_list() -> None:
    rows = _run(lambda c: c.list_teams())
    table = Table(title="Teams", show_header=True, header_style="bold")
    for col in ("ID", "Team", "Score", "Completed locations"):
        table.add_column(col)
    for t in rows:
        table.add_row(str(t.id), t.team_name, str(t.score), str(t.completed_locations))
    console.print(table)

@teams.command("delete")
def teams_delete(team_id: str, yes: bool = typer.Option(False, "--yes", "-y")) -> None:
    if not yes:
        typer.confirm("Are you sure you want to delete this team?", abort=True)
    _run(lambda c: c.delete_team(team_id))
    console.print(f"Deleted team {team_id}")

@teams.command("reset")
def teams_reset(team_id: str, yes: bool = typer.Option(False, "--yes", "-y")) -> None:
    if not yes:
        typer.confirm("Are you sure you want to reset this team's progress?", abort=True)
    _run(lambda c: c.reset_team(team_id))
    console.print(f"Reset team {team_id}")

@router.command("regenerate")
def regenerate(yes: bool = typer.Option(False, "--yes", "-y")) -> None:
    """Regenerate every team's location sequence."""
    if not yes:
        typer.confirm("Regenerate all team sequences?", abort=True)
    _run(lambda c: c.regenerate_sequences())
    console.print("Sequences regenerated.")

@timing.command("show")
def timing_show() -> None:
    rows = _run(lambda c: c.get_timing())
    for phase, t in rows.items():
        console.print(f"{phase:7} start={t.start_time or '-'}  end={t.end_time or '-'}")

@timing.command("set")
def timing_set(
    phase: str = typer.Argument(help="main, bonus1 or bonus2"),
    start: datetime = typer.Option(None, "--start", formats=["%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M"]),
    end: datetime = typer.Option(None, "--end", formats=["%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M"]),
) -> None:
    t = _run(lambda c: c.set_timing(phase, PhaseTiming(start_time=start, end_time=end)))
    console.print(f"{phase}: start={t.start_time or '-'}  end={t.end_time or '-'}")

@router.command("end-bonus")
def end_bonus(round_id: int = typer.Argument(min=1, max=2)) -> None:
    _run(lambda c: c.end_bonus_round(round_id))
    console.print(f"Bonus round {round_id} ended.")
