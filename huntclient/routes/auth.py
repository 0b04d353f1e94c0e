from __future__ import annotations
import asyncio
import typer
from huntclient.config import settings
from huntclient.errors import HuntError
from huntclient.routes.deps import client_context, console, print_errors
from huntclient.services.auth import AuthService
from huntclient.services.avatar import avatar_choices, avatar_url, update_avatar
from huntclient.session_store import SessionStore

router = typer.Typer(name="auth", help="Team login, signup and session", no_args_is_help=True)

async def _login(team_name: str, password: str) -> bool:
    async with client_context() as gw:
        result = await AuthService(gw).login(team_name, password)
    print_errors(result.error, result.field_errors)
    return result.success

async def _signup(team_name: str, password: str, confirm: str) -> bool:
    async with client_context() as gw:
        result = await AuthService(gw).signup(team_name, password, confirm)
    print_errors(result.error, result.field_errors)
    return result.success

@router.command("login")
def login(
    team_name: str = typer.Option(..., "--team", "-t", prompt="Team name"),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True),
) -> None:
    """Sign in to an existing team."""
    if not asyncio.run(_login(team_name, password)):
        raise typer.Exit(1)
    console.print(f"[green]Welcome back, {team_name}![/green] Next: [bold]huntclient hunt play[/bold]")

@router.command("signup")
def signup(
    team_name: str = typer.Option(..., "--team", "-t", prompt="Team name"),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True, confirmation_prompt=False),
    confirm: str = typer.Option(..., "--confirm", prompt="Confirm password", hide_input=True),
) -> None:
    """Create a new team."""
    if not asyncio.run(_signup(team_name, password, confirm)):
        raise typer.Exit(1)
    console.print(f"[green]Team {team_name} created.[/green] Next: [bold]huntclient hunt play[/bold]")

@router.command("logout")
def logout() -> None:
    """Forget the stored team session."""
    SessionStore(settings.session_path).clear()
    console.print("Logged out.")

@router.command("whoami")
def whoami() -> None:
    session = SessionStore(settings.session_path).current
    if session is None:
        console.print("Not logged in.")
        raise typer.Exit(1)
    console.print(f"Team: [bold]{session.team_name}[/bold]")

@router.command("avatar")
def avatar(seed: str = typer.Option(None, "--seed", help="Use this seed instead of choosing")) -> None:
    """Pick a team avatar."""
    if seed is None:
        options = avatar_choices()
        for i, s in enumerate(options, 1):
            console.print(f"{i}. {s}  [dim]{avatar_url(s)}[/dim]")
        pick = typer.prompt("Choose", type=typer.IntRange(1, len(options)))
        seed = options[pick - 1]

    async def _update() -> None:
        async with client_context() as gw:
            await update_avatar(gw, seed)

    try:
        asyncio.run(_update())
    except HuntError as e:
        console.print(f"[red]Failed to update avatar: {e}[/red]")
        raise typer.Exit(1)
    console.print(f"Avatar set to [bold]{seed}[/bold]")
