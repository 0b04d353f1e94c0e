from __future__ import annotations
import asyncio
import typer
import structlog
from huntclient.config import settings
from huntclient.logging_setup import configure_logging
from huntclient.navigation import resolve
from huntclient.routes.admin import router as admin_router
from huntclient.routes.auth import router as auth_router
from huntclient.routes.bonus import router as bonus_router
from huntclient.routes.deps import client_context, console
from huntclient.routes.hunt import router as hunt_router
from huntclient.routes.leaderboard import router as leaderboard_router
from huntclient.services.timing import TimingResolver

log = structlog.get_logger()

app = typer.Typer(
    name="huntclient",
    help="Vault of the Multiverse scavenger hunt client",
    no_args_is_help=True,
)

app.add_typer(auth_router)
app.add_typer(hunt_router)
app.add_typer(leaderboard_router)
app.add_typer(bonus_router)
app.add_typer(admin_router)

NEXT_STEP = {
    "login": "huntclient auth login",
    "signup": "huntclient auth signup",
    "hunt": "huntclient hunt play",
    "leaderboard": "huntclient leaderboard show",
    "bonus1": "huntclient bonus play 1",
    "bonus2": "huntclient bonus play 2",
    "admin_login": "huntclient admin login",
    "admin_dashboard": "huntclient admin questions list",
    "countdown": "huntclient hunt timer",
}

@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")) -> None:
    configure_logging("DEBUG" if verbose else None)

@app.command("open")
def open_route(path: str = typer.Argument("/", help="Client path, e.g. /hunt")) -> None:
    """Resolve a client path through the login and countdown guards."""
    async def _resolve():
        async with client_context() as gw:
            status = None
            if not settings.dev_mode:
                status = await TimingResolver(gw, settings).resolve("main")
            return resolve(path, gw.store, status, settings.dev_mode)
    route = asyncio.run(_resolve())
    log.debug("route_resolved", requested=path, screen=route.screen)
    console.print(f"{route.path} -> [bold]{NEXT_STEP[route.screen]}[/bold]")

@app.command("version")
def version() -> None:
    console.print(f"{settings.app_name} {settings.app_version} ({settings.environment})")

if __name__ == "__main__":
    app()
