from __future__ import annotations
import asyncio
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator
import typer
from rich.console import Console
from huntclient.config import Settings, settings
from huntclient.gateway import ApiGateway
from huntclient.services.ticker import RepeatingTask
from huntclient.services.timing import countdown_parts
from huntclient.session_store import SessionStore

console = Console()

@asynccontextmanager
async def client_context(cfg: Settings | None = None) -> AsyncIterator[ApiGateway]:
    cfg = cfg or settings
    store = SessionStore(cfg.session_path)
    async with ApiGateway(store, cfg) as gw:
        yield gw

def require_team(store: SessionStore) -> None:
    if store.current is None:
        console.print("[red]Not logged in.[/red] Run [bold]huntclient auth login[/bold] first.")
        raise typer.Exit(1)

def require_admin(store: SessionStore) -> None:
    if store.admin is None:
        console.print("[red]Admin login required.[/red] Run [bold]huntclient admin login[/bold] first.")
        raise typer.Exit(1)

async def ask(text: str, hide_input: bool = False, default: str = "") -> str:
    # Prompt off the event loop so running tickers keep ticking
    return await asyncio.to_thread(typer.prompt, text, default=default, hide_input=hide_input, show_default=False)

async def wait_until(target: datetime, label: str) -> None:
    def tick():
        cd = countdown_parts(target)
        if cd.expired:
            console.print()
            return False
        console.print(f"{label} {cd.label()}", end="\r")
    async with RepeatingTask(1.0, tick, name="countdown") as task:
        await task.wait()

def print_errors(error: str | None, field_errors: dict[str, str]) -> None:
    if error:
        console.print(f"[red]{error}[/red]")
    for msg in field_errors.values():
        console.print(f"[red]{msg}[/red]")
