from __future__ import annotations
import asyncio
import typer
from rich.panel import Panel
from huntclient.config import settings
from huntclient.routes.deps import ask, client_context, console, print_errors, require_team, wait_until
from huntclient.services.flow import HuntFlow, HuntView, Screen
from huntclient.services.puzzle_hints import format_clock
from huntclient.services.timing import TimingResolver, hunt_clock

router = typer.Typer(name="hunt", help="Play the main hunt", no_args_is_help=True)

def render(view: HuntView, flow: HuntFlow) -> None:
    header = f"Team: {view.team_name or '?'}"
    if view.progress:
        header += f"   Question {view.question_number}/{view.progress.total}"
    if view.status and (clock := hunt_clock(view.status)):
        header += f"   {clock}"
    console.rule(header)
    if view.message:
        console.print(f"[green]{view.message}[/green]")
    print_errors(view.error, {})

    if view.screen == Screen.COUNTDOWN:
        start = view.status.start_time if view.status else None
        console.print(Panel(f"The hunt begins at {start:%Y-%m-%d %H:%M}" if start else "The hunt has not started yet.", title="Countdown"))
    elif view.screen == Screen.LOCATION:
        console.print(Panel(view.hint or "Loading hint...", title="Current Location"))
    elif view.screen == Screen.QUESTION:
        q = view.question
        if q is not None and q.kind == "image":
            body = f"Puzzle image: {q.asset_url(flow.settings.asset_base_url)}"
        elif q is not None and q.kind == "link":
            body = f"Click here to solve the puzzle: {q.link}"
        else:
            body = (q.text if q else None) or "Puzzle unavailable."
        console.print(Panel(body, title="Answer the Puzzle"))
        if view.puzzle_hint:
            console.print(Panel(view.puzzle_hint.hint, title="Hint Available!", border_style="yellow"))
        else:
            console.print(f"[dim]Hint unlocks in {format_clock(flow.hint_timer.time_until_hint)}[/dim]")
    elif view.screen in (Screen.COMPLETED, Screen.ENDED):
        console.print(Panel(view.message or "", title="Adventure Status", border_style="green"))
        console.print("See the standings with [bold]huntclient leaderboard show[/bold]")
    print_errors(None, view.field_errors)

async def _play() -> None:
    async with client_context() as gw:
        require_team(gw.store)
        flow = HuntFlow(gw)
        try:
            view = await flow.enter()
            while True:
                render(view, flow)
                if view.redirect:
                    console.print(f"Go to {view.redirect}: [bold]huntclient auth login[/bold]")
                    return
                if view.screen in (Screen.COMPLETED, Screen.ENDED):
                    return
                if view.screen == Screen.WINNER:
                    view = await flow.advance()
                elif view.screen == Screen.COUNTDOWN:
                    start = view.status.start_time if view.status else None
                    if start is None:
                        return
                    await wait_until(start, "The hunt begins in")
                    view = await flow.enter()
                elif view.screen == Screen.LOADING:
                    if not (await ask("Retry? [y/N]")).lower().startswith("y"):
                        return
                    view = await flow.enter()
                elif view.screen == Screen.LOCATION:
                    code = (await ask("Location code (blank to quit)")).strip()
                    if not code:
                        return
                    view = await flow.submit_code(code)
                else:
                    answer = (await ask("Answer (:code CODE to rescan, blank to quit)")).strip()
                    if not answer:
                        return
                    if answer.startswith(":code "):
                        view = await flow.submit_code(answer[6:])
                    else:
                        view = await flow.submit_answer(answer)
        finally:
            await flow.close()

@router.command("play")
def play() -> None:
    """Interactive hunt: read the hint, enter the scanned code, solve the puzzle."""
    asyncio.run(_play())

@router.command("status")
def status() -> None:
    """Show the current screen once, without prompting."""
    async def _status() -> None:
        async with client_context() as gw:
            require_team(gw.store)
            flow = HuntFlow(gw)
            try:
                render(await flow.enter(), flow)
            finally:
                await flow.close()
    asyncio.run(_status())

@router.command("timer")
def timer() -> None:
    """Time left in the main hunt."""
    async def _timer() -> None:
        async with client_context() as gw:
            st = await TimingResolver(gw, settings).resolve("main")
        clock = hunt_clock(st)
        console.print(clock or "No end time announced.")
    asyncio.run(_timer())
