from __future__ import annotations
import asyncio
import typer
from rich.panel import Panel
from rich.table import Table
from huntclient.routes.deps import ask, client_context, console, print_errors, require_team, wait_until
from huntclient.services.bonus import BonusRoundFlow, BonusStep, BonusView

router = typer.Typer(name="bonus", help="Bonus rounds", no_args_is_help=True)

def render(view: BonusView, asset_base: str) -> None:
    console.rule(f"Bonus Round {view.round_id}")
    if view.message:
        console.print(f"[green]{view.message}[/green]")
    print_errors(view.error, {})
    if view.step == BonusStep.COUNTDOWN:
        start = view.status.start_time if view.status else None
        console.print(f"Bonus round starts at {start:%Y-%m-%d %H:%M}" if start else "Bonus round has not started yet.")
    elif view.step == BonusStep.LOCATION:
        console.print(Panel(view.location_hint or "Find the location and scan its QR code.", title="Location"))
    elif view.step == BonusStep.QUESTION:
        image = f"{asset_base.rstrip('/')}/{view.question_image}" if view.question_image else "Puzzle unavailable."
        console.print(Panel(image, title="Bonus Question"))
    elif view.step == BonusStep.LEADERBOARD:
        if not view.submissions:
            console.print("No submissions yet. Be the first to solve it!")
        else:
            table = Table(title=f"Bonus Round {view.round_id} - Winners", show_header=True, header_style="bold")
            table.add_column("#", justify="right")
            table.add_column("Leader")
            table.add_column("Team", style="green")
            table.add_column("Submitted")
            for i, s in enumerate(view.submissions, 1):
                table.add_row(str(i), s.leader_name, s.team_name, f"{s.submitted_at:%Y-%m-%d %H:%M:%S}")
            console.print(table)
    print_errors(None, view.field_errors)

async def _play(round_id: int) -> None:
    async with client_context() as gw:
        require_team(gw.store)
        flow = BonusRoundFlow(gw, round_id)
        view = await flow.enter()
        while True:
            render(view, flow.settings.asset_base_url)
            if view.step in (BonusStep.LEADERBOARD, BonusStep.LOADING):
                return
            if view.step == BonusStep.COUNTDOWN:
                start = view.status.start_time if view.status else None
                if start is None:
                    return
                await wait_until(start, "Bonus round starts in")
                view = await flow.start()
            elif view.step == BonusStep.LOCATION:
                code = (await ask("Location code (blank to quit)")).strip()
                if not code:
                    return
                view = await flow.submit_location(code)
            elif view.step == BonusStep.QUESTION:
                answer = (await ask("Answer (blank to quit)")).strip()
                if not answer:
                    return
                view = await flow.submit_answer(answer)
            elif view.step == BonusStep.WINNER:
                leader = await ask("Leader name")
                team = await ask("Team name")
                view = await flow.submit_winner(leader, team)
            else:
                view = await flow.reset_after_submission()

@router.command("play")
def play(round_id: int = typer.Argument(help="Bonus round: 1 or 2", min=1, max=2)) -> None:
    """Play a bonus round, or see its winners once it has ended."""
    asyncio.run(_play(round_id))
