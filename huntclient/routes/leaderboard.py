from __future__ import annotations
import asyncio
import typer
from rich.table import Table
from huntclient.config import settings
from huntclient.routes.deps import client_context, console, require_team
from huntclient.schemas.leaderboard import LeaderboardEntry, MainBoard
from huntclient.services.leaderboard import LeaderboardViewer, status_text

router = typer.Typer(name="leaderboard", help="Team standings", no_args_is_help=True)

def render_board(board: MainBoard) -> None:
    if board.error:
        console.print(f"[red]{board.error}[/red]")
    if not board.revealed:
        console.print("[yellow]Rankings are revealed when the hunt ends.[/yellow]")
        if board.own:
            rank = f"#{board.own.rank}" if board.own.rank else "-"
            console.print(f"Your team: {rank}  score {board.own.score}")
        return
    if board.page is None:
        return
    stats = board.stats
    if stats:
        console.print(f"Active teams: {stats.active_teams}   Completed: {stats.completed}   Total puzzles: {stats.total_puzzles}")
    if not board.page.teams:
        console.print("No teams found. Be the first to start the adventure!")
        return
    table = Table(title="Team Rankings", show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Team", style="green", min_width=15)
    table.add_column("Score", justify="right")
    table.add_column("Status")
    table.add_column("Last solve")
    total = stats.total_puzzles if stats else settings.total_puzzles
    for t in board.page.teams:
        last = f"{t.last_solve_time:%H:%M:%S}" if t.last_solve_time else "--"
        table.add_row(str(t.rank), t.team_name, str(t.score), status_text(t.score, total), last)
    console.print(table)
    p = board.page.pagination
    console.print(f"Page {p.current_page}/{p.total_pages} ({p.total_teams} teams)")

@router.command("show")
def show(
    page: int = typer.Option(1, "--page", min=1),
    size: int = typer.Option(None, "--size", min=1, help="Teams per page"),
) -> None:
    """Show the main-hunt leaderboard."""
    async def _show() -> None:
        async with client_context() as gw:
            require_team(gw.store)
            board = await LeaderboardViewer(gw).main_board(gw.store.current.team_name, page, size)
        render_board(board)
    asyncio.run(_show())

@router.command("watch")
def watch(interval: float = typer.Option(None, "--interval", min=0, help="Seconds between refreshes")) -> None:
    """Poll the leaderboard until interrupted."""
    async def _watch() -> None:
        async with client_context() as gw:
            require_team(gw.store)
            viewer = LeaderboardViewer(gw)
            team = gw.store.current.team_name

            async def tick():
                console.clear()
                render_board(await viewer.main_board(team))

            async with viewer.poll(tick, interval) as task:
                await task.wait()
    try:
        asyncio.run(_watch())
    except KeyboardInterrupt:
        pass

@router.command("team")
def team(
    team_id: str = typer.Argument(help="Team id from the leaderboard"),
    score: int = typer.Option(1, "--score", help="Team score; 0 skips the lookup"),
) -> None:
    """Per-question solve history for one team."""
    async def _team() -> None:
        async with client_context() as gw:
            require_team(gw.store)
            entry = LeaderboardEntry(id=team_id, team_name=team_id, score=score)
            history = await LeaderboardViewer(gw).team_history(entry)
        if history.status == "no_progress":
            console.print("No solves yet.")
        elif history.status == "error":
            console.print(f"[red]{history.error}[/red]")
        else:
            for s in history.solves:
                console.print(f"Q{s.question_number}  {s.solved_at:%H:%M:%S}")
    asyncio.run(_team())
