"""NusaDana CLI.

Commands:
- init: Initialize database schema
- web serve: Run the HTTP API
- report lpj: Print a project's LPJ accountability report
- metrics: Show month-bucketed project metrics
- client login|register|projects|add-project|logout: Talk to a running API
"""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from nusadana.client import (
    ApiClient,
    ApiError,
    ProjectStore,
    display_projects,
    format_rupiah,
    prioritized,
)
from nusadana.config import get_config
from nusadana.db.connection import Database
from nusadana.reporting.lpj import build_lpj_report
from nusadana.reporting.metrics import compute_projects_by_month

app = typer.Typer(
    name="nusadana",
    help="NusaDana - Village infrastructure projects and fund accountability",
    no_args_is_help=True,
)

web_cli = typer.Typer(help="Web API")
app.add_typer(web_cli, name="web")

report_cli = typer.Typer(help="Reports")
app.add_typer(report_cli, name="report")

client_cli = typer.Typer(help="Client for a running NusaDana API")
app.add_typer(client_cli, name="client")

console = Console()


@app.command()
def init(
    drop: bool = typer.Option(False, "--drop", help="Drop existing tables"),
):
    """Initialize database schema."""
    config = get_config()
    console.print(f"[bold]Initializing database:[/bold] {config.db.url}")

    async def _init():
        db = Database(config.db)
        try:
            if drop:
                console.print("[yellow]Dropping existing tables...[/yellow]")
            console.print("[green]Creating tables...[/green]")
            await db.create_all(drop=drop)
        finally:
            await db.dispose()

    asyncio.run(_init())
    console.print("[bold green]✓[/bold green] Database initialized")


@web_cli.command("serve")
def web_serve(
    host: str | None = typer.Option(None, help="Host to bind (default: HOST or 0.0.0.0)"),
    port: int | None = typer.Option(None, help="Port to bind (default: PORT or 3000)"),
    reload: bool = typer.Option(False, help="Enable autoreload (dev only)"),
):
    """Run the FastAPI application."""
    import uvicorn

    config = get_config()
    host = host or config.server.host
    port = port or config.server.port

    typer.echo(f"Starting NusaDana API on http://{host}:{port}")
    uvicorn.run(
        "nusadana.web.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        workers=1,
    )


@report_cli.command("lpj")
def report_lpj(
    project_id: int = typer.Argument(..., help="Project ID"),
):
    """Print the LPJ report for one project."""
    config = get_config()

    async def _report():
        db = Database(config.db)
        try:
            async with db.session() as session:
                report = await build_lpj_report(session, project_id)
                if report is None:
                    console.print(f"[red]Project {project_id} not found[/red]")
                    raise typer.Exit(code=1)

                project = report.project
                funds = report.funds
                console.print(f"\n[bold]LPJ:[/bold] {project.title} ({project.status})")
                console.print(f"  Location: {project.location or '-'}")
                console.print(f"  Estimated budget: {format_rupiah(project.estimated_budget)}")

                table = Table(title="Funds")
                table.add_column("Date", style="cyan")
                table.add_column("Kind")
                table.add_column("Description")
                table.add_column("Amount", justify="right", style="green")
                for d in report.disbursements:
                    table.add_row(
                        str(d.date_received), "IN", d.phase or d.source_of_fund or "-",
                        format_rupiah(d.amount),
                    )
                for e in report.expenses:
                    table.add_row(
                        str(e.date_spent), "OUT", e.description or "-",
                        format_rupiah(e.amount_spent),
                    )
                console.print(table)

                console.print(f"  Total disbursed: {format_rupiah(funds.total_disbursed)}")
                console.print(f"  Total spent: {format_rupiah(funds.total_spent)}")
                console.print(f"  Remaining: {format_rupiah(funds.remaining)}")
                if report.latest_completion is not None:
                    console.print(f"  Completion: {report.latest_completion}%")
                console.print(
                    f"  Progress updates: {len(report.progress)}, feedback: {len(report.feedback)}"
                )
        finally:
            await db.dispose()

    asyncio.run(_report())


@app.command()
def metrics():
    """Show projects, budget and spending per month."""
    config = get_config()

    async def _metrics():
        db = Database(config.db)
        try:
            async with db.session() as session:
                buckets = await compute_projects_by_month(session)
        finally:
            await db.dispose()

        if not buckets:
            console.print("[yellow]No projects yet[/yellow]")
            return

        table = Table(title="Projects by Month")
        table.add_column("Month", style="cyan")
        table.add_column("Projects", justify="right")
        table.add_column("Funds In", justify="right", style="green")
        table.add_column("Funds Out", justify="right", style="red")
        for month, bucket in buckets.items():
            table.add_row(
                month,
                str(bucket.projects),
                format_rupiah(bucket.funds_in),
                format_rupiah(bucket.funds_out),
            )
        console.print(table)

    asyncio.run(_metrics())


# ============================================================================
# Client commands
# ============================================================================


def _fail(e: ApiError) -> None:
    console.print(f"[red]Error:[/red] {e.message}")
    raise typer.Exit(code=1)


@client_cli.command("login")
def client_login(
    email: str = typer.Option(..., prompt=True),
    password: str = typer.Option(..., prompt=True, hide_input=True),
):
    """Log in and remember the token."""
    with ApiClient() as api:
        try:
            user = api.login(email, password)
        except ApiError as e:
            _fail(e)
    console.print(f"[green]✓[/green] Logged in as {user['name']} ({user['role']})")


@client_cli.command("register")
def client_register(
    name: str = typer.Option(..., prompt=True),
    email: str = typer.Option(..., prompt=True),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
    role: str = typer.Option("villager", help="villager or official"),
):
    """Create an account and remember the token."""
    with ApiClient() as api:
        try:
            user = api.register(name, email, password, role)
        except ApiError as e:
            _fail(e)
    console.print(f"[green]✓[/green] Registered {user['email']}")


@client_cli.command("logout")
def client_logout():
    """Forget the stored token."""
    with ApiClient() as api:
        api.logout()
    console.print("Logged out")


@client_cli.command("projects")
def client_projects(
    completed_only: bool = typer.Option(
        False, "--completed-only", help="Only list completed projects"
    ),
):
    """Show the project list and the priority ranking."""
    with ApiClient() as api:
        store = ProjectStore(api)
        store.refresh()

    if store.error:
        console.print(f"[red]Error:[/red] {store.error}")
        raise typer.Exit(code=1)

    shown = display_projects(store.projects, completed_only=completed_only)

    table = Table(title="Daftar Projek")
    table.add_column("Projek", style="cyan")
    table.add_column("Lokasi")
    table.add_column("Dana", justify="right")
    table.add_column("Status")
    if not shown:
        table.add_row("Belum ada projek", "", "", "")
    for p in shown:
        budget = p.get("estimated_budget")
        status_style = "green" if p.get("status") == "completed" else "yellow"
        table.add_row(
            p["title"],
            p.get("location") or "",
            format_rupiah(budget) if budget else "-",
            f"[{status_style}]{p.get('status')}[/{status_style}]",
        )
    console.print(table)

    ranked = prioritized(shown)
    ranking = Table(title="Prioritisasi")
    ranking.add_column("Rank", justify="right", style="bold")
    ranking.add_column("Projek")
    ranking.add_column("Dana", justify="right")
    if not ranked:
        ranking.add_row("", "Belum ada prioritisasi", "")
    for p in ranked:
        ranking.add_row(str(p["priority"]), p["title"], format_rupiah(p.get("estimated_budget")))
    console.print(ranking)


@client_cli.command("add-project")
def client_add_project(
    title: str = typer.Option(..., prompt=True),
    description: str = typer.Option("", help="Project description"),
    location: str = typer.Option("", help="Village or site"),
    dana: str = typer.Option("0", "--dana", help="Estimated budget in Rupiah"),
):
    """Propose a new project."""
    with ApiClient() as api:
        store = ProjectStore(api)
        try:
            created = store.add_project(
                {"title": title, "description": description, "location": location, "dana": dana}
            )
        except ApiError as e:
            console.print("[red]Failed to save project to database.[/red]")
            _fail(e)
    console.print(
        f"[green]✓[/green] Project #{created['id']} created "
        f"({format_rupiah(created.get('estimated_budget'))}, {created['status']})"
    )


if __name__ == "__main__":
    app()
