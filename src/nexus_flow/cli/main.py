"""CLI commands for Nexus Flow using Typer."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, TextColumn
from rich.table import Table

from nexus_flow import __version__
from nexus_flow.core.config import get_config
from nexus_flow.schemas import FocusType

# Initialize Typer app
app = typer.Typer(
    name="nexus-flow",
    help="Personal productivity suite: tasks, inventory, finance and focus sessions.",
    add_completion=False,
)
config_app = typer.Typer(help="Show or save configuration.")
focus_app = typer.Typer(help="Run focus sessions against the API.")
app.add_typer(config_app, name="config")
app.add_typer(focus_app, name="focus")

console = Console()

NOTIFICATION_STYLES = {
    "info": "blue",
    "warning": "yellow",
    "critical": "bold red",
}


def setup_logging(log_level: str, log_file: Path | None = None) -> None:
    """Configure logging for the application."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )

    # Reduce noise from external libraries
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)


@app.command()
def serve(
    host: str = typer.Option(None, "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(None, "--port", "-p", help="Port to bind to"),
    log_level: str = typer.Option(None, "--log-level", "-l", help="Log level (DEBUG, INFO, WARNING, ERROR)"),
) -> None:
    """Run the REST API server."""
    from nexus_flow.web.app import run_server

    config = get_config()
    log_level = log_level or config.log_level
    setup_logging(log_level, config.log_dir / "server.log")

    host = host or config.web.host
    port = port or config.web.port

    console.print("[green]Starting Nexus Flow API...[/green]")
    console.print(f"Listening on [blue]http://{host}:{port}/api[/blue]")
    if config.docs_enabled:
        console.print(f"Docs at [blue]http://{host}:{port}/documentation[/blue]")
    console.print("Press Ctrl+C to stop\n")

    try:
        run_server(host=host, port=port, log_level=log_level.lower())
    except KeyboardInterrupt:
        console.print("\n[yellow]Server stopped[/yellow]")


@app.command(name="init-db")
def init_db() -> None:
    """Create the database tables."""
    from nexus_flow.storage.database import init_database

    config = get_config()
    config.ensure_directories()

    async def create():
        db = await init_database(config.db_url)
        ok = await db.check_connection()
        await db.close()
        return ok

    if asyncio.run(create()):
        console.print(f"[green]Database ready:[/green] {config.db_url}")
    else:
        console.print("[red]Database created but the connection check failed[/red]")
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"Nexus Flow v{__version__}")


@config_app.command("show")
def config_show() -> None:
    """Show current configuration."""
    config = get_config()

    table = Table(title="Nexus Flow Configuration", show_header=True, header_style="bold cyan")
    table.add_column("Setting")
    table.add_column("Value")

    table.add_row("Environment", config.environment)
    table.add_row("Log Level", config.log_level)

    # Paths
    table.add_row("[bold]Paths[/bold]", "")
    table.add_row("  Data Directory", str(config.data_dir))
    table.add_row("  Log Directory", str(config.log_dir))
    table.add_row("  Config File", str(config.config_file))
    table.add_row("  Database", config.db_url)

    # Web
    table.add_row("[bold]API Server[/bold]", "")
    table.add_row("  URL", f"http://{config.web.host}:{config.web.port}")
    table.add_row("  CORS Origins", ", ".join(config.web.cors_origins))
    table.add_row("  Docs", "enabled" if config.docs_enabled else "disabled")
    table.add_row("  Auth Secret", "***" if config.auth_secret else "[yellow]Not Set[/yellow]")

    # Client
    table.add_row("[bold]Client[/bold]", "")
    table.add_row("  API URL", config.client.api_url)
    table.add_row("  Token", "***" if config.client.token else "[yellow]Not Set[/yellow]")

    # Focus and notifications
    table.add_row("[bold]Focus[/bold]", "")
    table.add_row("  Default Length", f"{config.focus.default_minutes} min")
    table.add_row("  Tick", f"{config.focus.tick_seconds}s")
    table.add_row("[bold]Notifications[/bold]", "")
    table.add_row("  Due Soon", f"{config.notifications.due_soon_days} days")
    table.add_row(
        "  Expense Ratios",
        f"warn {config.notifications.expense_warning_ratio:.0%} / "
        f"critical {config.notifications.expense_critical_ratio:.0%}",
    )
    table.add_row("  Desktop", str(config.notifications.desktop_enabled))

    console.print(table)


@config_app.command("save")
def config_save(
    path: Path = typer.Option(None, "--path", help="Write to this file instead of the default"),
) -> None:
    """Write the effective configuration to YAML (secrets excluded)."""
    config = get_config()
    target = path or config.config_file
    config.save(target)
    console.print(f"[green]Configuration saved to[/green] {target}")


@focus_app.command("start")
def focus_start(
    duration: int = typer.Option(None, "--duration", "-d", help="Length in minutes"),
    focus_type: FocusType = typer.Option(FocusType.FOCUS, "--type", "-t", help="focus or break"),
    log_level: str = typer.Option("WARNING", "--log-level", "-l", help="Log level"),
) -> None:
    """Run a focus timer in the terminal. Ctrl+C stops it early and records the elapsed time."""
    from nexus_flow.client.api import ApiError
    from nexus_flow.client.controller import AppController
    from nexus_flow.client.focus import TimerState

    config = get_config()
    setup_logging(log_level)
    duration = duration or config.focus.default_minutes

    async def run_timer() -> None:
        controller = AppController.from_config(config)
        store = controller.focus
        done = asyncio.Event()

        try:
            session = await store.start(duration, focus_type)
        except ApiError as e:
            console.print(f"[red]Could not start session:[/red] {e}")
            await controller.close()
            raise typer.Exit(1)

        console.print(f"[green]{session.type.value.title()} session started[/green] ({duration} min)")
        console.print("Press Ctrl+C to stop\n")

        with Progress(
            TextColumn("[bold]{task.description}"),
            BarColumn(),
            TextColumn("{task.percentage:>3.0f}%"),
            console=console,
        ) as progress:
            bar = progress.add_task(store.time_left_display, total=100)

            def on_change(_store) -> None:
                progress.update(bar, completed=store.progress_percent, description=store.time_left_display)
                if store.state is TimerState.IDLE:
                    done.set()

            unsubscribe = store.subscribe(on_change)
            controller.start_monitoring()
            try:
                await done.wait()
                progress.update(bar, completed=100, description="00:00")
            except asyncio.CancelledError:
                recorded = await store.stop()
                if recorded is not None:
                    console.print(f"\n[yellow]Stopped early;[/yellow] recorded {recorded.duration} min")
            finally:
                unsubscribe()

        for notification in controller.notifications.notifications:
            console.print(f"[blue]{notification.title}[/blue]: {notification.message}")
        await controller.close()

    try:
        asyncio.run(run_timer())
    except KeyboardInterrupt:
        pass


@app.command()
def alerts() -> None:
    """Fetch tasks and transactions and list the resulting alerts."""
    from nexus_flow.client.controller import AppController

    config = get_config()

    async def collect():
        controller = AppController.from_config(config)
        try:
            await controller.load()
            errors = [
                store.error
                for store in (controller.tasks, controller.finance)
                if store.error
            ]
            return controller.notifications.notifications, errors
        finally:
            await controller.close()

    notifications, errors = asyncio.run(collect())
    for error in errors:
        console.print(f"[red]{error}[/red]")

    if not notifications:
        console.print("[green]No alerts[/green]")
        return

    table = Table(title="Alerts", show_header=True, header_style="bold cyan")
    table.add_column("Level")
    table.add_column("Category")
    table.add_column("Title")
    table.add_column("Message")

    for n in notifications:
        style = NOTIFICATION_STYLES[n.type.value]
        table.add_row(f"[{style}]{n.type.value}[/{style}]", n.category.value, n.title, n.message)

    console.print(table)


if __name__ == "__main__":
    app()
