"""Development environment CLI commands."""

import sys

import typer
from rich.panel import Panel

from .utils import console, run_command

dev_app = typer.Typer(help="🚀 Development environment commands")


@dev_app.command(name="start-server")
def start_server(
    host: str = typer.Option("0.0.0.0", help="Host to bind the server to"),
    port: int = typer.Option(8000, help="Port to bind the server to"),
    reload: bool = typer.Option(True, help="Enable auto-reload on code changes"),
    log_level: str = typer.Option(
        "info", help="Log level (debug, info, warning, error, critical)"
    ),
) -> None:
    """
    🚀 Start the FastAPI development server.
    """
    console.print(
        Panel.fit(
            "[bold green]Starting User API Development Server[/bold green]",
            border_style="green",
        )
    )

    cmd = [
        sys.executable,
        "-m",
        "uvicorn",
        "src.user_api.api.http.app:app",
        "--host",
        host,
        "--port",
        str(port),
        "--log-level",
        log_level,
    ]

    if reload:
        cmd.extend(["--reload", "--reload-dir", "src"])

    console.print(f"[blue]Running:[/blue] {' '.join(cmd)}")
    console.print(f"[blue]Server will be available at:[/blue] http://{host}:{port}")
    console.print("[dim]Press Ctrl+C to stop the server[/dim]")

    try:
        run_command(cmd)
    except KeyboardInterrupt:
        console.print("\n[yellow]Server stopped by user[/yellow]")


@dev_app.command(name="init-db")
def init_db_command() -> None:
    """🗄️  Create the user tables in the configured database."""
    from src.user_api.runtime.init_db import init_db

    init_db()
    console.print("[green]✅ Database tables created[/green]")
