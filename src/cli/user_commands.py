"""User management CLI commands working against the configured database."""

from collections.abc import Iterator
from contextlib import contextmanager

import typer
from rich.table import Table

from src.user_api.core.exceptions import InvalidInputError
from src.user_api.core.models.user_requests import CreateUserRequest
from src.user_api.core.services.database.db_session import DbSessionService
from src.user_api.core.services.user import UserLifecycleService
from src.user_api.entities.user import UserRepository

from .utils import console

users_app = typer.Typer(help="👤 Manage users stored in the database")


@contextmanager
def lifecycle_service() -> Iterator[UserLifecycleService]:
    """Lifecycle service over a database session that lives for one command."""
    db_service = DbSessionService()
    db_service.create_all()
    try:
        with db_service.session_scope() as session:
            yield UserLifecycleService(UserRepository(session))
    finally:
        db_service.dispose()


@users_app.command("list")
def list_users(
    page: int = typer.Option(1, "--page", "-p", help="Page number, starting at 1"),
    size: int = typer.Option(10, "--size", "-s", help="Users per page"),
) -> None:
    """List one page of users."""
    with lifecycle_service() as service:
        result = service.list(page, size)

    if not result.items:
        console.print("[yellow]No users found[/yellow]")
        return

    table = Table(
        title=f"Users (page {result.current_page} of {result.total_pages}, {result.total_count} total)"
    )
    table.add_column("ID", style="cyan")
    table.add_column("Login", style="green")
    table.add_column("First Name", style="magenta")
    table.add_column("Last Name", style="magenta")

    for user in result.items:
        table.add_row(user.id, user.login, user.first_name or "", user.last_name or "")

    console.print(table)


@users_app.command("create")
def create_user(
    login: str = typer.Argument(..., help="Letters-and-digits login"),
    first_name: str | None = typer.Option(None, "--first-name", "-f", help="First name"),
    last_name: str | None = typer.Option(None, "--last-name", "-l", help="Last name"),
) -> None:
    """Create a user and print its id."""
    request = CreateUserRequest(login=login, first_name=first_name, last_name=last_name)
    with lifecycle_service() as service:
        try:
            user, _ = service.create(request)
        except InvalidInputError as e:
            for field, message in e.as_dict().items():
                console.print(f"[red]❌ {field}: {message}[/red]")
            raise typer.Exit(code=1) from e

    console.print(f"[green]✅ Created user {user.login}[/green] [cyan]{user.id}[/cyan]")
