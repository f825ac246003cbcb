"""Main CLI application module."""

import typer

from .dev_commands import dev_app
from .user_commands import users_app

app = typer.Typer(
    help="🛠️  User API CLI - development and user management",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(dev_app, name="dev")
app.add_typer(users_app, name="users")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
