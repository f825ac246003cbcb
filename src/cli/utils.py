"""Helpers shared by the CLI command groups."""

import subprocess
from pathlib import Path

import typer
from rich.console import Console

console = Console()

# src/cli/utils.py -> repository root
PROJECT_ROOT = Path(__file__).resolve().parents[2]


def run_command(command: list[str]) -> None:
    """Run ``command`` from the repository root and exit the CLI if it fails."""
    completed = subprocess.run(command, cwd=PROJECT_ROOT, text=True)
    if completed.returncode != 0:
        console.print(f"[red]`{' '.join(command)}` exited with {completed.returncode}[/red]")
        raise typer.Exit(completed.returncode)
