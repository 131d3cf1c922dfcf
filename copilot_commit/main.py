"""Stage, describe, commit and push.

The run is strictly sequential:

    1. check that the suggestion backend is reachable
    2. ``git add .``
    3. ``git diff --cached --name-status``
    4. ask the oracle for a message (fallback: list of changed files)
    5. force the message into conventional-commit form
    6. ``git commit -m`` and ``git push``

Any git failure stops the run with exit status 1. A failed suggestion only
switches to the fallback message.
"""

from typing import Optional

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .config import Config, default_config
from .conventional import (
    clean_suggestion,
    enforce_conventional_commit,
    fallback_message,
    parse_diff_summary,
)
from .oracle import Oracle, OracleError, build_prompt, get_oracle
from .utils import CommandError, CommandRunner, SubprocessRunner, console, err_console

__all__ = [
    "GitError",
    "stage_all",
    "get_diff_summary",
    "display_changes",
    "generate_commit_message",
    "do_commit",
    "do_push",
    "run",
]


class GitError(Exception):
    """Raised when one of the git steps fails."""

    def __init__(self, step: str, cause: CommandError) -> None:
        self.step = step
        self.cause = cause
        super().__init__(f"Error {step}: {cause}")


def stage_all(runner: CommandRunner) -> None:
    try:
        runner.run_silent("git", "add", ".")
    except CommandError as e:
        raise GitError("adding files to git", e) from e


def get_diff_summary(runner: CommandRunner) -> str:
    try:
        return runner.run_capture("git", "diff", "--cached", "--name-status")
    except CommandError as e:
        raise GitError("getting git diff", e) from e


def display_changes(changes: str) -> None:
    files = parse_diff_summary(changes)
    if not files:
        console.print("[yellow]No staged changes[/yellow]")
        return

    table = Table(title="Staged changes", show_header=True, header_style="bold")
    table.add_column("Status", style="cyan")
    table.add_column("File")
    for changed in files:
        table.add_row(changed.label, escape(changed.path))
    console.print(table)


def handle_error(oracle: Oracle, error: OracleError) -> None:
    console.print(f"[yellow]{oracle.name} error: {escape(str(error))}[/yellow]")
    console.print("[yellow]Using fallback message[/yellow]")


def generate_commit_message(oracle: Oracle, changes: str,
                            config: Optional[Config] = None) -> str:
    """Ask the oracle for a message, falling back to a file listing on failure."""
    config = config or default_config
    prompt = build_prompt(changes)
    try:
        message = clean_suggestion(oracle.suggest(prompt))
        if not message:
            raise OracleError("empty suggestion")
    except OracleError as e:
        handle_error(oracle, e)
        message = fallback_message(changes, config.max_files)
    return enforce_conventional_commit(message, changes)


def display_commit_preview(message: str) -> None:
    console.print(Panel(Text(message), title="Committing with message", border_style="cyan", expand=False))


def do_commit(runner: CommandRunner, message: str) -> None:
    try:
        runner.run_silent("git", "commit", "-m", message)
    except CommandError as e:
        raise GitError("committing changes", e) from e


def do_push(runner: CommandRunner) -> None:
    try:
        runner.run_silent("git", "push")
    except CommandError as e:
        raise GitError("pushing changes", e) from e


def run(config: Optional[Config] = None,
        runner: Optional[CommandRunner] = None,
        oracle: Optional[Oracle] = None) -> int:
    """Execute the whole workflow and return the process exit status."""
    config = config or default_config
    runner = runner or SubprocessRunner(verbose=config.verbose)
    oracle = oracle or get_oracle(config, runner)

    try:
        oracle.check_available()
    except OracleError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    try:
        stage_all(runner)
        changes = get_diff_summary(runner)
        display_changes(changes)

        console.print(f"[bold blue]Generating commit message with {oracle.name}...[/bold blue]")
        message = generate_commit_message(oracle, changes, config)

        display_commit_preview(message)
        do_commit(runner, message)

        if not config.push:
            console.print("[green]Changes committed (push skipped)[/green]")
            return 0

        do_push(runner)
    except GitError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        return 1

    console.print("[bold green]Changes pushed successfully![/bold green]")
    return 0
