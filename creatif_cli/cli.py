"""Command-line entry point and interactive prompts.

Usage::

    creatif-cli
    creatif-cli -d my-app -n "My App" --starter
    python -m creatif_cli --yes -d my-app

Values not given as flags are asked for interactively.  Ctrl+C or EOF while
prompting exits with status 0 before anything is written.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from collections.abc import Callable
from pathlib import Path

from pydantic import ValidationError
from rich.panel import Panel
from rich.prompt import Confirm, Prompt

from creatif_cli.config import Config
from creatif_cli.scaffolder import ProjectGenerator, ProjectOptions, ScaffoldResult
from creatif_cli.utils import (
    console,
    format_duration,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)

MAX_PROJECT_NAME_LENGTH = 200


class InvalidOption(ValueError):
    """A flag value failed the same validation the prompts apply."""


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_app_directory(value: str, cwd: Path) -> str | None:
    """Return an error message, or ``None`` if *value* is usable.

    Blank means the current directory.  Otherwise the target must not exist
    yet or be an empty directory.
    """
    value = value.strip()
    if not value:
        return None
    target = cwd / value
    if target.is_dir() and not any(target.iterdir()):
        return None
    if target.exists():
        return f"{target} already exists. Choose another app directory."
    return None


def validate_project_name(value: str) -> str | None:
    """Return an error message, or ``None`` if *value* is usable."""
    if len(value) < 1 or len(value) > MAX_PROJECT_NAME_LENGTH:
        return f"Project name must have between 1 and {MAX_PROJECT_NAME_LENGTH} characters."
    return None


def default_project_name(app_directory: str, cwd: Path) -> str:
    """Project name used when the user leaves it blank."""
    app_directory = app_directory.strip()
    if app_directory:
        return Path(app_directory).name
    return cwd.name


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------


def _ask(question: str, validator: Callable[[str], str | None]) -> str:
    """Ask until *validator* accepts the answer."""
    while True:
        answer = Prompt.ask(question, default="", show_default=False, console=console)
        error = validator(answer)
        if error is None:
            return answer
        print_error(error)


def prompt_options(
    app_directory: str | None = None,
    project_name: str | None = None,
    has_starter_project: bool | None = None,
    *,
    cwd: Path | None = None,
    interactive: bool = True,
) -> ProjectOptions:
    """Collect ``ProjectOptions``, prompting for anything not supplied.

    Raises:
        InvalidOption: A supplied value is invalid.
        KeyboardInterrupt, EOFError: The user cancelled a prompt.
    """
    cwd = cwd or Path.cwd()

    if app_directory is None:
        if interactive:
            app_directory = _ask(
                "What is your app directory? [dim](blank for the current directory)[/dim]",
                lambda v: validate_app_directory(v, cwd),
            )
        else:
            app_directory = ""
    else:
        error = validate_app_directory(app_directory, cwd)
        if error:
            raise InvalidOption(error)
    app_directory = app_directory.strip()

    fallback = default_project_name(app_directory, cwd)
    if project_name is None:
        if interactive:
            project_name = _ask(
                f"What is your project name? [dim](blank for '{fallback}')[/dim]",
                lambda v: validate_project_name(v or fallback),
            )
        else:
            project_name = ""
    project_name = project_name.strip() or fallback
    error = validate_project_name(project_name)
    if error:
        raise InvalidOption(error)

    if has_starter_project is None:
        has_starter_project = interactive and Confirm.ask(
            "Would you like to include the starter project?", default=False, console=console
        )

    return ProjectOptions(
        app_directory=app_directory,
        project_name=project_name,
        has_starter_project=has_starter_project,
    )


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def print_intro() -> None:
    console.print(
        Panel(
            "[bold bright_cyan]Welcome to Creatif CLI project scaffolding[/bold bright_cyan]",
            border_style="bright_cyan",
        )
    )


def print_outro(options: ProjectOptions, config: Config) -> None:
    """Print the next steps after a successful run."""
    steps = []
    if options.app_directory:
        steps.append(f"cd into [blue]{options.app_directory}[/blue]")
    steps.append("Run [blue]docker compose up[/blue]")
    numbered = "\n".join(f"{i}. {step}" for i, step in enumerate(steps, start=1))

    console.print(
        Panel(
            f"[bold green]You are all set![/bold green]\n\n"
            f"Next steps:\n{numbered}\n\n"
            f"Creatif will be available on "
            f"[green]http://localhost:{config.server.frontend_port}[/green]\n\n"
            f"NOTE: the backend server can take longer to build than the frontend.\n"
            f"It is ready once you see\n\n"
            f"[yellow]⇨ http server started on [::]:{config.server.port}[/yellow]",
            title="[bold]Done[/bold]",
            border_style="green",
        )
    )


def print_failure(result: ScaffoldResult) -> None:
    failed = result.failed_stage
    reason = failed.error if failed else "unknown error"
    stage = failed.stage if failed else "?"
    print_error(f"Stage '{stage}' failed: {reason}")
    if result.rolled_back:
        print_warning(f"Removed the partially created project in {result.working_directory}.")
    elif failed and failed.stage != "prepare-directories":
        print_warning(f"Could not fully clean up {result.working_directory}; remove it manually.")
    print_error("This error is unrecoverable. Please, try again later.")


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="creatif-cli",
        description="Creatif CLI -- scaffold a Creatif frontend and backend",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  creatif-cli\n"
            "  creatif-cli -d my-app -n 'My App' --starter\n"
            "  creatif-cli --yes\n"
        ),
    )
    parser.add_argument(
        "--directory", "-d",
        default=None,
        help="App directory (blank or omitted with --yes: current directory)",
    )
    parser.add_argument(
        "--project-name", "-n",
        default=None,
        help="Project name (defaults to the app directory name)",
    )
    parser.add_argument(
        "--starter",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Include the starter project",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a JSON configuration file (default: environment)",
    )
    parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Do not prompt; use defaults for anything not given",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``creatif-cli`` and ``python -m creatif_cli``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = Config.load(Path(args.config)) if args.config else Config.from_env()
    except (OSError, ValidationError, ValueError) as exc:
        print_error(f"Invalid configuration: {exc}")
        sys.exit(1)

    print_intro()

    try:
        options = prompt_options(
            args.directory,
            args.project_name,
            args.starter,
            interactive=not args.yes,
        )
    except (KeyboardInterrupt, EOFError):
        console.print("\n[yellow]Operation cancelled.[/yellow]")
        sys.exit(0)
    except InvalidOption as exc:
        parser.error(str(exc))

    started = time.monotonic()
    result = asyncio.run(ProjectGenerator(options, config).create())

    if not result.success:
        print_failure(result)
        sys.exit(1)

    print_success("Project scaffolded.")
    print_summary_table(
        {
            "Project": options.project_name,
            "Directory": str(result.working_directory),
            "Starter project": "yes" if options.has_starter_project else "no",
            "Files written": str(len(result.written)),
            "Warnings": str(len(result.warnings)),
            "Duration": format_duration(time.monotonic() - started),
        },
        title="Scaffold Summary",
    )
    print_outro(options, config)


if __name__ == "__main__":
    main()
