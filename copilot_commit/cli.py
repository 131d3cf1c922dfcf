#!/usr/bin/env python3
"""
copilot-commit CLI Interface

This module provides a command-line interface for copilot-commit, allowing users
to customize the commit process through command-line arguments.

Usage:
    copilot-commit [options]

Options:
    -p, --path PATH       Specify the repository path (default: current directory)
    -o, --oracle NAME     Suggestion backend: copilot or g4f (default: copilot)
    -m, --model MODEL     Model used by the g4f backend (default: gpt-4o-mini)
    --no-push             Commit without pushing
    --max-files INT       Files listed in the fallback message (default: 5)
    --no-color            Disable colored output
    -v, --verbose         Show the commands being run and full tracebacks
    --version             Show version information
"""

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from . import __version__, main, utils
from .config import Config


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="copilot-commit",
        description="Stage all changes, commit them with an AI-suggested "
                    "conventional commit message and push.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-p", "--path",
        type=str,
        default=".",
        help="Path to the Git repository (default: current directory)"
    )

    parser.add_argument(
        "-o", "--oracle",
        type=str,
        default="copilot",
        choices=Config.ORACLES,
        help="Backend that suggests the commit message (default: copilot)"
    )

    parser.add_argument(
        "-m", "--model",
        type=str,
        default="gpt-4o-mini",
        help="Model used by the g4f backend (default: gpt-4o-mini)"
    )

    parser.add_argument(
        "--no-push",
        action="store_true",
        help="Commit without pushing"
    )

    parser.add_argument(
        "--max-files",
        type=int,
        default=5,
        help="Number of changed files listed in the fallback message (default: 5)"
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Show version information"
    )

    return parser


def validate_path(path: str) -> Optional[Path]:
    """Validate the repository path."""
    repo_path = Path(path).resolve()
    if not repo_path.exists():
        utils.err_console.print(f"Error: Path does not exist: {repo_path}", markup=False)
        return None

    git_dir = repo_path / ".git"
    if not git_dir.exists():
        utils.err_console.print(f"Error: Not a git repository: {repo_path}", markup=False)
        return None

    return repo_path


def create_config_from_args(args: argparse.Namespace) -> Config:
    return Config(
        oracle=args.oracle,
        model=args.model,
        push=not args.no_push,
        max_files=args.max_files,
        verbose=args.verbose,
    )


def configure_environment(args: argparse.Namespace) -> None:
    """Configure the consoles based on command-line arguments."""
    if args.no_color:
        main.console = utils.console = Console(no_color=True, highlight=False)
        main.err_console = utils.err_console = Console(stderr=True, no_color=True, highlight=False)


def main_cli(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_environment(args)

    try:
        config = create_config_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    repo_path = validate_path(args.path)
    if not repo_path:
        return 1

    original_cwd = os.getcwd()
    os.chdir(repo_path)

    try:
        return main.run(config)
    except KeyboardInterrupt:
        utils.err_console.print("\nOperation cancelled by user")
        return 130
    except Exception as e:
        if args.verbose:
            raise
        utils.err_console.print(f"Error: {str(e)}", markup=False)
        return 1
    finally:
        os.chdir(original_cwd)


if __name__ == "__main__":
    sys.exit(main_cli())
