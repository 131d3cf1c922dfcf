"""
copilot-commit: stage, describe, commit and push in one step

Key Features:
    - Stages every change in the working tree
    - Asks GitHub Copilot CLI (or a g4f chat model) for a commit message
    - Falls back to a message listing the changed files when no suggestion is available
    - Rewrites non-conforming suggestions into conventional commit format
    - Commits and pushes to the configured remote

Usage:
    Run inside a Git repository:
    $ copilot-commit

    The tool will:
    1. Check that the suggestion backend is available
    2. Run ``git add .``
    3. Summarize the staged changes with ``git diff --cached --name-status``
    4. Generate and normalize the commit message
    5. Commit and push
"""

__version__ = "1.0.0"

from .config import Config, default_config
from .conventional import enforce_conventional_commit, fallback_message
from .main import run

__all__ = [
    'Config',
    'default_config',
    'enforce_conventional_commit',
    'fallback_message',
    'run',
    '__version__',
]
