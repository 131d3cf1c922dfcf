"""Commit message suggestion backends.

An oracle turns a prompt into a suggested commit message. The default backend
pipes the prompt into the GitHub Copilot CLI; the g4f backend asks a chat model.
"""

import shlex
from abc import ABC, abstractmethod
from typing import Any, Optional

from .config import MODEL_TYPE, Config
from .utils import CommandError, CommandRunner, prompt_file

__all__ = [
    "OracleError",
    "OracleUnavailableError",
    "Oracle",
    "CopilotOracle",
    "G4FOracle",
    "build_prompt",
    "get_oracle",
]

COPILOT_INSTALL_URL = "https://github.com/github/gh-copilot"

PROMPT_TEMPLATE = (
    "Generate a concise git commit message following conventional commit format "
    "(type(scope): description) for these changes. Use types like feat, fix, docs, "
    "style, refactor, test, chore. The changes are: {changes}"
)


class OracleError(Exception):
    """Raised when a suggestion could not be produced."""
    pass


class OracleUnavailableError(OracleError):
    """Raised when the suggestion backend is not installed or not reachable."""
    pass


def build_prompt(changes: str) -> str:
    return PROMPT_TEMPLATE.format(changes=changes)


class Oracle(ABC):
    """Text-in/text-out suggestion service."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def check_available(self) -> None:
        """Cheap availability check; raises OracleUnavailableError when the backend cannot be used."""

    @abstractmethod
    def suggest(self, prompt: str) -> str:
        """Return a stripped suggestion for ``prompt`` or raise OracleError."""


class CopilotOracle(Oracle):
    """Suggestions from ``gh copilot suggest``."""

    def __init__(self, runner: CommandRunner) -> None:
        self.runner = runner

    @property
    def name(self) -> str:
        return "GitHub Copilot CLI"

    def check_available(self) -> None:
        try:
            self.runner.run_capture("gh", "copilot", "--version")
        except CommandError as e:
            raise OracleUnavailableError(
                "GitHub Copilot CLI is not installed or not accessible. "
                f"Please install it first: {COPILOT_INSTALL_URL}"
            ) from e

    def suggest(self, prompt: str) -> str:
        with prompt_file(prompt) as path:
            try:
                output = self.runner.run_capture(
                    "sh", "-c", f"cat {shlex.quote(str(path))} | gh copilot suggest"
                )
            except CommandError as e:
                raise OracleError(f"gh copilot suggest failed: {e}") from e
        return output.strip()


class G4FOracle(Oracle):
    """Suggestions from a g4f chat model."""

    def __init__(self, model: MODEL_TYPE) -> None:
        self.model = model
        self.client: Optional[Any] = None

    @property
    def name(self) -> str:
        return f"g4f ({getattr(self.model, 'name', self.model)})"

    def check_available(self) -> None:
        try:
            from g4f.client import Client  # type: ignore

            self.client = Client()
        except Exception as e:
            raise OracleUnavailableError(f"g4f client could not be created: {e}") from e

    def suggest(self, prompt: str) -> str:
        if self.client is None:
            self.check_available()
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
            )
            content = response.choices[0].message.content
        except Exception as e:
            raise OracleError(f"g4f request failed: {e}") from e
        if not content or not content.strip():
            raise OracleError("g4f returned an empty response")
        return content.strip()


def get_oracle(config: Config, runner: CommandRunner) -> Oracle:
    """Build the oracle selected by ``config.oracle``."""
    if config.oracle == "g4f":
        return G4FOracle(config.model)
    return CopilotOracle(runner)
