"""Configuration module for copilot-commit.

This module provides a configuration class that holds all the settings
for a commit run.
"""

from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple, Union

import g4f  # type: ignore

# Type alias for the supported model types
MODEL_TYPE = Union[g4f.Model, str]


@dataclass
class Config:
    """Configuration class for copilot-commit.

    Attributes:
        oracle: Suggestion backend, ``"copilot"`` (GitHub Copilot CLI) or ``"g4f"``.
        model: The model used by the g4f backend. Can be a g4f.Model object or a
              model name string.
        push: Whether to push after committing.
        max_files: Number of changed paths listed in the fallback message.
        verbose: Whether to echo the external commands being run.
    """

    ORACLES: ClassVar[Tuple[str, ...]] = ("copilot", "g4f")
    MIN_FILES: ClassVar[int] = 1
    MAX_FILES: ClassVar[int] = 50

    oracle: str = "copilot"
    model: MODEL_TYPE = "gpt-4o-mini"
    push: bool = True
    max_files: int = 5
    verbose: bool = False

    def __post_init__(self) -> None:
        error = self._validate()
        if error:
            raise ValueError(f"Invalid configuration: {error}")

    def _validate(self) -> Optional[str]:
        """Return the first validation problem, or None when the config is valid."""
        if self.oracle not in self.ORACLES:
            return f"oracle must be one of: {', '.join(self.ORACLES)}"
        if not isinstance(self.model, (g4f.Model, str)) or not str(self.model):
            return "model must be a g4f.Model or a non-empty string"
        if not isinstance(self.push, bool):
            return "push must be a boolean value"
        if (
            not isinstance(self.max_files, int)
            or isinstance(self.max_files, bool)
            or not self.MIN_FILES <= self.max_files <= self.MAX_FILES
        ):
            return f"max_files must be an integer between {self.MIN_FILES} and {self.MAX_FILES}"
        if not isinstance(self.verbose, bool):
            return "verbose must be a boolean value"
        return None

    def is_valid(self) -> bool:
        return self._validate() is None


# Default configuration instance
default_config = Config()
