import shutil
from pathlib import Path
from typing import Callable, Dict, Generator, List, Optional, Tuple

import git
import pytest

from copilot_commit.oracle import Oracle, OracleError, OracleUnavailableError
from copilot_commit.utils import CommandError, CommandRunner


class FakeRunner(CommandRunner):
    """Records commands and answers them from a table keyed by the command tuple."""

    def __init__(self, outputs: Optional[Dict[Tuple[str, ...], str]] = None,
                 failures: Optional[Dict[Tuple[str, ...], str]] = None) -> None:
        self.outputs = outputs or {}
        self.failures = failures or {}
        self.calls: List[Tuple[str, ...]] = []

    def _execute(self, command: Tuple[str, ...]) -> str:
        self.calls.append(command)
        if command in self.failures:
            raise CommandError(list(command), 1, self.failures[command])
        return self.outputs.get(command, "")

    def run_silent(self, command: str, *args: str) -> None:
        self._execute((command, *args))

    def run_capture(self, command: str, *args: str) -> str:
        return self._execute((command, *args))


class FakeOracle(Oracle):
    def __init__(self, suggestion: Optional[str] = None, available: bool = True) -> None:
        self.suggestion = suggestion
        self.available = available
        self.prompts: List[str] = []

    @property
    def name(self) -> str:
        return "fake oracle"

    def check_available(self) -> None:
        if not self.available:
            raise OracleUnavailableError("fake oracle is not installed")

    def suggest(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.suggestion is None:
            raise OracleError("fake oracle failed")
        return self.suggestion


DIFF_COMMAND = ("git", "diff", "--cached", "--name-status")


@pytest.fixture
def fake_runner_factory() -> Callable[..., FakeRunner]:
    return FakeRunner


@pytest.fixture
def fake_oracle_factory() -> Callable[..., FakeOracle]:
    return FakeOracle


@pytest.fixture
def remote_repo(tmp_path) -> Generator[Path, None, None]:
    """A bare repository acting as ``origin``."""
    remote_dir = tmp_path / "origin.git"
    git.Repo.init(remote_dir, bare=True)
    yield remote_dir
    shutil.rmtree(remote_dir, ignore_errors=True)


@pytest.fixture
def temp_git_repo(tmp_path, remote_repo) -> Generator[git.Repo, None, None]:
    """A working repository with one pushed commit and an upstream branch."""
    repo_dir = tmp_path / "work"
    repo = git.Repo.init(repo_dir)

    # Configure git user for commits
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")
        writer.set_value("commit", "gpgsign", "false")

    readme = repo_dir / "README.md"
    readme.write_text("# Sample project\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    origin = repo.create_remote("origin", str(remote_repo))
    repo.git.push("--set-upstream", origin.name, repo.active_branch.name)

    yield repo
    repo.close()
    shutil.rmtree(repo_dir, ignore_errors=True)
