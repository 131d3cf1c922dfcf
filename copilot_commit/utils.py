import contextlib
import os
import subprocess
import sys
import tempfile
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from rich.console import Console

__all__ = [
    "console",
    "err_console",
    "CommandError",
    "SubprocessHandler",
    "CommandRunner",
    "SubprocessRunner",
    "prompt_file",
]

console = Console()

err_console = Console(stderr=True)


class CommandError(Exception):
    """Raised when an external command cannot be run or exits with a non-zero status."""

    def __init__(self, command: List[str], returncode: Optional[int], stderr: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(self._format())

    def _format(self) -> str:
        cmd = " ".join(self.command)
        if self.returncode is None:
            message = f"could not run {cmd}"
        else:
            message = f"command failed with exit status {self.returncode}: {cmd}"
        detail = self.stderr.strip()
        return f"{message}: {detail}" if detail else message


class SubprocessHandler:
    """Dedicated class for handling subprocess execution.

    This class encapsulates subprocess operations, ensuring proper resource management
    and consistent error handling across the application. Commands block until they
    finish; there is no timeout.
    """

    def __init__(self, cwd: Optional[Union[str, Path]] = None,
                 max_termination_retries: Optional[int] = None,
                 termination_wait: Optional[float] = None) -> None:
        """Initialize the SubprocessHandler.

        Args:
            cwd: Working directory for the spawned processes (default: current directory).
            max_termination_retries: Maximum number of attempts to terminate a process.
            termination_wait: Time to wait between termination attempts in seconds.
        """
        self.cwd: Optional[str] = str(cwd) if cwd is not None else None
        self.max_termination_retries: int = max_termination_retries or 3
        self.termination_wait: float = termination_wait or 0.5

    @staticmethod
    def create_env() -> Dict[str, str]:
        """Create environment with explicit encoding settings for subprocess.

        Returns:
            Dict[str, str]: Environment variables dictionary with encoding settings.
        """
        env = os.environ.copy()
        env['PYTHONIOENCODING'] = 'utf-8'
        return env

    def run_command(self, command: List[str], capture_stdout: bool = True) -> Tuple[str, str, int]:
        """Execute a command and wait for it to finish.

        Args:
            command: Command to execute as a list of strings.
            capture_stdout: When False the child writes straight to our stdout and
                the returned stdout is empty. Stderr is always captured.

        Returns:
            Tuple[str, str, int]: stdout, stderr, and return code.

        Raises:
            OSError: If the executable cannot be started.
        """
        process: Optional[subprocess.Popen[Any]] = None
        try:
            process = subprocess.Popen(
                command,
                stdout=subprocess.PIPE if capture_stdout else None,
                stderr=subprocess.PIPE,
                text=True,
                # Replace invalid chars with a replacement marker rather than failing
                encoding='utf-8',
                errors='replace',
                env=self.create_env(),
                cwd=self.cwd,
            )
            stdout, stderr = process.communicate()
            return stdout or "", stderr or "", process.returncode
        except Exception:
            self._terminate_process(process)
            raise
        finally:
            self._cleanup_process(process)

    def _terminate_process(self, process: Optional[subprocess.Popen[Any]]) -> None:
        """Terminate a process with multiple attempts if needed."""
        if process is None or process.poll() is not None:
            return

        try:
            process.terminate()

            for _ in range(self.max_termination_retries):
                if process.poll() is not None:
                    return
                time.sleep(self.termination_wait)

            if process.poll() is None:
                process.kill()
        except OSError:
            # Process might already be gone
            pass

    def _cleanup_process(self, process: Optional[subprocess.Popen[Any]]) -> None:
        """Close the pipes of a finished (or abandoned) process."""
        if process is None:
            return

        for fd in [process.stdout, process.stderr]:
            if fd is not None:
                try:
                    fd.close()
                except (IOError, OSError):
                    pass

        self._terminate_process(process)


class CommandRunner(ABC):
    """Narrow interface the pipeline uses to talk to external tools."""

    @abstractmethod
    def run_silent(self, command: str, *args: str) -> None:
        """Run a command, letting its output reach the terminal.

        Raises:
            CommandError: If the command fails.
        """

    @abstractmethod
    def run_capture(self, command: str, *args: str) -> str:
        """Run a command and return its standard output.

        Raises:
            CommandError: If the command fails; the error carries the captured stderr.
        """


class SubprocessRunner(CommandRunner):
    """CommandRunner backed by real processes."""

    def __init__(self, cwd: Optional[Union[str, Path]] = None, verbose: bool = False) -> None:
        self.handler = SubprocessHandler(cwd=cwd)
        self.verbose = verbose

    def _execute(self, command: List[str], capture_stdout: bool = True) -> str:
        if self.verbose:
            console.print(f"[dim]$ {' '.join(command)}[/dim]")
        try:
            stdout, stderr, returncode = self.handler.run_command(command, capture_stdout)
        except OSError as e:
            raise CommandError(command, None, str(e)) from e
        if returncode != 0:
            raise CommandError(command, returncode, stderr or stdout)
        if not capture_stdout and stderr:
            # git reports push progress and hints on stderr
            sys.stderr.write(stderr)
            sys.stderr.flush()
        return stdout

    def run_silent(self, command: str, *args: str) -> None:
        self._execute([command, *args], capture_stdout=False)

    def run_capture(self, command: str, *args: str) -> str:
        return self._execute([command, *args])


@contextlib.contextmanager
def prompt_file(text: str) -> Iterator[Path]:
    """Write ``text`` to a temporary file and yield its path.

    The file is removed when the block exits, whether it succeeded or raised.
    """
    handle = tempfile.NamedTemporaryFile(
        mode="w", encoding="utf-8", prefix="copilot-prompt-", suffix=".txt", delete=False
    )
    path = Path(handle.name)
    try:
        with handle:
            handle.write(text)
        yield path
    finally:
        with contextlib.suppress(FileNotFoundError):
            path.unlink()
