"""Runner for the external point/range oracle (gopls by default)."""

import logging
import subprocess
import threading
from pathlib import Path

from testctx.errors import ResolutionError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


class GoplsOracle:
    """Runs `gopls definition` and `gopls folding_ranges` as subprocesses.

    Every call is bounded by a timeout. Live processes are tracked so a
    cancelled build can kill them.
    """

    def __init__(
        self,
        command: list[str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        cwd: Path | None = None,
    ):
        self.command = list(command) if command else ["gopls"]
        self.timeout = timeout
        self.cwd = cwd
        self._processes: set[subprocess.Popen] = set()
        self._lock = threading.Lock()

    def definition(self, path: str, line: int, column: int) -> str:
        """Ask where the symbol at path:line:column (one-based) is defined."""
        return self._run("definition", f"{path}:{line}:{column}")

    def folding_ranges(self, path: str) -> str:
        """List every foldable range in a file."""
        return self._run("folding_ranges", path)

    def terminate_all(self) -> None:
        """Kill every oracle process still running."""
        with self._lock:
            processes = list(self._processes)
        for process in processes:
            logger.debug(f"Killing oracle process {process.pid}")
            process.kill()

    def _run(self, *args: str) -> str:
        argv = [*self.command, *args]
        command_line = " ".join(argv)
        logger.debug(f"Running {command_line}")

        try:
            process = subprocess.Popen(
                argv,
                cwd=self.cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                encoding="utf-8",
                errors="replace",  # Undecodable bytes must not abort a build
            )
        except OSError as e:
            raise ResolutionError(f"Could not start {argv[0]}: {e}") from e

        with self._lock:
            self._processes.add(process)
        try:
            stdout, stderr = process.communicate(timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            process.kill()
            process.communicate()
            raise ResolutionError(
                f"{command_line} timed out after {self.timeout}s"
            ) from e
        finally:
            with self._lock:
                self._processes.discard(process)

        if process.returncode != 0:
            diagnostic = (stderr or stdout).strip()
            raise ResolutionError(
                f"{command_line} exited with {process.returncode}: {diagnostic}"
            )
        return stdout
