"""
Process execution for composectl.

Every external command goes through :class:`CommandRunner`, so the stages
can be exercised against a fake runner in tests.
"""
import logging
import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

logger = logging.getLogger('composectl.runner')

LineCallback = Callable[[str], None]

# Exit status a POSIX shell reports for a command it cannot find
COMMAND_NOT_FOUND = 127


@dataclass
class CommandResult:
    """Outcome of a finished external command."""
    exit_code: int
    stdout: str = ''
    stderr: str = ''

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def lines(self) -> List[str]:
        """Non-blank stdout lines, stripped."""
        return [line.strip() for line in self.stdout.splitlines() if line.strip()]


class CommandRunner:
    """Runs commands without a shell, streaming their output line by line."""

    def run(
        self,
        command: Sequence[str],
        cwd: Optional[Union[str, Path]] = None,
        on_stdout: Optional[LineCallback] = None,
        on_stderr: Optional[LineCallback] = None,
    ) -> CommandResult:
        """
        Run ``command`` and block until it exits and both streams are drained.

        Args:
            command: Executable followed by its arguments
            cwd: Working directory for the process
            on_stdout: Called with each stdout line (without newline)
            on_stderr: Called with each stderr line (without newline)

        Returns:
            CommandResult: Exit code and the full captured output. A missing
            executable is reported as exit code 127 rather than raised.
        """
        command = [str(part) for part in command]
        logger.debug(f"Running: {' '.join(command)} (cwd={cwd})")

        try:
            process = subprocess.Popen(
                command,
                cwd=str(cwd) if cwd is not None else None,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding='utf-8',
                errors='replace',
                bufsize=1
            )
        except (FileNotFoundError, PermissionError, NotADirectoryError) as e:
            message = f"{command[0]}: {e}"
            logger.debug(f"Failed to spawn command: {message}")
            if on_stderr:
                on_stderr(message)
            return CommandResult(COMMAND_NOT_FOUND, '', message)

        stdout_lines: List[str] = []
        stderr_lines: List[str] = []
        readers = [
            threading.Thread(
                target=self._drain,
                args=(process.stdout, stdout_lines, on_stdout),
                daemon=True
            ),
            threading.Thread(
                target=self._drain,
                args=(process.stderr, stderr_lines, on_stderr),
                daemon=True
            ),
        ]
        for reader in readers:
            reader.start()

        exit_code = process.wait()
        for reader in readers:
            reader.join()

        logger.debug(f"Command exited with code {exit_code}: {command[0]}")
        return CommandResult(exit_code, ''.join(stdout_lines), ''.join(stderr_lines))

    @staticmethod
    def _drain(stream, sink: List[str], callback: Optional[LineCallback]):
        with stream:
            for line in stream:
                sink.append(line)
                if callback:
                    callback(line.rstrip('\r\n'))
