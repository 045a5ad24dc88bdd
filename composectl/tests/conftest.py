"""
Pytest configuration and fixtures for the composectl tests.

Stages are exercised against :class:`FakeRunner`, which records every
command and answers with canned results instead of calling docker.
"""
import threading
import textwrap
import pytest
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from composectl.core.config import ComposeCtlConfig
from composectl.core.context import InvocationContext
from composectl.core.runner import CommandResult


class FakeRunner:
    """Stand-in for CommandRunner with canned results per command prefix."""

    def __init__(self):
        self.calls: List[Tuple[Tuple[str, ...], Optional[str]]] = []
        self.responses: Dict[Tuple[str, ...], CommandResult] = {}
        self._lock = threading.Lock()

    def on(self, *command, stdout='', stderr='', exit_code=0):
        """Answer commands starting with ``command``; the longest prefix wins."""
        self.responses[tuple(command)] = CommandResult(exit_code, stdout, stderr)
        return self

    def run(self, command, cwd=None, on_stdout=None, on_stderr=None):
        command = tuple(str(part) for part in command)
        with self._lock:
            self.calls.append((command, str(cwd) if cwd is not None else None))

        result = CommandResult(0)
        best = -1
        for prefix, response in self.responses.items():
            if command[:len(prefix)] == prefix and len(prefix) > best:
                result, best = response, len(prefix)

        for line in result.stdout.splitlines():
            if on_stdout:
                on_stdout(line)
        for line in result.stderr.splitlines():
            if on_stderr:
                on_stderr(line)
        return result

    def commands(self, *prefix) -> List[Tuple[str, ...]]:
        """Recorded commands starting with ``prefix``."""
        return [command for command, _ in self.calls if command[:len(prefix)] == prefix]


@pytest.fixture
def fake_runner():
    """A fresh FakeRunner."""
    return FakeRunner()


@pytest.fixture
def project_dir(tmp_path):
    """An empty compose project directory named 'proj'."""
    path = tmp_path / 'proj'
    path.mkdir()
    return path


@pytest.fixture
def write_compose(project_dir):
    """Write a compose file into the project directory and return its path."""
    def _write(content: str, name: str = 'docker-compose.yml') -> Path:
        path = project_dir / name
        path.write_text(textwrap.dedent(content))
        return path
    return _write


@pytest.fixture
def context(project_dir, fake_runner):
    """An invocation context wired to the fake runner."""
    return InvocationContext(
        work_dir=project_dir,
        runner=fake_runner,
        config=ComposeCtlConfig()
    )
