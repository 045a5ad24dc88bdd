"""Starts the compose stack."""
import re
import logging
from pathlib import Path
from typing import Union

from .container import ContainerManager
from .context import InvocationContext
from .exceptions import LaunchError

# compose v1 progress lines carry these anywhere ("Creating network ...", "Creating proj_web_1 ... done")
CREATION_MARKERS = ('Creating', 'Created')

# compose status lines: " Container proj-web-1  Started", "[+] Running 2/2", "Pulling db (postgres)..."
PROGRESS_LINE = re.compile(
    r'^\s*(?:[^\w\s]+\s+)?'
    r'(?:(?:Container|Network|Volume|Image|Service)\s+\S+\s+)?'
    r'(?:Recreate|Recreated|Starting|Started|Building|Built|Pulling|Pulled'
    r'|Running|Waiting|Healthy|Stopping|Stopped|Removing|Removed)\b'
)
WARNING_MARKERS = ('level=warning', 'warning')


def classify_stderr_line(line: str) -> int:
    """Log level for a line compose wrote to stderr."""
    if any(marker in line for marker in CREATION_MARKERS) or PROGRESS_LINE.match(line):
        return logging.WARNING
    lowered = line.lower()
    if any(marker in lowered for marker in WARNING_MARKERS):
        return logging.WARNING
    return logging.ERROR


class StackLauncher:
    """Runs ``compose up -d --build`` once and fails on a non-zero exit."""

    def __init__(self, context: InvocationContext, containers: ContainerManager = None):
        self.context = context
        self.logger = context.logger
        self.containers = containers or ContainerManager(context)

    def _on_stdout(self, line: str):
        self.logger.info(f"DOCKER OUT: {line}")

    def _on_stderr(self, line: str):
        level = classify_stderr_line(line)
        if level == logging.WARNING:
            self.logger.warning(f"DOCKER WARN: {line}")
        else:
            self.logger.error(f"DOCKER ERR: {line}")

    def launch(self, compose_path: Union[str, Path]) -> None:
        """
        Build and start the stack.

        Raises:
            LaunchError: If the compose tool exits non-zero.
        """
        self.logger.info("Starting Docker Compose...")
        result = self.containers.compose_up(
            compose_path,
            on_stdout=self._on_stdout,
            on_stderr=self._on_stderr
        )
        if not result.ok:
            self.logger.error(f"docker compose up exited with code {result.exit_code}")
            raise LaunchError(result.exit_code)
        self.logger.info("Docker Compose executed successfully.")
