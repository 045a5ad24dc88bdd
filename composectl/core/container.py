"""Container runtime operations.

Thin wrapper over the docker CLI; all command lines are built here.
"""
from pathlib import Path
from typing import List, Tuple, Union

from .context import InvocationContext
from .runner import CommandResult, LineCallback

# Separator between name and ports in `ps` output; never valid in either field
PORT_TABLE_SEPARATOR = ':::'


class ContainerManager:
    """Issues container operations through the invocation's runner."""

    def __init__(self, context: InvocationContext):
        self.context = context
        self.logger = context.logger

    @property
    def docker(self) -> str:
        return self.context.config.docker_bin

    def _run(self, args, **kwargs) -> CommandResult:
        return self.context.runner.run([self.docker, *args], **kwargs)

    def list_containers(self, name_filter: str = None, all_states: bool = False) -> List[str]:
        """Names of containers, optionally filtered by a name pattern.

        ``name_filter`` is passed to ``--filter name=`` and therefore matches
        substrings unless it is anchored with ``^...$``.
        """
        args = ['ps']
        if all_states:
            args.append('-a')
        if name_filter:
            args.extend(['--filter', f'name={name_filter}'])
        args.extend(['--format', '{{.Names}}'])

        result = self._run(args, on_stderr=lambda line: self.logger.warning(f"[PS ERR] {line}"))
        if not result.ok:
            self.logger.warning(f"Listing containers failed with code {result.exit_code}")
            return []
        return result.lines()

    def list_port_table(self) -> List[Tuple[str, str]]:
        """(name, ports) for every running container."""
        result = self._run(
            ['ps', '--format', '{{.Names}}' + PORT_TABLE_SEPARATOR + '{{.Ports}}'],
            on_stderr=lambda line: self.logger.warning(f"[PS ERR] {line}")
        )
        if not result.ok:
            self.logger.warning(f"Listing container ports failed with code {result.exit_code}")
            return []

        table = []
        for line in result.lines():
            name, _, ports = line.partition(PORT_TABLE_SEPARATOR)
            table.append((name.strip(), ports.strip()))
        return table

    def remove_container(self, name: str) -> bool:
        """Force-remove (kill and delete) a container. Returns True on success."""
        result = self._run(
            ['rm', '-f', name],
            on_stdout=lambda line: self.logger.info(f"[RM] {line}"),
            on_stderr=lambda line: self.logger.warning(f"[RM ERR] {line}")
        )
        if not result.ok:
            self.logger.warning(f"Removing container {name} exited with code {result.exit_code}")
        return result.ok

    def container_ports(self, name: str) -> List[str]:
        """Raw ``docker port`` lines for a running container."""
        result = self._run(
            ['port', name],
            on_stderr=lambda line: self.logger.warning(f"DOCKER WARN: {line}")
        )
        if not result.ok:
            self.logger.warning(f"Querying ports of {name} exited with code {result.exit_code}")
        return result.lines()

    def compose_up(
        self,
        compose_path: Union[str, Path],
        on_stdout: LineCallback = None,
        on_stderr: LineCallback = None
    ) -> CommandResult:
        """Build and start every service of a compose file, detached."""
        return self._run(
            ['compose', '-f', str(compose_path), 'up', '-d', '--build'],
            cwd=self.context.work_dir,
            on_stdout=on_stdout,
            on_stderr=on_stderr
        )
