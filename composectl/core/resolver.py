"""
Conflict resolution before a stack is (re)started.

Removes containers that would collide with the upcoming run, first by
container name and then by published host port.
"""
import os
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Set, Union

from .container import ContainerManager
from .context import InvocationContext
from .manifest import ServiceSpec


@dataclass
class ResolveReport:
    """Containers removed by each pass, in removal order."""
    removed_by_name: List[str] = field(default_factory=list)
    removed_by_port: List[str] = field(default_factory=list)

    @property
    def removed(self) -> List[str]:
        return self.removed_by_name + self.removed_by_port


def compose_project_name(work_dir: Union[str, Path]) -> str:
    """Default compose project name for a working directory."""
    name = Path(os.path.abspath(work_dir)).name.lower()
    return re.sub(r'[^a-z0-9_-]', '', name).lstrip('_-')


def container_identity(service: ServiceSpec, project: str, separator: str = '_') -> str:
    """Name the container of ``service`` has (or will have) at runtime."""
    if service.declared_container_name:
        return service.declared_container_name
    return separator.join([project, service.name, '1'])


def _expand_port(value: str) -> Set[str]:
    """``"8000-8002"`` -> {"8000", "8001", "8002"}; single ports unchanged."""
    value = value.strip()
    start, sep, end = value.partition('-')
    if sep and start.isdigit() and end.isdigit() and int(start) <= int(end):
        return {str(port) for port in range(int(start), int(end) + 1)}
    return {value} if value else set()


def parse_ports_field(ports: str) -> Set[str]:
    """
    Host ports published in a ``docker ps`` Ports column.

    Example:
        >>> sorted(parse_ports_field("0.0.0.0:8080->80/tcp, :::8080->80/tcp, 5432/tcp"))
        ['8080']
    """
    published = set()
    for entry in ports.split(','):
        host_side, arrow, _ = entry.strip().partition('->')
        if not arrow:
            continue
        published |= _expand_port(host_side.rsplit(':', 1)[-1])
    return published


class ConflictResolver:
    """Clears name and port conflicts for a set of services."""

    def __init__(self, context: InvocationContext, containers: ContainerManager = None):
        self.context = context
        self.logger = context.logger
        self.containers = containers or ContainerManager(context)
        self._removed: Set[str] = set()

    def resolve(self, services: List[ServiceSpec]) -> ResolveReport:
        """Run the by-name pass, then the by-port pass. Never raises on a failed removal."""
        report = ResolveReport()
        if not services:
            return report

        project = compose_project_name(self.context.work_dir)
        names = [
            container_identity(service, project, self.context.config.name_separator)
            for service in services
        ]
        self.logger.info("Service cleanup info: " + ', '.join(
            f"{service.name} (container={name}, ports={list(service.declared_host_ports)})"
            for service, name in zip(services, names)
        ))

        report.removed_by_name = self.remove_by_name(names)
        report.removed_by_port = self.remove_by_port(
            port for service in services for port in service.declared_host_ports
        )
        return report

    def _matching_containers(self, name: str) -> List[str]:
        self.logger.info(f"Removing container by name: {name}")
        found = self.containers.list_containers(f"^{re.escape(name)}$", all_states=True)
        return [container for container in found if container == name]

    def remove_by_name(self, names: Iterable[str]) -> List[str]:
        """Force-remove every existing container whose name is in ``names``."""
        names = list(dict.fromkeys(names))
        with ThreadPoolExecutor(max_workers=self.context.config.max_workers) as pool:
            matches = list(pool.map(self._matching_containers, names))

        targets = []
        for found in matches:
            for container in found:
                if container not in self._removed and container not in targets:
                    targets.append(container)
        self._removed.update(targets)

        with ThreadPoolExecutor(max_workers=self.context.config.max_workers) as pool:
            list(pool.map(self.containers.remove_container, targets))
        return targets

    def remove_by_port(self, ports: Iterable[str]) -> List[str]:
        """Force-remove running containers that publish any of ``ports``."""
        removed = []
        for port in dict.fromkeys(ports):
            wanted = _expand_port(port)
            if not wanted:
                continue
            self.logger.info(f"Checking port conflict for host port: {port}")

            for name, published in self.containers.list_port_table():
                if name in self._removed or not wanted & parse_ports_field(published):
                    continue
                self.logger.warning(f"Host port {port} is in use by {name}. Removing...")
                self._removed.add(name)
                self.containers.remove_container(name)
                removed.append(name)
        return removed
