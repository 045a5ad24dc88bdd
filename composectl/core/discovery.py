"""
Port discovery for a running stack.

Asks the container runtime which host ports were actually published for
each service and picks a convenience URL.
"""
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .container import ContainerManager
from .context import InvocationContext

# `docker port` output, e.g. "80/tcp -> 0.0.0.0:32768" or "80/tcp -> [::]:32768"
PORT_LINE = re.compile(r'^(\d+)/tcp -> (\S+):(\d+)$')


@dataclass(frozen=True)
class PortBinding:
    """An observed host port to container port mapping."""
    host_port: str
    container_port: str

    def to_dict(self) -> Dict[str, str]:
        return {'hostPort': self.host_port, 'containerPort': self.container_port}


def parse_port_line(line: str) -> Optional[PortBinding]:
    """Parse one ``docker port`` line; non-tcp or malformed lines give None."""
    match = PORT_LINE.match(line.strip())
    if not match:
        return None
    return PortBinding(host_port=match.group(3), container_port=match.group(1))


def derive_web_url(
    ports: Dict[str, List[PortBinding]],
    host: str = 'localhost',
    scheme: str = 'http'
) -> str:
    """URL of the first service (in map order) with a binding, or ''."""
    for bindings in ports.values():
        if bindings:
            return f"{scheme}://{host}:{bindings[0].host_port}"
    return ''


class PortDiscovery:
    """Collects port bindings of running containers per service."""

    def __init__(self, context: InvocationContext, containers: ContainerManager = None):
        self.context = context
        self.logger = context.logger
        self.containers = containers or ContainerManager(context)

    def service_bindings(self, service: str) -> List[PortBinding]:
        """Bindings of every running container whose name contains ``service``."""
        bindings = []
        for container in self.containers.list_containers(re.escape(service)):
            for line in self.containers.container_ports(container):
                binding = parse_port_line(line)
                if binding is None:
                    self.logger.debug(f"Skipping port line of {container}: {line}")
                elif binding not in bindings:
                    bindings.append(binding)
        return bindings

    def discover(self, service_names: Sequence[str]) -> Dict[str, List[PortBinding]]:
        """Map every service name to its bindings, keeping input order."""
        service_names = list(service_names)
        if not service_names:
            return {}

        with ThreadPoolExecutor(max_workers=self.context.config.max_workers) as pool:
            results = list(pool.map(self.service_bindings, service_names))

        ports = dict(zip(service_names, results))
        summary = []
        for name, bindings in ports.items():
            mapped = ', '.join(f"{b.host_port}->{b.container_port}" for b in bindings)
            summary.append(f"{name}=[{mapped}]")
        self.logger.info(f"Exposed ports: {', '.join(summary)}")
        return ports
