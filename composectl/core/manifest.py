"""
Compose file parsing.

Extracts the service names, container name overrides and published host
ports from a compose manifest. Parsing problems never abort an invocation:
they produce an empty service list and a warning.
"""
import re
import yaml
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple, Union

from .exceptions import ComposeParseError

logger = logging.getLogger('composectl.manifest')


class ManifestLoader(yaml.SafeLoader):
    """SafeLoader without YAML 1.1 base-60 integers.

    PyYAML would otherwise read an unquoted ``22:22`` port mapping as the
    integer 1342; the compose tool itself reads it as a string.
    """


ManifestLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != 'tag:yaml.org,2002:int']
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
ManifestLoader.add_implicit_resolver(
    'tag:yaml.org,2002:int',
    re.compile(r'''^(?:[-+]?0b[0-1_]+
                    |[-+]?0[0-7_]+
                    |[-+]?(?:0|[1-9][0-9_]*)
                    |[-+]?0x[0-9a-fA-F_]+)$''', re.X),
    list('-+0123456789')
)


@dataclass(frozen=True)
class ServiceSpec:
    """A service as declared in the manifest."""
    name: str
    declared_container_name: Optional[str] = None
    declared_host_ports: Tuple[str, ...] = ()


@dataclass
class ManifestReadResult:
    """Services read from a manifest, or an empty list and the reason why."""
    services: List[ServiceSpec] = field(default_factory=list)
    warning: Optional[str] = None

    @property
    def service_names(self) -> List[str]:
        return [service.name for service in self.services]


def _host_port_from_short_syntax(spec) -> Optional[str]:
    """Host port of a ``[IP:]HOST:CONTAINER[/proto]`` mapping, if any."""
    text = str(spec).strip()
    mapping = text.split('/', 1)[0]
    parts = mapping.rsplit(':', 2)
    if len(parts) < 2:
        return None
    host_port = parts[-2].strip()
    return host_port or None


def declared_host_ports(port_specs: Optional[Iterable[Any]]) -> Tuple[str, ...]:
    """
    Collect the host ports a service publishes.

    Args:
        port_specs: The service's ``ports`` list (short or long syntax)

    Returns:
        Host ports in declaration order, without duplicates. Container-only
        entries such as ``"80"`` contribute nothing.
    """
    ports = []
    for spec in port_specs or []:
        if isinstance(spec, dict):
            published = spec.get('published')
            host_port = str(published).strip() if published not in (None, '') else None
        else:
            host_port = _host_port_from_short_syntax(spec)

        if host_port and host_port not in ports:
            ports.append(host_port)
    return tuple(ports)


def _load_document(text: str) -> dict:
    try:
        document = yaml.load(text, Loader=ManifestLoader)
    except yaml.YAMLError as e:
        raise ComposeParseError(f"Failed to parse compose file: {e}")

    if not isinstance(document, dict):
        raise ComposeParseError("Compose file is not a mapping")
    services = document.get('services')
    if services is None:
        raise ComposeParseError("Compose file has no 'services' section")
    if not isinstance(services, dict):
        raise ComposeParseError("Compose file 'services' section is not a mapping")
    return services


def parse_manifest(text: str) -> ManifestReadResult:
    """Parse manifest text into service specs, in declaration order."""
    try:
        services_config = _load_document(text)
    except ComposeParseError as e:
        return ManifestReadResult(services=[], warning=str(e))

    services = []
    for name, config in services_config.items():
        config = config if isinstance(config, dict) else {}
        container_name = config.get('container_name')
        ports = config.get('ports')
        if ports is not None and not isinstance(ports, list):
            ports = [ports]
        services.append(ServiceSpec(
            name=str(name),
            declared_container_name=str(container_name) if container_name else None,
            declared_host_ports=declared_host_ports(ports)
        ))

    logger.debug(f"Parsed {len(services)} services")
    return ManifestReadResult(services=services)


def read_manifest(
    path: Union[str, Path],
    log: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None
) -> ManifestReadResult:
    """
    Read and parse the manifest at ``path``.

    Never raises for unreadable or malformed files; the returned result
    carries the warning instead, which is also logged.
    """
    log = log or logger
    try:
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        result = ManifestReadResult(services=[], warning=f"Failed to read compose file: {e}")
    else:
        result = parse_manifest(text)

    if result.warning:
        log.warning(result.warning)
    elif result.services:
        log.info(f"Detected services: {', '.join(result.service_names)}")
    return result
