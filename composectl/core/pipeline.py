"""
The restart-and-discover pipeline.

Reads the manifest, clears conflicting containers, starts the stack and
reports the published host ports. Stages run strictly in sequence; only a
missing compose file or a failed launch aborts an invocation.
"""
import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from .config import ComposeCtlConfig, load_config
from .context import InvocationContext
from .discovery import PortBinding, PortDiscovery, derive_web_url
from .exceptions import ComposeFileNotFound
from .launcher import StackLauncher
from .manifest import read_manifest
from .resolver import ConflictResolver, compose_project_name
from .runner import CommandRunner
from .utils import get_contextual_logger


@dataclass
class InvocationResult:
    """Published ports per service and the guessed web URL."""
    ports: Dict[str, List[PortBinding]] = field(default_factory=dict)
    web_url: str = ''

    def to_dict(self) -> dict:
        return {
            'ports': {
                service: [binding.to_dict() for binding in bindings]
                for service, bindings in self.ports.items()
            },
            'webUrl': self.web_url,
        }


class ComposePipeline:
    """Runs the four stages for one invocation context."""

    def __init__(self, context: InvocationContext):
        self.context = context
        self.logger = context.logger
        self.resolver = ConflictResolver(context)
        self.launcher = StackLauncher(context)
        self.discovery = PortDiscovery(context)

    def run(self, compose_path: Union[str, Path]) -> InvocationResult:
        """
        Restart the stack described by ``compose_path``.

        Raises:
            ComposeFileNotFound: If the manifest does not exist.
            LaunchError: If the stack failed to start.
        """
        compose_path = Path(compose_path)
        self.logger.info(f"Compose file: {compose_path}")
        if not compose_path.is_file():
            raise ComposeFileNotFound(compose_path)

        manifest = read_manifest(compose_path, log=self.logger)
        if manifest.warning:
            # Launch still runs against the raw file
            self.logger.warning("Continuing without conflict cleanup or port discovery")

        self.resolver.resolve(manifest.services)
        self.launcher.launch(compose_path)

        ports = self.discovery.discover(manifest.service_names)
        web_url = derive_web_url(
            ports,
            host=self.context.config.url_host,
            scheme=self.context.config.url_scheme
        )
        if web_url:
            self.logger.info(f"Application available at: {web_url}")
        else:
            self.logger.info("No service exposes a host port")
        return InvocationResult(ports=ports, web_url=web_url)


def run_stack(
    compose_file: Union[str, Path],
    work_dir: Optional[Union[str, Path]] = None,
    workspace: Optional[Union[str, Path]] = None,
    runner: Optional[CommandRunner] = None,
    config: Optional[ComposeCtlConfig] = None,
    logger: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None,
) -> InvocationResult:
    """
    Restart a compose stack and report its published ports.

    Args:
        compose_file: Manifest path, relative to the working directory
        work_dir: Working directory override
        workspace: Default working directory when ``work_dir`` is not given
            (the current directory if neither is)
        runner: Command runner, a real :class:`CommandRunner` by default
        config: Settings, loaded from the environment by default
        logger: Logger for progress messages

    Returns:
        InvocationResult: Ports per service and the web URL, possibly empty.

    Note:
        Invocations against the same project directory must not overlap;
        callers are responsible for serializing them.
    """
    cwd = Path(work_dir or workspace or os.getcwd())
    if config is None:
        config = load_config(cwd)
    if logger is None:
        logger = get_contextual_logger('composectl.pipeline', project=compose_project_name(cwd))

    context = InvocationContext(
        work_dir=cwd,
        runner=runner or CommandRunner(),
        config=config,
        logger=logger
    )
    return ComposePipeline(context).run(cwd / compose_file)
