"""Per-invocation state shared by the pipeline stages."""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from .config import ComposeCtlConfig
from .runner import CommandRunner


@dataclass
class InvocationContext:
    """
    Everything a stage needs from its environment.

    Attributes:
        work_dir: Directory the compose project lives in
        runner: Executes external commands
        config: Resolved composectl settings
        logger: Logger (or adapter) for progress messages
    """
    work_dir: Path
    runner: CommandRunner = field(default_factory=CommandRunner)
    config: ComposeCtlConfig = field(default_factory=ComposeCtlConfig)
    logger: Union[logging.Logger, logging.LoggerAdapter] = field(
        default_factory=lambda: logging.getLogger('composectl')
    )

    def __post_init__(self):
        self.work_dir = Path(self.work_dir)
