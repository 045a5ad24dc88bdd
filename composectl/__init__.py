"""
composectl
Restarts a compose stack and reports the host ports it published.
"""

__version__ = "1.0.0"

from .core.pipeline import run_stack, InvocationResult
from .core.discovery import PortBinding
from .core.exceptions import ComposeCtlError, ComposeFileNotFound, LaunchError
