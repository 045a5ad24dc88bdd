from .exceptions import (
    ComposeCtlError,
    ComposeFileNotFound,
    LaunchError,
    CommandFailed,
    UnsafePathError,
    ConfigurationError
)
from .manifest import ServiceSpec, ManifestReadResult, read_manifest, parse_manifest
from .discovery import PortBinding
from .pipeline import InvocationResult, run_stack
