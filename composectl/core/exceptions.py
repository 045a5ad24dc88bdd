"""Custom exceptions for composectl."""


class ComposeCtlError(Exception):
    """Base exception for all composectl errors."""
    pass


class ComposeFileNotFound(ComposeCtlError):
    """Raised when the compose file does not exist."""
    def __init__(self, path=None):
        self.path = path
        if path is None:
            self.message = "Compose file not found"
        else:
            self.message = f"Compose file not found: {path}"
        super().__init__(self.message)


class ComposeParseError(ComposeCtlError):
    """Raised when the compose file cannot be parsed."""
    pass


class LaunchError(ComposeCtlError):
    """Raised when `compose up` exits with a non-zero status."""
    def __init__(self, exit_code: int):
        self.exit_code = exit_code
        super().__init__(f"docker compose up exited with code {exit_code}")


class CommandFailed(ComposeCtlError):
    """Raised when a workspace command exits with a non-zero status."""
    def __init__(self, command: str, exit_code: int):
        self.command = command
        self.exit_code = exit_code
        super().__init__(f"Command '{command}' exited with code {exit_code}")


class UnsafePathError(ComposeCtlError):
    """Raised when a relative path resolves outside of the workspace."""
    def __init__(self, path, workspace):
        self.path = path
        self.workspace = workspace
        super().__init__(f"Path {path} is outside of workspace {workspace}")


class ConfigurationError(ComposeCtlError):
    """Raised for invalid composectl settings."""
    pass


def handle_error(error: ComposeCtlError) -> str:
    """
    Convert a composectl error to a user-friendly message.

    Args:
        error: The error to handle

    Returns:
        A formatted error message
    """
    if isinstance(error, ComposeFileNotFound):
        return error.message
    elif isinstance(error, LaunchError):
        return (f"Stack failed to start (exit code {error.exit_code}).\n"
                "Check the compose output above for details.")
    elif isinstance(error, CommandFailed):
        return f"Command failed with exit code {error.exit_code}: {error.command}"
    else:
        return str(error)
