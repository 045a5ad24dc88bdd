"""Run an arbitrary command inside a workspace directory."""
import logging
from pathlib import Path
from typing import Optional, Sequence, Union

from .exceptions import CommandFailed, ComposeCtlError, UnsafePathError
from .runner import CommandResult, CommandRunner

logger = logging.getLogger('composectl.shell')


def resolve_safe_child_path(workspace: Union[str, Path], relative: Union[str, Path]) -> Path:
    """
    Resolve ``relative`` against ``workspace``, refusing to leave it.

    Raises:
        UnsafePathError: If the resolved path is outside the workspace.
    """
    base = Path(workspace).resolve()
    target = (base / relative).resolve()
    if target != base and base not in target.parents:
        raise UnsafePathError(relative, base)
    return target


def run_shell_command(
    command: str,
    args: Sequence[str] = (),
    cwd: Optional[Union[str, Path]] = None,
    workspace: Optional[Union[str, Path]] = None,
    runner: Optional[CommandRunner] = None,
    log: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None,
) -> CommandResult:
    """
    Run ``command`` with ``args`` in the workspace (or a child of it).

    Raises:
        ComposeCtlError: If ``command`` is blank.
        UnsafePathError: If ``cwd`` escapes the workspace.
        CommandFailed: If the command exits non-zero.
    """
    log = log or logger
    command = (command or '').strip()
    if not command:
        raise ComposeCtlError('run requires a "command" input')

    workspace = Path(workspace) if workspace is not None else Path.cwd()
    directory = resolve_safe_child_path(workspace, cwd) if cwd else workspace.resolve()
    args = list(args or [])

    log.info(f"Running command: {' '.join([command, *args])} in {directory}")
    result = (runner or CommandRunner()).run(
        [command, *args],
        cwd=directory,
        on_stdout=log.info,
        on_stderr=log.warning
    )
    if not result.ok:
        raise CommandFailed(' '.join([command, *args]), result.exit_code)
    return result
