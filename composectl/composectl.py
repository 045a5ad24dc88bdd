#!/usr/bin/env python3
"""
composectl - Restart a compose stack and report its published ports.
"""
import sys
import json
import logging
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console

from composectl.core.config import load_config
from composectl.core.exceptions import ComposeCtlError, handle_error
from composectl.core.pipeline import run_stack
from composectl.core.runner import CommandRunner
from composectl.core.shell import run_shell_command
from composectl.core.utils import setup_logging
from composectl.ui.console import ConsoleUI

VERSION = "1.0.0"
console = Console()
ui = ConsoleUI(console)
logger = logging.getLogger(__name__)


# CLI Commands
@click.group()
@click.version_option(version=VERSION)
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--log-file', envvar='COMPOSECTL_LOG_FILE', type=click.Path(dir_okay=False),
              help='Log file (default: ~/.composectl/logs/composectl.log)')
@click.pass_context
def cli(ctx, debug, log_file):
    """composectl - Restart compose stacks and discover their ports"""
    setup_logging(debug, log_file)

    ctx.ensure_object(dict)
    ctx.obj['DEBUG'] = debug

    if debug:
        logger.debug("Debug mode enabled")
        logger.debug(f"Current working directory: {Path.cwd()}")


@cli.command()
@click.argument('compose_file')
@click.option('--work-dir', type=click.Path(file_okay=False, path_type=Path),
              help='Project directory (default: current directory)')
@click.option('--json', 'as_json', is_flag=True, help='Print the result as JSON')
@click.pass_context
def up(ctx, compose_file: str, work_dir: Optional[Path], as_json: bool):
    """Remove conflicting containers, start the stack and show its ports"""
    debug = ctx.obj.get('DEBUG', False)
    try:
        cwd = work_dir or Path.cwd()
        config = load_config(cwd)
        if config.log_file:
            setup_logging(debug, config.log_file)
        if as_json:
            result = run_stack(compose_file, work_dir=cwd, runner=CommandRunner(), config=config)
        else:
            with ui.show_progress("Restarting stack..."):
                result = run_stack(compose_file, work_dir=cwd, runner=CommandRunner(), config=config)
    except ComposeCtlError as e:
        ui.print_error(handle_error(e), show_traceback=debug)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        ui.display_ports(result)


@cli.command(context_settings={'ignore_unknown_options': True})
@click.argument('command')
@click.argument('args', nargs=-1, type=click.UNPROCESSED)
@click.option('--cwd', help='Working directory, relative to the workspace')
@click.option('--workspace', type=click.Path(file_okay=False, path_type=Path),
              help='Workspace root (default: current directory)')
@click.pass_context
def run(ctx, command: str, args: Tuple[str], cwd: Optional[str], workspace: Optional[Path]):
    """Run a command inside the workspace"""
    debug = ctx.obj.get('DEBUG', False)
    try:
        result = run_shell_command(
            command,
            args,
            cwd=cwd,
            workspace=workspace or Path.cwd(),
            runner=CommandRunner()
        )
    except ComposeCtlError as e:
        ui.print_error(handle_error(e), show_traceback=debug)
        sys.exit(1)

    if result.stdout:
        click.echo(result.stdout, nl=False)


if __name__ == '__main__':
    cli()
