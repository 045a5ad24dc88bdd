"""Utility functions for composectl."""
import logging
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


def setup_logging(debug=False, log_file: Optional[Union[str, Path]] = None):
    """Set up logging configuration."""
    log_level = logging.DEBUG if debug else logging.INFO
    if log_file:
        log_file = Path(log_file).expanduser()
    else:
        log_file = Path.home() / '.composectl' / 'logs' / 'composectl.log'
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Configure root logger
    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler() if debug else logging.NullHandler()
        ],
        force=True
    )


class LoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that adds contextual information to log messages.

    Used by the pipeline so every line carries the compose project it
    belongs to without passing it to each log call.
    """

    def process(self, msg, kwargs):
        context_str = ' '.join(f'{k}={v}' for k, v in self.extra.items())
        if context_str:
            return f"{msg} [{context_str}]", kwargs
        return msg, kwargs


def get_contextual_logger(name: str, **context) -> LoggerAdapter:
    """
    Get a logger that automatically adds contextual information to messages.

    Example:
        >>> logger = get_contextual_logger('composectl.pipeline', project='shop')
        >>> logger.info("Starting Docker Compose...")
        # Output: "... [INFO] composectl.pipeline: Starting Docker Compose... [project=shop]"
    """
    return LoggerAdapter(logging.getLogger(name), context)
