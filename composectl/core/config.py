"""
Runtime settings for composectl.

Settings are read from ``COMPOSECTL_*`` environment variables first, then
from a ``.env`` file in the working directory, then fall back to defaults.
"""
import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

from dotenv import dotenv_values

from .exceptions import ConfigurationError

logger = logging.getLogger('composectl.config')

ENV_PREFIX = 'COMPOSECTL_'


@dataclass(frozen=True)
class ComposeCtlConfig:
    """Resolved composectl settings."""
    docker_bin: str = 'docker'
    url_host: str = 'localhost'
    url_scheme: str = 'http'
    name_separator: str = '_'
    max_workers: int = 4
    log_file: Optional[str] = None


def _lookup(key: str, dotenv: Dict[str, Optional[str]]) -> Optional[str]:
    env_key = f"{ENV_PREFIX}{key.upper()}"
    value = os.environ.get(env_key)
    if value is None:
        value = dotenv.get(env_key)
    if value is not None:
        value = value.strip()
    return value or None


def load_config(work_dir: Optional[Union[str, Path]] = None) -> ComposeCtlConfig:
    """
    Build the settings for an invocation rooted at ``work_dir``.

    Raises:
        ConfigurationError: If a numeric setting is not a positive integer.
    """
    dotenv = {}
    if work_dir is not None:
        env_path = Path(work_dir) / '.env'
        if env_path.is_file():
            dotenv = dotenv_values(env_path)
            logger.debug(f"Loaded settings from {env_path}")

    defaults = ComposeCtlConfig()
    values = {}
    for key in ('docker_bin', 'url_host', 'url_scheme', 'name_separator', 'log_file'):
        value = _lookup(key, dotenv)
        if value is not None:
            values[key] = value

    workers = _lookup('max_workers', dotenv)
    if workers is not None:
        try:
            values['max_workers'] = int(workers)
        except ValueError:
            raise ConfigurationError(f"{ENV_PREFIX}MAX_WORKERS must be an integer, got {workers!r}")
        if values['max_workers'] < 1:
            raise ConfigurationError(f"{ENV_PREFIX}MAX_WORKERS must be at least 1, got {workers!r}")

    config = ComposeCtlConfig(**{**defaults.__dict__, **values})
    logger.debug(f"Using settings: {config}")
    return config
