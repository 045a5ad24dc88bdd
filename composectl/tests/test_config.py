# composectl/tests/test_config.py

import pytest

from composectl.core.config import ComposeCtlConfig, load_config
from composectl.core.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove composectl settings from the environment"""
    for key in ('DOCKER_BIN', 'URL_HOST', 'URL_SCHEME', 'NAME_SEPARATOR', 'MAX_WORKERS', 'LOG_FILE'):
        monkeypatch.delenv(f'COMPOSECTL_{key}', raising=False)


def test_defaults(tmp_path):
    """Test settings without environment or .env"""
    assert load_config(tmp_path) == ComposeCtlConfig()


def test_dotenv_values(tmp_path):
    """Test settings from a .env file"""
    (tmp_path / '.env').write_text(
        'COMPOSECTL_URL_HOST=dev.local\n'
        'COMPOSECTL_NAME_SEPARATOR=-\n'
        'COMPOSECTL_MAX_WORKERS=2\n'
        'UNRELATED=1\n'
    )

    config = load_config(tmp_path)

    assert config.url_host == 'dev.local'
    assert config.name_separator == '-'
    assert config.max_workers == 2
    assert config.docker_bin == 'docker'


def test_environment_overrides_dotenv(tmp_path, monkeypatch):
    """Test that the process environment wins over .env"""
    (tmp_path / '.env').write_text('COMPOSECTL_DOCKER_BIN=podman\n')
    monkeypatch.setenv('COMPOSECTL_DOCKER_BIN', '/usr/local/bin/docker')

    assert load_config(tmp_path).docker_bin == '/usr/local/bin/docker'


@pytest.mark.parametrize('value', ['many', '0'])
def test_invalid_worker_count(tmp_path, monkeypatch, value):
    """Test that a bad worker count is rejected"""
    monkeypatch.setenv('COMPOSECTL_MAX_WORKERS', value)

    with pytest.raises(ConfigurationError):
        load_config(tmp_path)
