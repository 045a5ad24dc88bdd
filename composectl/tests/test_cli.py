# composectl/tests/test_cli.py

import json
import pytest
from click.testing import CliRunner

import composectl.composectl as composectl_cli
from composectl.composectl import cli


@pytest.fixture
def cli_runner(tmp_path, monkeypatch, fake_runner):
    """Click runner with logs in a temp dir and docker faked out"""
    monkeypatch.setenv('COMPOSECTL_LOG_FILE', str(tmp_path / 'logs' / 'composectl.log'))
    monkeypatch.setattr(composectl_cli, 'CommandRunner', lambda: fake_runner)
    return CliRunner()


def test_version(cli_runner):
    """Test --version output"""
    result = cli_runner.invoke(cli, ['--version'])
    assert result.exit_code == 0
    assert composectl_cli.VERSION in result.output


def test_up_json(cli_runner, write_compose, fake_runner, project_dir):
    """Test the JSON result of a successful restart"""
    write_compose("""
        services:
          web:
            image: nginx
            ports:
              - "8080:80"
    """)
    fake_runner.on('docker', 'ps', '--filter', 'name=web', stdout='proj_web_1\n')
    fake_runner.on('docker', 'port', 'proj_web_1', stdout='80/tcp -> 0.0.0.0:8080\n')

    result = cli_runner.invoke(cli, ['up', 'docker-compose.yml', '--work-dir', str(project_dir), '--json'])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {
        'ports': {'web': [{'hostPort': '8080', 'containerPort': '80'}]},
        'webUrl': 'http://localhost:8080',
    }


def test_up_table(cli_runner, write_compose, project_dir):
    """Test the human readable result"""
    write_compose("services:\n  worker:\n    image: busybox\n")

    result = cli_runner.invoke(cli, ['up', 'docker-compose.yml', '--work-dir', str(project_dir)])

    assert result.exit_code == 0, result.output
    assert 'worker' in result.output
    assert 'No service exposes a host port' in result.output


def test_up_missing_compose_file(cli_runner, project_dir):
    """Test the error for a missing manifest"""
    result = cli_runner.invoke(cli, ['up', 'nope.yml', '--work-dir', str(project_dir)])

    assert result.exit_code == 1
    assert 'Compose file not found' in result.output


def test_up_launch_failure(cli_runner, write_compose, fake_runner, project_dir):
    """Test the error for a failed compose up"""
    write_compose("services:\n  web:\n    image: nginx\n")
    fake_runner.on('docker', 'compose', exit_code=17)

    result = cli_runner.invoke(cli, ['up', 'docker-compose.yml', '--work-dir', str(project_dir), '--json'])

    assert result.exit_code == 1
    assert 'exit code 17' in result.output


def test_run_command(cli_runner, fake_runner, tmp_path):
    """Test running a workspace command"""
    fake_runner.on('echo', stdout='hello\n')

    result = cli_runner.invoke(cli, ['run', 'echo', 'hello', '--workspace', str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert result.output == 'hello\n'
    assert fake_runner.calls == [(('echo', 'hello'), str(tmp_path.resolve()))]


def test_run_rejects_escaping_cwd(cli_runner, fake_runner, tmp_path):
    """Test that --cwd cannot leave the workspace"""
    result = cli_runner.invoke(cli, ['run', 'ls', '--cwd', '../..', '--workspace', str(tmp_path)])

    assert result.exit_code == 1
    assert 'outside of workspace' in result.output
    assert fake_runner.calls == []
