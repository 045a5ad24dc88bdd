# composectl/tests/test_shell.py

import pytest

from composectl.core.exceptions import CommandFailed, ComposeCtlError, UnsafePathError
from composectl.core.shell import resolve_safe_child_path, run_shell_command


def test_resolve_child_path(tmp_path):
    """Test a path inside the workspace"""
    assert resolve_safe_child_path(tmp_path, 'app/src') == (tmp_path / 'app' / 'src').resolve()


@pytest.mark.parametrize('relative', ['..', '../other', '/etc'])
def test_resolve_rejects_escaping_paths(tmp_path, relative):
    """Test that paths leaving the workspace are refused"""
    with pytest.raises(UnsafePathError):
        resolve_safe_child_path(tmp_path, relative)


def test_run_in_workspace(tmp_path, fake_runner):
    """Test command, arguments and working directory"""
    (tmp_path / 'app').mkdir()
    fake_runner.on('npm', stdout='added 1 package\n')

    result = run_shell_command('  npm ', ['ci'], cwd='app', workspace=tmp_path, runner=fake_runner)

    assert result.stdout == 'added 1 package\n'
    assert fake_runner.calls == [(('npm', 'ci'), str((tmp_path / 'app').resolve()))]


def test_blank_command_is_rejected(tmp_path, fake_runner):
    """Test that a command is required"""
    with pytest.raises(ComposeCtlError, match='command'):
        run_shell_command('   ', workspace=tmp_path, runner=fake_runner)
    assert fake_runner.calls == []


def test_failing_command_raises(tmp_path, fake_runner):
    """Test that a non-zero exit is reported"""
    fake_runner.on('false', exit_code=1)

    with pytest.raises(CommandFailed) as exc_info:
        run_shell_command('false', workspace=tmp_path, runner=fake_runner)

    assert exc_info.value.exit_code == 1
