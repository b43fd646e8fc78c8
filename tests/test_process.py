from mkwebuser.exceptions import CommandSpawnError
from mkwebuser.process import DryRunRunner
from mkwebuser.process import ExitStatus
from mkwebuser.process import SubprocessRunner
from mkwebuser.process import format_command
import logging
import subprocess
import pytest


class TestExitStatus:
    def test_success(self):
        status = ExitStatus(0)
        assert status.success
        assert status.code == 0
        assert status.signal is None

    def test_nonzero(self):
        status = ExitStatus(9)
        assert not status.success
        assert status.code == 9
        assert str(status) == 'exit status 9'

    def test_signalled(self):
        status = ExitStatus(-15)
        assert not status.success
        assert status.code is None
        assert status.signal == 15
        assert str(status) == 'killed by signal 15'


def test_format_command_quotes():
    cmd = format_command(['useradd', '--comment', 'mkwebuser alice', 'alice'])
    assert cmd == "useradd --comment 'mkwebuser alice' alice"


class TestSubprocessRunner:
    def test_quiet_discards_output(self, monkeypatch):
        seen = {}

        def fake_run(args, **kwargs):
            seen.update(kwargs)
            return subprocess.CompletedProcess(args, 3)

        monkeypatch.setattr(subprocess, 'run', fake_run)
        status = SubprocessRunner().run(['dd', 'count=1'])
        assert status == ExitStatus(3)
        assert seen == {'stdout': subprocess.DEVNULL,
                        'stderr': subprocess.DEVNULL}

    def test_output_inherited(self, monkeypatch):
        seen = {}

        def fake_run(args, **kwargs):
            seen.update(kwargs)
            return subprocess.CompletedProcess(args, 0)

        monkeypatch.setattr(subprocess, 'run', fake_run)
        SubprocessRunner().run(['useradd', 'alice'], quiet=False)
        assert seen == {'stdout': None, 'stderr': None}

    def test_spawn_failure(self, monkeypatch):
        def fake_run(args, **kwargs):
            raise FileNotFoundError(args[0])

        monkeypatch.setattr(subprocess, 'run', fake_run)
        with pytest.raises(CommandSpawnError) as e:
            SubprocessRunner().run(['mkfs.ext4', '/tmp/x'])
        assert e.value.command == 'mkfs.ext4 /tmp/x'
        assert isinstance(e.value.__cause__, FileNotFoundError)


def test_dry_run_only_logs(monkeypatch, caplog):
    def fake_run(args, **kwargs):
        raise AssertionError('dry run must not spawn %s' % args)

    monkeypatch.setattr(subprocess, 'run', fake_run)
    with caplog.at_level(logging.INFO, logger='mkwebuser'):
        status = DryRunRunner().run(['userdel', '-r', '-f', 'alice'])
    assert status.success
    assert 'Would run: userdel -r -f alice' in caplog.messages
