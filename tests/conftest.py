import logging
from mkwebuser.process import CommandRunner
from mkwebuser.process import ExitStatus
from mkwebuser.exceptions import CommandSpawnError
import pytest


class FakeRunner(CommandRunner):
    """Records commands; answers with canned exit statuses by program name.

    A value of None for a program makes it fail to spawn.
    """

    def __init__(self, **returncodes):
        self.returncodes = returncodes
        self.calls = []

    def run(self, args, quiet=True):
        self.calls.append((list(args), quiet))
        program = args[0].replace('.', '_')
        if program in self.returncodes and self.returncodes[program] is None:
            raise CommandSpawnError(args[0])
        return ExitStatus(self.returncodes.get(program, 0))

    @property
    def programs(self):
        return [args[0] for args, _ in self.calls]

    def calls_to(self, program):
        return [args for args, _ in self.calls if args[0] == program]


@pytest.fixture
def make_runner():
    return FakeRunner


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture(autouse=True)
def reset_log_level():
    yield
    logging.getLogger('mkwebuser').setLevel(logging.NOTSET)
