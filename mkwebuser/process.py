from abc import ABC
from abc import abstractmethod
from collections import namedtuple
import logging
import shlex
import subprocess

from mkwebuser.exceptions import CommandSpawnError

logger = logging.getLogger(__name__)


class ExitStatus(namedtuple('ExitStatus', ['returncode'])):
    """Outcome of a finished child process.

    Follows the subprocess convention: a negative returncode is the
    number of the signal that terminated the process.
    """
    __slots__ = ()

    @property
    def success(self):
        return self.returncode == 0

    @property
    def code(self):
        return None if self.returncode < 0 else self.returncode

    @property
    def signal(self):
        return -self.returncode if self.returncode < 0 else None

    def __str__(self):
        if self.signal is not None:
            return 'killed by signal %d' % self.signal
        return 'exit status %d' % self.returncode


def format_command(args):
    return ' '.join(shlex.quote(a) for a in args)


class CommandRunner(ABC):
    @abstractmethod
    def run(self, args, quiet=True):
        """Runs `args` to completion and returns its ExitStatus."""
        raise NotImplementedError()


class SubprocessRunner(CommandRunner):
    def run(self, args, quiet=True):
        cmd = format_command(args)
        logger.debug('Running command `%s`' % cmd)
        sink = subprocess.DEVNULL if quiet else None
        try:
            proc = subprocess.run(args, stdout=sink, stderr=sink)
        except OSError as e:
            raise CommandSpawnError(cmd) from e
        status = ExitStatus(proc.returncode)
        logger.debug('`%s` finished with %s' % (cmd, status))
        return status


class DryRunRunner(CommandRunner):
    def run(self, args, quiet=True):
        logger.info('Would run: %s' % format_command(args))
        return ExitStatus(0)
