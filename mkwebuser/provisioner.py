import logging
import os

from mkwebuser import config
from mkwebuser import utils
from mkwebuser.exceptions import AccountCreationFailed
from mkwebuser.exceptions import CommandSpawnError
from mkwebuser.exceptions import InvalidInput
from mkwebuser.exceptions import MkWebUserError
from mkwebuser.exceptions import ProvisionError
from mkwebuser.exceptions import VolumeAllocationFailed
from mkwebuser.exceptions import VolumeFormatFailed
from mkwebuser.exceptions import cause_for_status
from mkwebuser.models import Account
from mkwebuser.models import ProvisionRequest
from mkwebuser.models import ProvisionResult
from mkwebuser.models import Volume
from mkwebuser.process import SubprocessRunner

# userdel(8): user does not exist
USERDEL_NO_SUCH_USER = 6


class WebUserProvisioner(object):
    """Creates a nologin account and a formatted quota volume for it.

    Steps run strictly in order and every failure is fatal. Side effects
    of completed steps are kept unless ``rollback`` is enabled in the
    configuration.
    """

    def __init__(self, runner=None, conf=None):
        self._runner = runner or SubprocessRunner()
        self._conf = config.DEFAULTS.copy()
        self._conf.update(conf or {})
        self._logger = logging.getLogger(__name__)

    @property
    def conf(self):
        return self._conf

    @property
    def runner(self):
        return self._runner

    @property
    def logger(self):
        return self._logger

    @property
    def quiet(self):
        return not self.conf.get('show_diagnostics')

    def resolve_request(self, username, base=None, quota=None):
        if not username:
            raise InvalidInput('username', 'Username must not be empty.')

        if base is not None and not isinstance(base, str):
            try:
                base = os.fsdecode(base)
            except (TypeError, UnicodeDecodeError):
                base = None
        base_directory = base or config.DEFAULT_BASE_DIR

        if quota is None:
            quota = config.DEFAULT_QUOTA_MB
        if isinstance(quota, bool) or not isinstance(quota, int):
            raise InvalidInput('quota', 'Quota must be a whole number of'
                                        ' megabytes.')
        if quota < 1:
            raise InvalidInput('quota', 'Quota must be at least 1M.')

        for key in ('shell', 'fs_type'):
            value = self.conf.get(key)
            if not value or not isinstance(value, str):
                raise InvalidInput(key, 'Invalid %s "%s".' % (key, value))

        name = self.conf.get('volume_name')
        if (not isinstance(name, str) or not name or '/' in name
                or name in ('.', '..')):
            raise InvalidInput('volume_name',
                               'Invalid volume name "%s".' % name)

        return ProvisionRequest(username, base_directory, quota)

    def create_account(self, request):
        args = utils.useradd_args(request.username, request.base_directory,
                                  self.conf.get('shell'))
        self.logger.debug('Creating user with command `%s`' % ' '.join(args))
        try:
            # useradd diagnostics always reach the terminal
            status = self.runner.run(args, quiet=False)
        except CommandSpawnError as e:
            raise AccountCreationFailed(cause_for_status(None)) from e
        if not status.success:
            raise AccountCreationFailed(cause_for_status(status))

        account = Account.from_request(request)
        self.logger.info('User created: {user} ({home})'.format(
            user=account.username, home=account.home_directory))
        return account

    def remove_account(self, account):
        status = self.runner.run(utils.userdel_args(account.username),
                                 quiet=self.quiet)
        if status.code == USERDEL_NO_SUCH_USER:
            self.logger.info("Ignoring non-existent user '%s'"
                             "" % account.username)
        elif not status.success:
            raise MkWebUserError('userdel %s: %s' % (account.username,
                                                    status))

    def allocate_volume(self, volume):
        try:
            status = self.runner.run(utils.dd_args(volume.path,
                                                   volume.size_mb),
                                     quiet=self.quiet)
        except CommandSpawnError as e:
            raise VolumeAllocationFailed('Unable to get exit status') from e
        if not status.success:
            raise VolumeAllocationFailed('dd %s' % status)
        self.logger.info('Space created: {size}M ({path})'.format(
            size=volume.size_mb, path=volume.path))

    def remove_volume(self, volume):
        try:
            os.remove(volume.path)
        except FileNotFoundError:
            self.logger.debug('Volume %s already gone' % volume.path)

    def format_volume(self, volume):
        fs_type = self.conf.get('fs_type')
        try:
            status = self.runner.run(utils.mkfs_args(volume.path, fs_type),
                                     quiet=self.quiet)
        except CommandSpawnError as e:
            raise VolumeFormatFailed('Unable to get exit status') from e
        if not status.success:
            raise VolumeFormatFailed('mkfs.%s %s' % (fs_type, status))
        self.logger.info('Space formatted: {fs} ({path})'.format(
            fs=fs_type, path=volume.path))

    def create_volume(self, account, quota_mb, undo=None):
        volume = Volume.for_account(account, self.conf.get('volume_name'),
                                    quota_mb)
        self.allocate_volume(volume)
        if undo is not None:
            undo.append(('volume %s' % volume.path,
                         lambda: self.remove_volume(volume)))
        self.format_volume(volume)
        return volume

    def rollback(self, undo):
        """Runs undo steps newest first; True when all of them succeeded."""
        self.logger.info('Rolling back changes...')
        complete = True
        for what, fn in reversed(undo):
            try:
                fn()
                self.logger.info('Removed %s' % what)
            except (OSError, MkWebUserError) as e:
                complete = False
                self.logger.warning('Could not remove %s: %s' % (what, e))
        return complete

    def provision(self, request):
        undo = [] if self.conf.get('rollback') else None
        account = self.create_account(request)
        if undo is not None:
            undo.append(('user %s' % account.username,
                         lambda: self.remove_account(account)))
        try:
            volume = self.create_volume(account, request.quota_mb, undo=undo)
        except ProvisionError as e:
            if undo:
                e.rolled_back = self.rollback(undo)
            raise
        return ProvisionResult(account, volume)
