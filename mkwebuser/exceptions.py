from enum import Enum
from enum import unique


class MkWebUserError(RuntimeError):
    pass


class InvalidInput(MkWebUserError, ValueError):
    def __init__(self, field, message=None):
        self.field = field
        if not message:
            message = 'Invalid value for "%s".' % field
        self.message = message
        super().__init__(message)


class ConfigurationError(MkWebUserError):
    pass


class UnknownConfigFileFormat(ConfigurationError):
    pass


class DecodeError(ValueError):
    pass


class CommandSpawnError(MkWebUserError):
    def __init__(self, command, message=None):
        self.command = command
        if not message:
            message = 'Could not run `%s`' % command
        self.message = message
        super().__init__(message)


@unique
class AccountFailureCause(Enum):
    # https://linux.die.net/man/8/useradd
    passwd_update = 'Unable to update password file'
    invalid_syntax = 'Invalid command syntax'
    invalid_argument = 'Invalid argument to option'
    uid_in_use = 'UID already in use'
    no_such_group = 'The specified group does not exist'
    username_in_use = 'Username already in use'
    group_update = 'Failed to update group file'
    home_creation = 'Failed to create home directory'
    mail_spool = 'Failed to create mail spool'
    selinux_mapping = 'Failed to update SELinux user mapping'
    signalled = 'Process terminated by signal'
    unknown = 'Unknown'
    undetermined = 'Unable to get exit status'

    def __str__(self):
        return self.value


USERADD_EXIT_CODES = {
    1: AccountFailureCause.passwd_update,
    2: AccountFailureCause.invalid_syntax,
    3: AccountFailureCause.invalid_argument,
    4: AccountFailureCause.uid_in_use,
    6: AccountFailureCause.no_such_group,
    9: AccountFailureCause.username_in_use,
    10: AccountFailureCause.group_update,
    12: AccountFailureCause.home_creation,
    13: AccountFailureCause.mail_spool,
    14: AccountFailureCause.selinux_mapping,
}


def cause_for_status(status):
    """Maps a failed useradd exit status to its cause.

    ``status`` of None means the outcome could not be observed at all.
    """
    if status is None:
        return AccountFailureCause.undetermined
    if status.code is None:
        return AccountFailureCause.signalled
    return USERADD_EXIT_CODES.get(status.code, AccountFailureCause.unknown)


class ProvisionError(MkWebUserError):
    STAGE = 'provision'
    # set once every compensating step has succeeded
    rolled_back = False

    def __init__(self, reason, message=None):
        self.reason = reason
        if not message:
            message = '%s failed: %s' % (self.STAGE, reason)
        self.message = message
        super().__init__(message)


class AccountCreationFailed(ProvisionError):
    STAGE = 'User creation'

    def __init__(self, cause, message=None):
        if not isinstance(cause, AccountFailureCause):
            raise ValueError('Incompatible failure cause.')
        self.cause = cause
        super().__init__(cause, message=message)


class VolumeAllocationFailed(ProvisionError):
    STAGE = 'Space allocation'


class VolumeFormatFailed(ProvisionError):
    STAGE = 'Space formatting'
