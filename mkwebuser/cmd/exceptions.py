from mkwebuser import exceptions
import click


class Abort(click.ClickException):
    """Reports a failed run; exits with status 1."""

    def __init__(self, error, *args, **kwargs):
        self.error = error
        super().__init__(str(error))


class ProvisionAbort(Abort):
    _LEFTOVERS = ('User {user} was created but its volume was not;'
                  ' remove it manually (userdel -r {user}) before retrying.')

    def __init__(self, error, username=None, rolled_back=False):
        self.username = username
        self.rolled_back = rolled_back
        super().__init__(error)

    def format_message(self):
        msg = super().format_message()
        partial = isinstance(self.error, (exceptions.VolumeAllocationFailed,
                                          exceptions.VolumeFormatFailed))
        if partial and not self.rolled_back:
            msg += '\n' + self._LEFTOVERS.format(user=self.username)
        return msg
