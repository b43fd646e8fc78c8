from mkwebuser import __version__
from mkwebuser import config
from mkwebuser.cmd.exceptions import ProvisionAbort
from mkwebuser.cmd.logger import LEVEL_NAMES
from mkwebuser.cmd.logger import set_log_level
from mkwebuser.exceptions import MkWebUserError
from mkwebuser.process import DryRunRunner
from mkwebuser.process import SubprocessRunner
from mkwebuser.provisioner import WebUserProvisioner
from click.core import ParameterSource
from terminaltables import AsciiTable
import abc
import click


### formatters ###
class DisplayFormat(abc.ABC):
    @classmethod
    @abc.abstractmethod
    def format(cls, data, **kwargs):
        """A ProvisionResult."""
        raise NotImplementedError(cls.__name__)


class ResultTextFormat(DisplayFormat):
    @classmethod
    def format(cls, data, **kwargs):
        return '[SUCCESS] {}'.format(data)


class ResultJSONFormat(DisplayFormat):
    @classmethod
    def format(cls, data, **kwargs):
        return data.to_json()


class ResultTableFormat(DisplayFormat):
    HEADER_ROW = ('Property', 'Value')

    @classmethod
    def format(cls, data, **kwargs):
        rows = [(k, str(v)) for k, v in data.to_dict().items()]
        table = AsciiTable([cls.HEADER_ROW] + rows)
        return table.table


FORMATTERS = {
    'text': ResultTextFormat,
    'json': ResultJSONFormat,
    'table': ResultTableFormat,
}

# Flags that fall back to the configuration file when not given
_CONF_FLAGS = ('show_diagnostics', 'rollback')


@click.command(help='Creates a web user with a quota-limited volume.')
@click.option('--base', '-b', type=click.Path(file_okay=False),
              help='Base directory for home directories.'
                   '  [default: %s]' % config.DEFAULT_BASE_DIR)
@click.option('--username', '-u', required=True,
              help='Name of the user to create.')
@click.option('--quota', '-q', type=click.IntRange(min=1),
              help='Volume size in megabytes.'
                   '  [default: %d]' % config.DEFAULT_QUOTA_MB)
@click.option('--shell', help='Login shell for the user.'
                              '  [default: %s]' % config.DEFAULT_SHELL)
@click.option('--volume-name',
              help='File name of the volume in the home directory.'
                   '  [default: %s]' % config.DEFAULT_VOLUME_NAME)
@click.option('--fs-type', help='Filesystem to format the volume with.'
                                '  [default: %s]' % config.DEFAULT_FS_TYPE)
@click.option('--show-diagnostics/--quiet', default=False,
              help='Show output of dd and mkfs.')
@click.option('--rollback/--no-rollback', default=False,
              help='Remove the user again if the volume cannot be created.')
@click.option('--dry-run', is_flag=True,
              help='Print the commands instead of running them.')
@click.option('--format', 'format_', type=click.Choice(sorted(FORMATTERS)),
              default='text', help='Display format for the result.')
@click.option('--config-file', '-c', type=click.Path(dir_okay=False),
              help='YAML or JSON file with default settings.')
@click.option('--log-level', type=click.Choice(LEVEL_NAMES),
              help='Verbosity of progress output.')
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx, base, username, quota, shell, volume_name, fs_type,
        show_diagnostics, rollback, dry_run, format_, config_file,
        log_level):
    if log_level:
        set_log_level(log_level)

    overrides = dict(base=base, quota=quota, shell=shell,
                     volume_name=volume_name, fs_type=fs_type)
    for flag in _CONF_FLAGS:
        if ctx.get_parameter_source(flag) != ParameterSource.DEFAULT:
            overrides[flag] = ctx.params[flag]

    try:
        conf = config.merge(config.load(config_file), overrides)
    except MkWebUserError as e:
        raise ProvisionAbort(e) from e

    runner = (ctx.obj or {}).get('runner')
    if runner is None:
        runner = DryRunRunner() if dry_run else SubprocessRunner()
    provisioner = WebUserProvisioner(runner=runner, conf=conf)
    try:
        request = provisioner.resolve_request(username, base=conf['base'],
                                              quota=conf['quota'])
        result = provisioner.provision(request)
    except MkWebUserError as e:
        rolled_back = getattr(e, 'rolled_back', False)
        raise ProvisionAbort(e, username=username,
                             rolled_back=rolled_back) from e

    click.echo(FORMATTERS[format_].format(result))


if __name__ == '__main__':
    cli()
