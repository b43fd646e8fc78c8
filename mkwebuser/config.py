from abc import ABC
from abc import abstractmethod
from pathlib import Path
import os

import simplejson as json
import yaml

from mkwebuser.exceptions import ConfigurationError
from mkwebuser.exceptions import DecodeError
from mkwebuser.exceptions import UnknownConfigFileFormat

USER_CONF_DIRNAME = '.mkwebuser'
USER_CONF_FILENAME = 'config.yml'
CONF_ENVVAR = 'MKWEBUSER_CONFIG'

DEFAULT_BASE_DIR = '/home'
DEFAULT_QUOTA_MB = 1024
DEFAULT_SHELL = '/usr/sbin/nologin'
DEFAULT_VOLUME_NAME = 'volume'
DEFAULT_FS_TYPE = 'ext4'

DEFAULTS = {
    'base': None,
    'quota': None,
    'shell': DEFAULT_SHELL,
    'volume_name': DEFAULT_VOLUME_NAME,
    'fs_type': DEFAULT_FS_TYPE,
    'show_diagnostics': False,
    'rollback': False,
}

# Accepted value types; None only where the default is None
CONF_TYPES = {
    'base': str,
    'quota': int,
    'shell': str,
    'volume_name': str,
    'fs_type': str,
    'show_diagnostics': bool,
    'rollback': bool,
}


def get_user_conf_dir():
    return Path.home().joinpath(USER_CONF_DIRNAME).as_posix()


def get_user_conf_file():
    return Path(get_user_conf_dir()).joinpath(USER_CONF_FILENAME).as_posix()


def json_load(fp):
    """Thin wrapper around json.load()."""
    try:
        obj = json.load(fp)
    except json.JSONDecodeError as e:
        raise DecodeError(fp) from e
    if not isinstance(obj, dict):
        raise DecodeError(fp)
    return obj


def _is_blank(text):
    return all(not line.strip() or line.strip().startswith('#')
               for line in text.splitlines())


def yaml_load(fp):
    """Thin wrapper around yaml.safe_load(); an empty document is {}."""
    text = fp.read()
    try:
        obj = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DecodeError(fp) from e
    if obj is None and _is_blank(text):
        return {}
    if not isinstance(obj, dict):
        raise DecodeError(fp)
    return obj


class _ConfigFile(ABC):
    def __init__(self, name, filename):
        self.name = name
        self.filename = filename
        self.refresh()

    @staticmethod
    @abstractmethod
    def get_loader():
        raise NotImplementedError()

    @property
    def contents(self):
        return self._contents

    def refresh(self):
        try:
            with open(self.filename, 'r') as f:
                loader = self.get_loader()
                self._contents = loader(f)
        except (OSError, DecodeError) as e:
            raise ConfigurationError(
                'Could not read configuration from %s' % self.filename
            ) from e


class JSONConfigFile(_ConfigFile):
    @staticmethod
    def get_loader():
        return json_load


class YAMLConfigFile(_ConfigFile):
    @staticmethod
    def get_loader():
        return yaml_load


# JSON first: every JSON object is also valid YAML
AVAILABLE_FORMATS = (('json', JSONConfigFile), ('yaml', YAMLConfigFile))


def ConfigFile(name, filename):
    """Factory for <Type>ConfigFile objects."""
    for fmt, cls in AVAILABLE_FORMATS:
        open_fn = cls.get_loader()
        try:
            with open(filename) as f:
                open_fn(f)
                return cls(name, filename)
        except DecodeError:
            continue
        except OSError as e:
            raise ConfigurationError(
                'Could not open configuration file %s' % filename
            ) from e

    raise UnknownConfigFileFormat(filename)


def find_conf_file(filename=None):
    """Returns the configuration file to use, if any.

    An explicit filename wins, then $MKWEBUSER_CONFIG, then the user
    configuration file when it exists.
    """
    if filename:
        return filename
    from_env = os.environ.get(CONF_ENVVAR)
    if from_env:
        return from_env
    user_conf = get_user_conf_file()
    if os.path.exists(user_conf):
        return user_conf
    return None


def load(filename=None):
    """Loads settings layered over DEFAULTS."""
    conf = DEFAULTS.copy()
    filename = find_conf_file(filename)
    if filename is None:
        return conf

    contents = ConfigFile(os.path.basename(filename), filename).contents
    unknown = sorted(str(k) for k in contents if k not in DEFAULTS)
    if unknown:
        raise ConfigurationError(
            'Unknown configuration keys in %s: %s'
            '' % (filename, ', '.join(unknown))
        )
    for key, value in contents.items():
        check_value(key, value, filename)
    conf.update(contents)
    return conf


def check_value(key, value, filename=None):
    if value is None and DEFAULTS[key] is None:
        return
    expected = CONF_TYPES[key]
    # bool is an int subclass
    if isinstance(value, bool) and expected is not bool:
        valid = False
    else:
        valid = isinstance(value, expected)
    if not valid:
        raise ConfigurationError(
            'Invalid value for "%s" in %s: expected %s, got %r'
            '' % (key, filename, expected.__name__, value)
        )


def merge(conf, overrides):
    """Applies command-line overrides; None means not given."""
    conf = conf.copy()
    conf.update((k, v) for k, v in overrides.items() if v is not None)
    return conf
