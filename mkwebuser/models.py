from collections import OrderedDict
from collections import namedtuple

import simplejson as json


class ProvisionRequest(namedtuple('ProvisionRequest',
                                  ['username', 'base_directory',
                                   'quota_mb'])):
    __slots__ = ()


class Account(namedtuple('Account',
                         ['username', 'base_directory', 'home_directory'])):
    __slots__ = ()

    @classmethod
    def from_request(cls, request):
        home = '{}/{}'.format(request.base_directory, request.username)
        return cls(request.username, request.base_directory, home)


class Volume(namedtuple('Volume', ['name', 'path', 'size_mb'])):
    __slots__ = ()

    @classmethod
    def for_account(cls, account, name, size_mb):
        path = '{}/{}'.format(account.home_directory, name)
        return cls(name, path, size_mb)


class ProvisionResult(namedtuple('ProvisionResult', ['account', 'volume'])):
    __slots__ = ()

    _jsonattrs_ = (
        ('username', lambda r: r.account.username),
        ('base_directory', lambda r: r.account.base_directory),
        ('home_directory', lambda r: r.account.home_directory),
        ('volume', lambda r: r.volume.name),
        ('path', lambda r: r.volume.path),
        ('size_mb', lambda r: r.volume.size_mb),
    )

    def to_dict(self):
        return OrderedDict((k, get(self)) for k, get in self._jsonattrs_)

    def to_json(self):
        return json.dumps(self.to_dict(), indent=2)

    def __str__(self):
        return 'User {user}, Volume {space}, Size {size}'.format(
            user=self.account.username,
            space=self.volume.name,
            size=self.volume.size_mb,
        )
