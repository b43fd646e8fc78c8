def useradd_args(username, base_directory, shell):
    return [
        'useradd',
        '--base-dir', base_directory,
        '--comment', 'mkwebuser {}'.format(username),
        '--inactive', '-1',  # never mark user as inactive
        '--shell', shell,
        '--create-home',
        username,
    ]


def userdel_args(username):
    return ['userdel', '-r', '-f', username]


def dd_args(path, quota_mb):
    return [
        'dd',
        'if=/dev/zero',
        'of={}'.format(path),
        'bs={}M'.format(quota_mb),
        'count=1',
    ]


def mkfs_args(path, fs_type):
    return ['mkfs.{}'.format(fs_type), path]
