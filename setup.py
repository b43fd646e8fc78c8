from setuptools import setup, find_packages
import configparser
import sys


INSTALL_REQUIRES = (
    'click>=8.0',
    'PyYAML',
    'simplejson',
    'terminaltables',
)
TEST_REQUIRES = ('pytest',)


setup_args = {}
try:
    config = configparser.ConfigParser()
    config.read('setup.cfg')
    setup_args = dict(config['metadata'])
except Exception as e:
    setup_args = {}
    print('Error reading setup.cfg: %s' % e, file=sys.stderr)

# Update everything from setup.cfg
setup_args.update(
    dict(
        packages=find_packages(exclude=('tests', 'tests.*')),
        python_requires='>=3.7',
        install_requires=list(INSTALL_REQUIRES),
        extras_require={'test': list(TEST_REQUIRES)},
        entry_points='''
        [console_scripts]
        mkwebuser=mkwebuser.cmd.main:cli
    ''',
    )
)


def format_setup_args(conf):
    try:
        conf = conf.copy()
        section = conf['classifiers']
        new_vals = list(filter(None, section.split('\n')))
        conf['classifiers'] = new_vals
    except KeyError:
        pass
    return conf


setup_args = format_setup_args(setup_args)
setup(**setup_args)
