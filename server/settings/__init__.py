"""Main settings file for the drive project.

Settings are split into components and environments and glued together
with django-split-settings. The environment is picked from ``DJANGO_ENV``.
"""

from os import environ

import django_stubs_ext
from split_settings.tools import include, optional

# Monkeypatching Django, so stubs will work for all generics,
# see: https://github.com/typeddjango/django-stubs/tree/master/ext
django_stubs_ext.monkeypatch()

_ENV = environ.setdefault('DJANGO_ENV', 'development')

_base_settings = (
    'components/common.py',
    'components/logging.py',
    'components/drive.py',
    'components/storages.py',
    # Select the right env:
    'environments/{0}.py'.format(_ENV),
    # Optionally override some settings:
    optional('environments/local.py'),
)

include(*_base_settings)
