"""
OpsTrack — Test Settings

Fast, self-contained configuration for pytest. Activated by:
  DJANGO_SETTINGS_MODULE=config.settings.test

Runs on SQLite unless DATABASE_URL points elsewhere. Tests marked
`postgres` (threaded concurrency) only run against PostgreSQL.

@file config/settings/test.py
"""

import tempfile

from .base import *  # noqa: F401, F403

DEBUG = False

SECRET_KEY = 'test-secret-key-not-for-production'

DATABASES = {
    'default': env.db('DATABASE_URL', default='sqlite:///:memory:'),  # noqa: F405
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

MEDIA_ROOT = tempfile.mkdtemp(prefix='opstrack-test-media-')

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True

REST_FRAMEWORK['DEFAULT_THROTTLE_CLASSES'] = []  # noqa: F405

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

LOGGING['loggers']['opstrack']['level'] = 'WARNING'  # noqa: F405
