# electoral_data/settings/development.py
from .base import *

DEBUG = True

ALLOWED_HOSTS = ['*']

# Database pour dev (SQLite si aucune base PostgreSQL n'est configurée)
if os.environ.get('DB_ENGINE') is None:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }

# Debug Toolbar
INSTALLED_APPS += ['debug_toolbar']
MIDDLEWARE += ['debug_toolbar.middleware.DebugToolbarMiddleware']
INTERNAL_IPS = ['127.0.0.1', 'localhost']

# CORS pour dev
CORS_ALLOW_ALL_ORIGINS = True

# Cache pour dev
CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

LOGGING['root']['level'] = 'DEBUG'
