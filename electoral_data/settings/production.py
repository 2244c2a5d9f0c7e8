# electoral_data/settings/production.py
from .base import *

DEBUG = False

# Sécurité renforcée
SECURE_SSL_REDIRECT = True
SECURE_HSTS_SECONDS = 31536000
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = 'DENY'
CSRF_COOKIE_SECURE = True
SESSION_COOKIE_SECURE = True

# Logging pour production
LOGGING['handlers']['file']['filename'] = '/var/log/electoral_data/django.log'

# Admins
ADMINS = [
    ('Admin', os.environ.get('ADMIN_EMAIL', 'admin@elections.cm')),
]

MANAGERS = ADMINS
