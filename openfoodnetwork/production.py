from .settings import *  # import all defaults

import os

# Production overrides
DEBUG = False

SECRET_KEY = os.getenv("SECRET_KEY", "unsafe-production-key")

ALLOWED_HOSTS = [
    "api.openfoodnetwork.org",
    "openfoodnetwork.org",
    "127.0.0.1",
]

CSRF_TRUSTED_ORIGINS = [
    "https://openfoodnetwork.org",
    "https://api.openfoodnetwork.org",
]

CORS_ALLOWED_ORIGINS = [
    "https://openfoodnetwork.org",
]

SECURE_SSL_REDIRECT = True
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
CSRF_COOKIE_SECURE = True
SESSION_COOKIE_SECURE = True

STATIC_ROOT = os.path.join(BASE_DIR, "static")
MEDIA_ROOT = os.path.join(BASE_DIR, "media")
