"""Settings used by the pytest suite."""

from config.settings.base import *  # noqa: F401,F403

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

XENDIT_SECRET_KEY = "xnd_test_secret"
XENDIT_WEBHOOK_TOKEN = "test-callback-token"
FRONTEND_URL = "http://frontend.test"
