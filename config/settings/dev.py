"""Development settings for the Vista project.

Extends the base settings with debug mode, permissive hosts, the console
email backend and human readable log lines. Do not use these settings in
production!
"""

from .base import *  # noqa: F401,F403

DEBUG = True

ALLOWED_HOSTS = ['*']

EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

# Key-value log lines instead of JSON
LOGGING["handlers"]["console"]["formatter"] = "console"  # noqa: F405
