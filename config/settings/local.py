from .base import *  # noqa
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
DEBUG = True
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="Lk3vQ9wZr7NfT2hXc5YpB8mJ4sD1gA6eU0oW3nR7tK9yH2qV5z",
)
ALLOWED_HOSTS = ["localhost", "0.0.0.0", "127.0.0.1"] + env.list("DJANGO_ALLOWED_HOSTS", default=[])

# LOGGING
# ------------------------------------------------------------------------------
LOGGING["loggers"]["formentry"]["level"] = env("FORMENTRY_LOG_LEVEL", default="DEBUG")  # noqa: F405
