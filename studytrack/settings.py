# studytrack/settings.py
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-only-insecure-key")
DEBUG = os.environ.get("DJANGO_DEBUG", "false").lower() == "true"
ALLOWED_HOSTS = [h for h in os.environ.get("DJANGO_ALLOWED_HOSTS", "*").split(",") if h]

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "progress",
    "activities",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "studytrack.urls"
WSGI_APPLICATION = "studytrack.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("STUDYTRACK_DB_PATH", str(BASE_DIR / "db.sqlite3")),
        "CONN_MAX_AGE": int(os.environ.get("STUDYTRACK_CONN_MAX_AGE", "0")),
        # Take the write lock at BEGIN so concurrent find-or-create calls queue instead of failing.
        "OPTIONS": {"transaction_mode": "IMMEDIATE", "timeout": 20},
    }
}
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

USE_TZ = True
TIME_ZONE = "UTC"

# Repeated (user, item, action) events inside this trailing window collapse into one Activity.
ACTIVITY_DEDUP_WINDOW_SECONDS = float(os.environ.get("ACTIVITY_DEDUP_WINDOW_SECONDS", "5"))

# Header carrying the subject identifier issued by the upstream identity provider.
IDENTITY_SUBJECT_HEADER = os.environ.get("IDENTITY_SUBJECT_HEADER", "X-User-Sub")

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "studytrack.authentication.SubjectHeaderAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticated",
    ],
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "UNAUTHENTICATED_USER": None,
}

LOG_LEVEL = os.environ.get("STUDYTRACK_LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "plain"},
    },
    "loggers": {
        "studytrack": {"handlers": ["console"], "level": LOG_LEVEL},
        "progress": {"handlers": ["console"], "level": LOG_LEVEL},
        "activities": {"handlers": ["console"], "level": LOG_LEVEL},
    },
}
