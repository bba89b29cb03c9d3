"""
Django settings for gst_project.

Values that differ between machines are read from the environment,
everything else is a plain module-level constant.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


SECRET_KEY = os.environ.get(
    "GST_SECRET_KEY", "django-insecure-gst-billing-dev-key")
DEBUG = env_bool("GST_DEBUG", True)
ALLOWED_HOSTS = [
    h.strip() for h in os.environ.get(
        "GST_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if h.strip()
]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "billing_core",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    # attaches request.owner for the billing views
    "billing_core.middleware.CurrentOwnerMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "gst_project.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "gst_project.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("GST_DB_PATH", str(BASE_DIR / "db.sqlite3")),
        "OPTIONS": {
            # Writers take the database lock at BEGIN and wait for it
            "transaction_mode": "IMMEDIATE",
            "timeout": int(os.environ.get("GST_DB_TIMEOUT", "20")),
        },
        "TEST": {
            # File-backed so worker threads share one test database
            "NAME": os.environ.get(
                "GST_TEST_DB_PATH", str(BASE_DIR / "test_db.sqlite3")),
        },
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-in"
TIME_ZONE = os.environ.get("GST_TIME_ZONE", "Asia/Kolkata")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"

# ---------- Celery ----------
# read by gst_project/celery.py through the CELERY_ namespace
CELERY_BROKER_URL = os.environ.get(
    "GST_CELERY_BROKER_URL", "redis://localhost:6379/0")
CELERY_RESULT_BACKEND = os.environ.get("GST_CELERY_RESULT_BACKEND")
CELERY_TASK_ALWAYS_EAGER = env_bool("GST_CELERY_EAGER", False)
CELERY_TASK_SERIALIZER = "json"
CELERY_ACCEPT_CONTENT = ["json"]

# ---------- Billing ----------
BILLING = {
    # challans carry no tax rate, conversion applies this one
    "DEFAULT_CHALLAN_GST_RATE": int(
        os.environ.get("GST_DEFAULT_CHALLAN_GST_RATE", "5")),
    "ALLOWED_GST_RATES": (0, 5, 12, 18, 28),
    "ALLOCATION_MAX_ATTEMPTS": 5,
    # seconds
    "ALLOCATION_TIMEOUT": 10,
}

# ---------- Logging ----------
LOG_LEVEL = os.environ.get("GST_LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "billing_core": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
}
