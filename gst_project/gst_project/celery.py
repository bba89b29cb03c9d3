""" When you run Celery workers, "celery -A gst_project worker -l info"
    The -A gst_project means:
    Import gst_project/__init__.py →
    which exposes celery_app →  now Celery knows what to run. """
from __future__ import annotations
import os
from celery import Celery

# ensure Django settings are set for Celery
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "gst_project.settings")

# name should match your project package
celery_app = Celery("gst_project")

# read config from Django settings, using CELERY_ prefix
celery_app.config_from_object("django.conf:settings", namespace="CELERY")

# autoload tasks from installed apps
celery_app.autodiscover_tasks()
