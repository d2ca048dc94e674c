"""
Celery configuration for background tasks.

Used for best-effort order annotation after a license is issued.
"""
import os

from celery import Celery

# Set default Django settings module
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "LicenseGateway.settings.base")

app = Celery("LicenseGateway")

# Load configuration from Django settings
app.config_from_object("django.conf:settings", namespace="CELERY")

# Auto-discover tasks from all installed apps
app.autodiscover_tasks()
