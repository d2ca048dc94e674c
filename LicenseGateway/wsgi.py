"""
WSGI config for LicenseGateway project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "LicenseGateway.settings.prod")

application = get_wsgi_application()
