"""
WSGI config for DeviceKeyService project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "DeviceKeyService.settings.prod")

application = get_wsgi_application()
