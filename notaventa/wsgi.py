"""
WSGI config for notaventa project.

It exposes the WSGI callable as a module-level variable named ``application``.

For more information on this file, see
https://docs.djangoproject.com/en/4.2/howto/deployment/wsgi/
"""

import logging
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'notaventa.settings')

# Initialize OpenTelemetry before Django application
try:
    from notaventa.otel import setup_otel
    setup_otel()
except Exception as e:
    logging.getLogger(__name__).warning(f"Failed to initialize OpenTelemetry: {e}")

application = get_wsgi_application()
