"""WSGI entry point for the back-office ledger."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backoffice_site.settings")

application = get_wsgi_application()
