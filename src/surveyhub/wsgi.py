"""WSGI config for the surveyhub project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "surveyhub.settings")

application = get_wsgi_application()
