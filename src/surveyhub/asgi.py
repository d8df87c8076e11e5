"""ASGI config for the surveyhub project."""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "surveyhub.settings")

application = get_asgi_application()
