"""WSGI config for the rodada project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "rodada.settings")

application = get_wsgi_application()
