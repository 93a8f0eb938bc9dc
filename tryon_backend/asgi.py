"""
ASGI config for tryon_backend.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'tryon_backend.settings')

application = get_asgi_application()
