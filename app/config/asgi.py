"""
ASGI config for bizledger.

Exposes the ASGI callable as a module-level variable named ``application``
for uvicorn. The API is plain HTTP, so Django's handler is used directly.

For more information on this file, see:
https://docs.djangoproject.com/en/5.2/howto/deployment/asgi/
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_asgi_application()
