"""
WSGI config for the Hairalyzer project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'hairalyzer_django.settings')

application = get_wsgi_application()
