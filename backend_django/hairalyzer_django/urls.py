"""
URL configuration for the Hairalyzer Django project.
"""
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

from hair_app import views

urlpatterns = [
    path('', views.api_root, name='api_root'),
    path('debug', views.debug_info, name='debug_info'),
    path('test-auth', views.test_auth, name='test_auth'),
    path('admin/', admin.site.urls),
    path('api/', include('hair_app.urls')),
]

# Serve media files in development
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
