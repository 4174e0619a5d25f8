"""
URL configuration for olympics_platform project.

The admin site lives under ``/admin/`` and the JSON API under ``/api/``.
"""
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('olympics.urls')),
]
