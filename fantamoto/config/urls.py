"""
URL configuration for config project.

Only the Django admin is exposed; sync jobs run from management commands and
Prefect deployments.
"""
from django.contrib import admin
from django.urls import path

urlpatterns = [
    path('admin/', admin.site.urls),
]
