"""
URL configuration for the provision store backend.

All API routes live under /api/ and accept an optional trailing slash.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Provision Store Admin Panel"
admin.site.site_title = "Provision Store Admin Portal"
admin.site.index_title = "Welcome to the Provision Store Admin Portal"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('backend.catalog.urls')),
    path('api/', include('backend.billing.urls')),
    path('api/', include('backend.reports.urls')),
]
