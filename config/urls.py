"""
URL configuration for the listings project.

The `urlpatterns` list routes URLs to views.
"""

from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from django.http import JsonResponse
from django.utils import timezone


def health(request):
    return JsonResponse({
        "status": "OK",
        "message": "Server is running",
        "timestamp": timezone.now().isoformat(),
    })


urlpatterns = [
    path('api/health/', health, name='health'),

    # Admin Interface
    path('admin/', admin.site.urls),

    # Accounts (Register, Login, Logout, Profile)
    path('api/', include('accounts.urls')),

    # Listing wizard, browsing and host listings
    path('api/listings/', include('listings.urls')),
]

# Serve static and media files during development ONLY
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
