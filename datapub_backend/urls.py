"""
URL configuration for datapub_backend project.

Order matters: the curator API and legacy routes are matched before the
catch-all persistent identifier route of the public landing pages.
"""
from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse


def custom_404(request, exception=None):
    """Return JSON for 404 errors instead of HTML."""
    return JsonResponse({
        'message': 'The requested resource was not found.',
        'error': 'not_found',
    }, status=404)


def custom_500(request):
    """Return JSON for 500 errors instead of HTML."""
    return JsonResponse({
        'message': 'An unexpected error occurred.',
        'error': 'server_error',
    }, status=500)


urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('datapub_backend.api_urls')),
    # Curator landing page management: /resources/{id}/landing-page[/preview]
    path('resources/', include('landing_pages.urls')),
    # Public landing pages: /datasets/{id}, /draft-{id}/{slug}, /{doiPrefix}/{slug}
    path('', include('landing_pages.public_urls')),
]

# Custom error handlers - return JSON instead of HTML
handler404 = custom_404
handler500 = custom_500
