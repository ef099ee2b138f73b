"""
URL routing for curator landing page management.
Included at /resources/.
"""
from django.urls import path

from .views import landing_page_detail, landing_page_preview

urlpatterns = [
    path('<int:resource_id>/landing-page', landing_page_detail, name='landing-page-detail'),
    path('<int:resource_id>/landing-page/preview', landing_page_preview, name='landing-page-preview'),
]
