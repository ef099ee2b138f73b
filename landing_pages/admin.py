from django.contrib import admin

from .cache import landing_page_cache
from .models import LandingPage


@admin.register(LandingPage)
class LandingPageAdmin(admin.ModelAdmin):
    list_display = ('resource', 'template', 'status', 'doi_prefix', 'slug', 'view_count', 'published_at')
    list_filter = ('status', 'template', 'published_at')
    search_fields = ('slug', 'doi_prefix', 'resource__title', 'resource__doi')
    readonly_fields = (
        'status', 'published_at', 'doi_prefix', 'slug', 'preview_token',
        'view_count', 'created_at', 'updated_at',
    )
    raw_id_fields = ('resource',)

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        landing_page_cache.invalidate(obj.resource_id)

    def has_delete_permission(self, request, obj=None):
        if obj is not None and obj.is_published:
            return False
        return super().has_delete_permission(request, obj)
