from django.contrib import admin
from .models import Resource


@admin.register(Resource)
class ResourceAdmin(admin.ModelAdmin):
    list_display = ('title', 'doi', 'resource_type', 'publication_year', 'created_at')
    list_filter = ('resource_type', 'created_at')
    search_fields = ('title', 'doi')
    readonly_fields = ('created_at', 'updated_at')
