"""
Resource model: the curated metadata record a landing page belongs to.
"""
from django.conf import settings
from django.db import models


class Resource(models.Model):
    """
    A research data resource curated in the editor.

    Only the fields the landing page and DataCite sync rely on live here; the
    full descriptive metadata is owned by the editor.
    """
    RESOURCE_TYPE_CHOICES = [
        ('Dataset', 'Dataset'),
        ('PhysicalObject', 'Physical Object'),
        ('Software', 'Software'),
        ('Collection', 'Collection'),
        ('Text', 'Text'),
        ('Other', 'Other'),
    ]

    doi = models.CharField(
        max_length=255,
        blank=True,
        null=True,
        unique=True,
        help_text="Registered DOI (e.g. 10.5880/GFZ.1.2024.001)"
    )
    title = models.CharField(max_length=1000, help_text="Main title")
    description = models.TextField(blank=True)
    resource_type = models.CharField(max_length=50, choices=RESOURCE_TYPE_CHOICES, default='Dataset')
    publisher = models.CharField(max_length=255, blank=True)
    publication_year = models.PositiveIntegerField(null=True, blank=True)
    version = models.CharField(max_length=50, blank=True)
    language = models.CharField(max_length=10, blank=True, default='en')
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='resources'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'resources'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.title} ({self.doi or 'no DOI'})"

    def save(self, *args, **kwargs):
        super().save(*args, **kwargs)
        # The rendered landing page embeds this record
        from landing_pages.cache import landing_page_cache
        landing_page_cache.invalidate(self.pk)

    @property
    def is_registered(self):
        """True once a DOI has been assigned."""
        return bool(self.doi)

    @property
    def is_physical_object(self):
        return self.resource_type == 'PhysicalObject'
