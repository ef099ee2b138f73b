"""
Landing page model.

A landing page is the public, persistent-identifier-addressed face of a
resource. It starts as a draft and can be published exactly once; after that
it can neither be unpublished nor deleted, because the DOI pointing at it must
always resolve.
"""
import secrets
from urllib.parse import quote

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from resources.models import Resource

from .exceptions import CannotDeletePublished, CannotUnpublish

PREVIEW_TOKEN_LENGTH = 64


def generate_preview_token():
    """64 URL-safe characters."""
    return secrets.token_urlsafe(48)


class LandingPageQuerySet(models.QuerySet):

    def for_doi(self, doi_prefix, slug):
        return self.filter(doi_prefix=doi_prefix, slug=slug)

    def for_draft(self, resource_id, slug):
        # A page that already has a DOI must not stay reachable through its old draft path
        return self.filter(resource_id=resource_id, slug=slug, doi_prefix__isnull=True)


class LandingPage(models.Model):
    STATUS_DRAFT = 'draft'
    STATUS_PUBLISHED = 'published'
    STATUS_CHOICES = [
        (STATUS_DRAFT, 'Draft'),
        (STATUS_PUBLISHED, 'Published'),
    ]

    TEMPLATE_DEFAULT = 'default_gfz'
    TEMPLATE_IGSN = 'default_gfz_igsn'

    resource = models.OneToOneField(
        Resource,
        on_delete=models.PROTECT,
        related_name='landing_page'
    )
    template = models.CharField(max_length=50, choices=settings.LANDING_PAGE_TEMPLATES, default=TEMPLATE_DEFAULT)
    ftp_url = models.URLField(max_length=2048, blank=True, null=True, help_text="External download source")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_DRAFT)
    published_at = models.DateTimeField(null=True, blank=True)
    doi_prefix = models.CharField(
        max_length=255,
        blank=True,
        null=True,
        help_text="DOI captured from the resource; fixes the public URL"
    )
    slug = models.SlugField(max_length=255)
    preview_token = models.CharField(
        max_length=PREVIEW_TOKEN_LENGTH,
        unique=True,
        editable=False,
        default=generate_preview_token
    )
    view_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = LandingPageQuerySet.as_manager()

    class Meta:
        db_table = 'landing_pages'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['doi_prefix', 'slug'],
                condition=Q(doi_prefix__isnull=False),
                name='uq_landing_page_doi_prefix_slug',
            ),
            models.CheckConstraint(
                condition=(
                    Q(status='published', published_at__isnull=False)
                    | Q(status='draft', published_at__isnull=True)
                ),
                name='ck_landing_page_published_at_matches_status',
            ),
        ]
        indexes = [
            models.Index(fields=['doi_prefix', 'slug'], name='landing_pag_doi_pre_5c1f0e_idx'),
            models.Index(fields=['status'], name='landing_pag_status_8a2d4b_idx'),
        ]

    def __str__(self):
        return f"{self.public_path} ({self.status})"

    @property
    def is_published(self):
        return self.status == self.STATUS_PUBLISHED

    @property
    def public_path(self):
        if self.doi_prefix:
            return f"/{quote(self.doi_prefix, safe='/')}/{self.slug}"
        return f"/draft-{self.resource_id}/{self.slug}"

    @property
    def public_url(self):
        return f"{settings.LANDING_PAGE_BASE_URL}{self.public_path}"

    @property
    def preview_url(self):
        return f"{self.public_url}?preview={self.preview_token}"

    def publish(self):
        """Move to published; published_at is set once and never cleared."""
        self.status = self.STATUS_PUBLISHED
        if self.published_at is None:
            self.published_at = timezone.now()

    def save(self, *args, **kwargs):
        if self.pk and not self.is_published:
            stored_status = (
                LandingPage.objects.filter(pk=self.pk).values_list('status', flat=True).first()
            )
            if stored_status == self.STATUS_PUBLISHED:
                raise CannotUnpublish()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        if self.is_published:
            raise CannotDeletePublished()
        return super().delete(*args, **kwargs)
