import django.db.models.deletion
import landing_pages.models
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('resources', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='LandingPage',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('template', models.CharField(choices=[('default_gfz', 'GFZ Data Services'), ('default_gfz_igsn', 'GFZ Data Services (IGSN)')], default='default_gfz', max_length=50)),
                ('ftp_url', models.URLField(blank=True, help_text='External download source', max_length=2048, null=True)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('published', 'Published')], default='draft', max_length=20)),
                ('published_at', models.DateTimeField(blank=True, null=True)),
                ('doi_prefix', models.CharField(blank=True, help_text='DOI captured from the resource; fixes the public URL', max_length=255, null=True)),
                ('slug', models.SlugField(max_length=255)),
                ('preview_token', models.CharField(default=landing_pages.models.generate_preview_token, editable=False, max_length=64, unique=True)),
                ('view_count', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('resource', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='landing_page', to='resources.resource')),
            ],
            options={
                'db_table': 'landing_pages',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['doi_prefix', 'slug'], name='landing_pag_doi_pre_5c1f0e_idx'),
                    models.Index(fields=['status'], name='landing_pag_status_8a2d4b_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('doi_prefix__isnull', False)), fields=('doi_prefix', 'slug'), name='uq_landing_page_doi_prefix_slug'),
                    models.CheckConstraint(condition=models.Q(models.Q(('published_at__isnull', False), ('status', 'published')), models.Q(('published_at__isnull', True), ('status', 'draft')), _connector='OR'), name='ck_landing_page_published_at_matches_status'),
                ],
            },
        ),
    ]
