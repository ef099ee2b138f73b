import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Resource',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('doi', models.CharField(blank=True, help_text='Registered DOI (e.g. 10.5880/GFZ.1.2024.001)', max_length=255, null=True, unique=True)),
                ('title', models.CharField(help_text='Main title', max_length=1000)),
                ('description', models.TextField(blank=True)),
                ('resource_type', models.CharField(choices=[('Dataset', 'Dataset'), ('PhysicalObject', 'Physical Object'), ('Software', 'Software'), ('Collection', 'Collection'), ('Text', 'Text'), ('Other', 'Other')], default='Dataset', max_length=50)),
                ('publisher', models.CharField(blank=True, max_length=255)),
                ('publication_year', models.PositiveIntegerField(blank=True, null=True)),
                ('version', models.CharField(blank=True, max_length=50)),
                ('language', models.CharField(blank=True, default='en', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='resources', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'resources',
                'ordering': ['-created_at'],
            },
        ),
    ]
