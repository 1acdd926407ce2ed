# Generated manually for events app

import uuid
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Event',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('date', models.DateField()),
                ('time', models.TimeField(blank=True, null=True)),
                ('location', models.CharField(blank=True, max_length=200)),
                ('organizer', models.CharField(blank=True, max_length=100)),
                ('category', models.CharField(choices=[('worship', 'Worship'), ('study', 'Bible Study'), ('fellowship', 'Fellowship'), ('blending', 'Blending'), ('prayer', 'Prayer')], max_length=20)),
                ('max_attendees', models.PositiveIntegerField(blank=True, null=True, validators=[MinValueValidator(1)])),
                ('attendees', models.JSONField(blank=True, default=list)),
                ('waiting_list', models.JSONField(blank=True, default=list)),
                ('is_published', models.BooleanField(default=True)),
                ('requirements', models.TextField(blank=True)),
                ('contact_info', models.CharField(blank=True, max_length=200)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('organizer_user', models.ForeignKey(db_column='organizer_id', on_delete=django.db.models.deletion.CASCADE, related_name='organized_events', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'events',
                'ordering': ['date', 'time'],
                'indexes': [
                    models.Index(fields=['is_published', 'date'], name='events_published_date_idx'),
                    models.Index(fields=['organizer_user', 'date'], name='events_organizer_date_idx'),
                    models.Index(fields=['category'], name='events_category_idx'),
                ],
            },
        ),
    ]
