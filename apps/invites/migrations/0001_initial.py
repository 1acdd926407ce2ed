# Generated manually for invites app

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='InviteCode',
            fields=[
                ('code', models.CharField(max_length=40, primary_key=True, serialize=False)),
                ('role', models.CharField(choices=[('student', 'Student'), ('core_member', 'Core Member'), ('admin', 'Admin')], max_length=20)),
                ('created_for', models.CharField(blank=True, max_length=200)),
                ('description', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('expires_at', models.DateTimeField()),
                ('is_used', models.BooleanField(default=False)),
                ('used_at', models.DateTimeField(blank=True, null=True)),
                ('bound_device', models.JSONField(blank=True, null=True)),
                ('activated_by', models.JSONField(blank=True, null=True)),
                ('max_uses', models.PositiveIntegerField(default=1)),
                ('current_uses', models.PositiveIntegerField(default=0)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_invite_codes', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'invite_codes',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['role', 'is_used'], name='invite_codes_role_used_idx'),
                    models.Index(fields=['expires_at'], name='invite_codes_expires_idx'),
                ],
            },
        ),
    ]
