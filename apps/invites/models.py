# ==========================================
# apps/invites/models.py
# ==========================================

from django.conf import settings
from django.db import models
from django.utils import timezone

from apps.accounts.models import UserRole


class InviteCode(models.Model):
    """Invite code granting a role; binds to one device on activation."""

    code = models.CharField(max_length=40, primary_key=True)
    role = models.CharField(max_length=20, choices=UserRole.choices)
    created_for = models.CharField(max_length=200, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_invite_codes',
    )
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    expires_at = models.DateTimeField()

    # Activation state: bound_device is set iff is_used
    is_used = models.BooleanField(default=False)
    used_at = models.DateTimeField(null=True, blank=True)
    bound_device = models.JSONField(null=True, blank=True)
    activated_by = models.JSONField(null=True, blank=True)

    max_uses = models.PositiveIntegerField(default=1)
    current_uses = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'invite_codes'
        indexes = [
            models.Index(fields=['role', 'is_used'], name='invite_codes_role_used_idx'),
            models.Index(fields=['expires_at'], name='invite_codes_expires_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return self.code

    @property
    def is_expired(self):
        return timezone.now() > self.expires_at

    @property
    def is_exhausted(self):
        return self.current_uses >= self.max_uses

    @property
    def remaining_uses(self):
        return max(0, self.max_uses - self.current_uses)
