from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
import uuid


class UserRole(models.TextChoices):
    STUDENT = 'student', 'Student'
    CORE_MEMBER = 'core_member', 'Core Member'
    ADMIN = 'admin', 'Admin'


class UserManager(BaseUserManager):
    """Custom user manager for email-based authentication."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')

        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', UserRole.ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """Identity-provider account with a ministry role."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255, db_index=True)
    display_name = models.CharField(max_length=100, blank=True)
    campus = models.CharField(max_length=100, blank=True)

    # Role is only changed by the escalation policy
    role = models.CharField(max_length=20, choices=UserRole.choices, default=UserRole.STUDENT)
    invite_code_used = models.CharField(max_length=40, blank=True)
    role_upgraded_at = models.DateTimeField(null=True, blank=True)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    last_login = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'users'
        indexes = [
            models.Index(fields=['email'], name='users_email_idx'),
            models.Index(fields=['role'], name='users_role_idx'),
        ]

    def __str__(self):
        return self.email

    def get_display_name(self):
        """Return display name or email prefix."""
        return self.display_name or self.email.split('@')[0]

    def identity(self):
        """Identity snapshot as stored in sessions and invite codes."""
        return {
            'name': self.get_display_name(),
            'campus': self.campus,
            'email': self.email,
        }


class RoleChange(models.Model):
    """Append-only audit entry for one role change."""

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='role_history')
    previous_role = models.CharField(max_length=20, choices=UserRole.choices)
    new_role = models.CharField(max_length=20, choices=UserRole.choices)
    upgraded_at = models.DateTimeField(auto_now_add=True)
    code_used = models.CharField(max_length=40, blank=True)

    class Meta:
        db_table = 'role_changes'
        indexes = [
            models.Index(fields=['user', 'upgraded_at'], name='role_changes_user_date_idx'),
        ]
        ordering = ['upgraded_at', 'id']

    def __str__(self):
        return f"{self.user}: {self.previous_role} -> {self.new_role}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError('Role history entries cannot be modified')
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError('Role history entries cannot be deleted')
