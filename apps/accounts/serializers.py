from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User, UserRole, RoleChange


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for profile display."""

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'display_name',
            'campus',
            'role',
            'invite_code_used',
            'role_upgraded_at',
            'created_at',
            'last_login',
        ]
        read_only_fields = [
            'id',
            'email',
            'role',
            'invite_code_used',
            'role_upgraded_at',
            'created_at',
            'last_login',
        ]


class UserRegistrationSerializer(serializers.ModelSerializer):
    """Serializer for user registration."""

    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    password_confirm = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )

    class Meta:
        model = User
        fields = ['email', 'password', 'password_confirm', 'display_name', 'campus']

    def validate(self, attrs):
        """Validate password confirmation."""
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({
                'password_confirm': 'Passwords do not match'
            })
        return attrs


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class UpgradeRoleSerializer(serializers.Serializer):
    """Serializer for upgrading the current user's role with an invite code."""

    invite_code = serializers.CharField(max_length=40, required=True)


class SetRoleSerializer(serializers.Serializer):
    """Serializer for an admin assigning a role."""

    role = serializers.ChoiceField(choices=UserRole.choices, required=True)


class RoleChangeSerializer(serializers.ModelSerializer):
    """One entry of a user's role history."""

    class Meta:
        model = RoleChange
        fields = ['previous_role', 'new_role', 'upgraded_at', 'code_used']
        read_only_fields = fields
