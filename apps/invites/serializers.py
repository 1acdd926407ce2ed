from rest_framework import serializers
from .models import InviteCode
from apps.accounts.models import User, UserRole


class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal user info for nested serialization."""

    display_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'email', 'display_name']
        read_only_fields = fields

    def get_display_name(self, obj):
        return obj.get_display_name()


class InviteCodeSerializer(serializers.ModelSerializer):
    """Main serializer for invite codes."""

    created_by = UserMinimalSerializer(read_only=True)
    is_expired = serializers.BooleanField(read_only=True)
    remaining_uses = serializers.IntegerField(read_only=True)

    class Meta:
        model = InviteCode
        fields = [
            'code',
            'role',
            'created_for',
            'created_by',
            'description',
            'created_at',
            'expires_at',
            'is_expired',
            'is_used',
            'used_at',
            'bound_device',
            'activated_by',
            'max_uses',
            'current_uses',
            'remaining_uses',
        ]
        read_only_fields = fields


class InviteCodeCreateSerializer(serializers.Serializer):
    """Serializer for generating an invite code."""

    role = serializers.ChoiceField(choices=UserRole.choices, required=True)
    created_for = serializers.CharField(max_length=200, required=True)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    max_uses = serializers.IntegerField(min_value=1, required=False, default=1)
    valid_days = serializers.IntegerField(min_value=1, required=False)


class InviteCodeFilterSerializer(serializers.Serializer):
    """Query parameters accepted by the invite code list."""

    role = serializers.ChoiceField(choices=UserRole.choices, required=False)
    state = serializers.ChoiceField(choices=['all', 'used', 'unused'], required=False, default='all')


class DeviceFingerprintSerializer(serializers.Serializer):
    """Fingerprint of the activating installation, supplied by the client."""

    device_id = serializers.CharField(max_length=100)
    brand = serializers.CharField(max_length=100, required=False, default='Unknown')
    model = serializers.CharField(max_length=100, required=False, default='Unknown')
    os_version = serializers.CharField(max_length=100, required=False, default='Unknown')
    app_id = serializers.CharField(max_length=100)
    install_time = serializers.IntegerField(required=False, default=0)


class UserInfoSerializer(serializers.Serializer):
    """Identity snapshot recorded on the code at activation."""

    name = serializers.CharField(max_length=100)
    campus = serializers.CharField(max_length=100)
    email = serializers.EmailField(required=False, allow_blank=True)


class ActivateInviteCodeSerializer(serializers.Serializer):
    """Serializer for activating an invite code on a device."""

    code = serializers.CharField(max_length=40, required=True)
    user_info = UserInfoSerializer()
    device = DeviceFingerprintSerializer()


class SessionSerializer(serializers.Serializer):
    """Session granted by an invite code activation."""

    is_authenticated = serializers.BooleanField()
    identity = serializers.DictField()
    role = serializers.CharField()
    bound_device = serializers.DictField()
    source_invite_code = serializers.CharField()
    authenticated_at = serializers.DateTimeField()
