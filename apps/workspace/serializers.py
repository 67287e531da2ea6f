"""
apps.workspace.serializers
~~~~~~~~~~~~~~~~~~~~~~~~~~
I/O-only serializers for workspace settings and the setup flow.
"""
from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import WorkspaceSettings


class WorkspaceSettingsSerializer(serializers.ModelSerializer):
    setupComplete = serializers.BooleanField(source="setup_complete", read_only=True)
    superAdminId = serializers.CharField(source="super_admin_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = WorkspaceSettings
        fields = ["id", "name", "setupComplete", "superAdminId", "createdAt", "updatedAt"]
        read_only_fields = fields


class WorkspaceSettingsUpdateSerializer(serializers.Serializer):
    """Validates PATCH /workspace-settings/."""

    name = serializers.CharField(max_length=255, required=False, allow_null=True, allow_blank=True)


class SetupSerializer(serializers.Serializer):
    """Validates POST /auth/setup/."""

    username = serializers.CharField(max_length=150)
    password = serializers.CharField(min_length=8, write_only=True)
    email = serializers.EmailField(required=False, default="", allow_blank=True)


class UserSerializer(serializers.ModelSerializer):
    isSuperAdmin = serializers.SerializerMethodField()

    class Meta:
        model = get_user_model()
        fields = ["id", "username", "email", "isSuperAdmin"]
        read_only_fields = fields

    def get_isSuperAdmin(self, obj) -> bool:
        return str(obj.pk) == self.context.get("super_admin_id")
