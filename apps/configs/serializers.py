"""
apps.configs.serializers
~~~~~~~~~~~~~~~~~~~~~~~~
I/O-only serializers for the Configs API.
"""
from rest_framework import serializers

from .models import Config


class ConfigSerializer(serializers.ModelSerializer):
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Config
        fields = ["id", "slug", "name", "createdAt", "updatedAt"]
        read_only_fields = fields


class ConfigNameSerializer(serializers.Serializer):
    """Validates POST /configs/ and PATCH /configs/{id}/."""

    name = serializers.CharField(max_length=255)
