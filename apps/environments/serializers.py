"""
apps.environments.serializers
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
I/O-only serializers for the Environments API.
"""
from rest_framework import serializers

from .models import Environment, EnvironmentSecret


class EnvironmentSerializer(serializers.ModelSerializer):
    isProd = serializers.BooleanField(source="is_prod", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Environment
        fields = ["id", "name", "slug", "isProd", "createdAt", "updatedAt"]
        read_only_fields = fields


class EnvironmentCreateSerializer(serializers.Serializer):
    """
    Validates POST /environments/.

    ``isProd`` is taken raw (bool, 0/1 or string) and normalised by the
    service layer.
    """

    name = serializers.CharField(max_length=255)
    slug = serializers.SlugField(max_length=255)
    isProd = serializers.JSONField(required=False, default=False)


class EnvironmentUpdateSerializer(serializers.Serializer):
    """Validates PATCH /environments/{id}/.  ``isProd`` is deliberately absent."""

    name = serializers.CharField(max_length=255, required=False)
    slug = serializers.SlugField(max_length=255, required=False)


class EnvironmentSecretSerializer(serializers.ModelSerializer):
    environmentId = serializers.UUIDField(source="environment_id", read_only=True)
    keyName = serializers.CharField(source="key_name", read_only=True)
    keyValue = serializers.CharField(source="key_value", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = EnvironmentSecret
        fields = ["id", "environmentId", "keyName", "keyValue", "createdAt", "updatedAt"]
        read_only_fields = fields
