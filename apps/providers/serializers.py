"""
apps.providers.serializers
~~~~~~~~~~~~~~~~~~~~~~~~~~
I/O-only serializers for the provider catalog and provider configs.
"""
from rest_framework import serializers

from .models import ProviderConfig


class ProviderInfoSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    logoUrl = serializers.URLField()
    modelCount = serializers.IntegerField()


class ProviderRefSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()


class ProviderModelSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    provider = ProviderRefSerializer()


class ProviderConfigSerializer(serializers.ModelSerializer):
    providerId = serializers.CharField(source="provider_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = ProviderConfig
        fields = ["id", "providerId", "slug", "name", "config", "enabled", "createdAt", "updatedAt"]
        read_only_fields = fields


class ProviderConfigUpsertSerializer(serializers.Serializer):
    """Validates POST /providers/configs/."""

    providerId = serializers.CharField(max_length=100)
    slug = serializers.SlugField(max_length=120, required=False, allow_null=True, default=None)
    name = serializers.CharField(max_length=255, required=False, allow_null=True, default=None)
    config = serializers.DictField()
    enabled = serializers.BooleanField(default=True)


class ProviderConfigUpdateSerializer(serializers.Serializer):
    """Validates PATCH /providers/configs/{id}/.  Only keys present are applied."""

    slug = serializers.SlugField(max_length=120, required=False)
    name = serializers.CharField(max_length=255, required=False, allow_null=True)
    config = serializers.DictField(required=False)
    enabled = serializers.BooleanField(required=False)
