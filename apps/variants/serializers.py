"""
apps.variants.serializers
~~~~~~~~~~~~~~~~~~~~~~~~~
I/O-only serializers for variants, versions and config links.
No business logic; shape validation only.
"""
from rest_framework import serializers

from .models import ConfigVariant, Variant, VariantVersion


# ---------------------------------------------------------------------------
# Read serializers
# ---------------------------------------------------------------------------

class VariantVersionSerializer(serializers.ModelSerializer):
    variantId = serializers.UUIDField(source="variant_id", read_only=True)
    modelName = serializers.CharField(source="model_name", read_only=True)
    jsonData = serializers.JSONField(source="json_data", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = VariantVersion
        fields = ["id", "variantId", "version", "provider", "modelName", "jsonData", "createdAt", "updatedAt"]
        read_only_fields = fields


class VariantSerializer(serializers.ModelSerializer):
    """A variant with its latest version (attached by the service layer)."""

    latestVersion = VariantVersionSerializer(source="latest_version", read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Variant
        fields = ["id", "name", "latestVersion", "createdAt", "updatedAt"]
        read_only_fields = fields


class ConfigVariantSerializer(serializers.ModelSerializer):
    """A config ↔ variant link flattened with the variant's latest version."""

    configId = serializers.UUIDField(source="config_id", read_only=True)
    variantId = serializers.UUIDField(source="variant_id", read_only=True)
    name = serializers.CharField(source="variant.name", read_only=True)
    provider = serializers.CharField(source="variant.latest_version.provider", read_only=True, default=None)
    modelName = serializers.CharField(source="variant.latest_version.model_name", read_only=True, default=None)
    jsonData = serializers.JSONField(source="variant.latest_version.json_data", read_only=True, default=None)
    latestVersion = VariantVersionSerializer(source="variant.latest_version", read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = ConfigVariant
        fields = [
            "id",
            "configId",
            "variantId",
            "name",
            "provider",
            "modelName",
            "jsonData",
            "latestVersion",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields


# ---------------------------------------------------------------------------
# Write serializers
# ---------------------------------------------------------------------------

class VariantVersionCreateSerializer(serializers.Serializer):
    """Validates POST /variants/{id}/versions/."""

    provider = serializers.CharField(max_length=255)
    modelName = serializers.CharField(max_length=255)
    jsonData = serializers.DictField(required=False, default=dict)


class VariantCreateSerializer(VariantVersionCreateSerializer):
    """Validates POST /variants/ and POST /configs/{id}/variants/."""

    name = serializers.CharField(max_length=255)


class VariantUpdateSerializer(serializers.Serializer):
    """Validates PATCH /variants/{id}/.  Versions are immutable; only the name changes."""

    name = serializers.CharField(max_length=255)
