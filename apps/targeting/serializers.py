"""
apps.targeting.serializers
~~~~~~~~~~~~~~~~~~~~~~~~~~
I/O-only serializers for targeting rules and resolution results.
"""
from rest_framework import serializers

from .models import MAX_WEIGHT, TargetingRule


# ---------------------------------------------------------------------------
# Read serializers
# ---------------------------------------------------------------------------

class TargetingRuleSerializer(serializers.ModelSerializer):
    """
    A rule joined with its environment, its variant and the version it
    currently resolves to (``resolved_version``, attached by the service).
    """

    environmentId = serializers.UUIDField(source="environment_id", read_only=True)
    environmentName = serializers.CharField(source="environment.name", read_only=True)
    environmentSlug = serializers.CharField(source="environment.slug", read_only=True)
    configId = serializers.UUIDField(source="config_id", read_only=True)
    configVariantId = serializers.UUIDField(source="config_variant_id", read_only=True)
    variantId = serializers.UUIDField(source="config_variant.variant_id", read_only=True)
    variantName = serializers.CharField(source="config_variant.variant.name", read_only=True)
    variantVersionId = serializers.UUIDField(source="variant_version_id", read_only=True, allow_null=True)
    pinned = serializers.SerializerMethodField()
    provider = serializers.CharField(source="resolved_version.provider", read_only=True, default=None)
    modelName = serializers.CharField(source="resolved_version.model_name", read_only=True, default=None)
    version = serializers.IntegerField(source="resolved_version.version", read_only=True, default=None)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = TargetingRule
        fields = [
            "id",
            "environmentId",
            "environmentName",
            "environmentSlug",
            "configId",
            "configVariantId",
            "variantId",
            "variantName",
            "variantVersionId",
            "pinned",
            "provider",
            "modelName",
            "version",
            "weight",
            "priority",
            "enabled",
            "conditions",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields

    def get_pinned(self, obj) -> bool:
        return obj.variant_version_id is not None


class ResolutionSerializer(serializers.Serializer):
    """Serializes :class:`apps.targeting.services.Resolution`."""

    configId = serializers.UUIDField(source="config.id")
    configSlug = serializers.CharField(source="config.slug")
    environmentId = serializers.UUIDField(source="environment.id")
    environmentSlug = serializers.CharField(source="environment.slug")
    ruleId = serializers.UUIDField(source="rule.id")
    variantId = serializers.UUIDField(source="version.variant_id")
    variantVersionId = serializers.UUIDField(source="version.id")
    version = serializers.IntegerField(source="version.version")
    provider = serializers.CharField(source="version.provider")
    modelName = serializers.CharField(source="version.model_name")
    jsonData = serializers.JSONField(source="version.json_data")


# ---------------------------------------------------------------------------
# Write serializers
# ---------------------------------------------------------------------------

class SetTargetingSerializer(serializers.Serializer):
    """Validates POST /targeting/set/."""

    environmentId = serializers.UUIDField()
    configId = serializers.UUIDField()
    configVariantId = serializers.UUIDField(help_text="A config-variant id, or a variant id to link on demand.")
    variantVersionId = serializers.UUIDField(required=False, allow_null=True, default=None)


class TargetingRuleCreateSerializer(SetTargetingSerializer):
    """Validates POST /targeting/."""

    weight = serializers.IntegerField(min_value=0, max_value=MAX_WEIGHT, default=MAX_WEIGHT)
    priority = serializers.IntegerField(default=0)
    enabled = serializers.BooleanField(default=True)
    conditions = serializers.JSONField(required=False, allow_null=True, default=None)


class TargetingRuleUpdateSerializer(serializers.Serializer):
    """Validates PATCH /targeting/{id}/.  Only keys present in the body are applied."""

    configVariantId = serializers.UUIDField(required=False)
    variantVersionId = serializers.UUIDField(required=False, allow_null=True)
    weight = serializers.IntegerField(required=False, min_value=0, max_value=MAX_WEIGHT)
    priority = serializers.IntegerField(required=False)
    enabled = serializers.BooleanField(required=False)
    conditions = serializers.JSONField(required=False, allow_null=True)


class TargetingRuleFilterSerializer(serializers.Serializer):
    """Validates the ``?environmentId=&configId=`` filters of GET /targeting/."""

    environmentId = serializers.UUIDField(required=False)
    configId = serializers.UUIDField(required=False)


class ResolveSerializer(serializers.Serializer):
    """Validates POST /targeting/resolve/."""

    configId = serializers.CharField(max_length=64, help_text="Config UUID or slug.")
    environmentId = serializers.UUIDField(required=False, allow_null=True, default=None)
    attributes = serializers.DictField(required=False, default=dict)
