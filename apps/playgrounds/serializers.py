"""
apps.playgrounds.serializers
~~~~~~~~~~~~~~~~~~~~~~~~~~~~
I/O-only serializers for the Playgrounds API.
"""
from rest_framework import serializers

from .models import Playground


class PlaygroundSerializer(serializers.ModelSerializer):
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Playground
        fields = ["id", "name", "description", "state", "createdAt", "updatedAt"]
        read_only_fields = fields


class PlaygroundCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    state = serializers.DictField(required=False)


class PlaygroundUpdateSerializer(serializers.Serializer):
    """Validates PATCH /playgrounds/{id}/.  Every field is optional."""

    name = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    state = serializers.DictField(required=False)
