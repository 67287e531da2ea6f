"""
apps.providers.models
~~~~~~~~~~~~~~~~~~~~~
Stored credentials for LLM providers.
"""
import uuid

from django.db import models


class ProviderConfig(models.Model):
    """
    Credentials and options for one provider, e.g. ``{"apiKey": "..."}``.

    ``slug`` is generated from ``provider_id`` when not given: ``openai``,
    then ``openai-01``, ``openai-02``…
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    provider_id = models.CharField(max_length=100, db_index=True)
    slug = models.CharField(max_length=120, unique=True)
    name = models.CharField(max_length=255, null=True, blank=True)
    config = models.JSONField(default=dict)
    enabled = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Provider Config"
        verbose_name_plural = "Provider Configs"

    def __str__(self) -> str:
        return self.slug
