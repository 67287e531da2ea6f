"""
apps.variants.models
~~~~~~~~~~~~~~~~~~~~
Models for prompt variants.

Models
------
Variant
    A named prompt implementation.  Owns a monotonically increasing
    version counter.

VariantVersion
    Immutable snapshot of provider, model name and JSON parameters.

ConfigVariant
    Link table attaching a variant to a config.  Targeting rules point at
    these links.
"""
import uuid

from django.db import models

from apps.configs.models import Config


class Variant(models.Model):
    """
    Parent of a series of :class:`VariantVersion` rows.

    ``version_counter`` holds the highest version number ever issued for
    this variant.  New versions take ``version_counter + 1`` under a row
    lock, so numbers are never reused, even if a version is later deleted.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    version_counter = models.PositiveIntegerField(default=0, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Variant"
        verbose_name_plural = "Variants"

    def __str__(self) -> str:
        return self.name


class VariantVersion(models.Model):
    """
    Immutable snapshot of a variant's provider/model/parameters.

    Rows are only ever inserted; edits create a new version.  ``json_data``
    is always a JSON object (provider parameters, prompt messages, …).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    variant = models.ForeignKey(
        Variant,
        on_delete=models.CASCADE,
        related_name="versions",
    )
    version = models.PositiveIntegerField()
    provider = models.CharField(max_length=255)
    model_name = models.CharField(max_length=255)
    json_data = models.JSONField(default=dict)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["variant", "-version"]
        unique_together = [("variant", "version")]
        verbose_name = "Variant Version"
        verbose_name_plural = "Variant Versions"

    def __str__(self) -> str:
        return f"{self.variant_id}@v{self.version} ({self.provider}/{self.model_name})"


class ConfigVariant(models.Model):
    """Attaches a :class:`Variant` to a :class:`~apps.configs.models.Config`."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    config = models.ForeignKey(
        Config,
        on_delete=models.CASCADE,
        related_name="config_variants",
    )
    variant = models.ForeignKey(
        Variant,
        on_delete=models.CASCADE,
        related_name="config_links",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        unique_together = [("config", "variant")]
        verbose_name = "Config Variant"
        verbose_name_plural = "Config Variants"

    def __str__(self) -> str:
        return f"{self.config_id} -> {self.variant_id}"
