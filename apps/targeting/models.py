"""
apps.targeting.models
~~~~~~~~~~~~~~~~~~~~~
Targeting rules bind a (config, environment) pair to one of the config's
variants.

Several rules may exist for a pair.  The resolver keeps the enabled rules
whose ``conditions`` match the request attributes, takes the highest
``priority`` and splits ties by ``weight``.
"""
import uuid

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from apps.configs.models import Config
from apps.environments.models import Environment
from apps.variants.models import ConfigVariant, VariantVersion

MAX_WEIGHT = 10000


class TargetingRule(models.Model):
    """
    One candidate variant for a config in an environment.

    ``variant_version`` pins the rule to a specific version; when it is
    ``NULL`` the rule follows the variant's latest version.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    environment = models.ForeignKey(
        Environment,
        on_delete=models.CASCADE,
        related_name="targeting_rules",
    )
    config = models.ForeignKey(
        Config,
        on_delete=models.CASCADE,
        related_name="targeting_rules",
    )
    config_variant = models.ForeignKey(
        ConfigVariant,
        on_delete=models.CASCADE,
        related_name="targeting_rules",
    )
    variant_version = models.ForeignKey(
        VariantVersion,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="pinned_rules",
    )
    weight = models.PositiveIntegerField(
        default=MAX_WEIGHT,
        validators=[MinValueValidator(0), MaxValueValidator(MAX_WEIGHT)],
    )
    priority = models.IntegerField(default=0)
    enabled = models.BooleanField(default=True)
    conditions = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [models.Index(fields=["environment", "config"])]
        verbose_name = "Targeting Rule"
        verbose_name_plural = "Targeting Rules"

    def __str__(self) -> str:
        return f"{self.config_id}/{self.environment_id} -> {self.config_variant_id} (p{self.priority}, w{self.weight})"
