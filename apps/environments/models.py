"""
apps.environments.models
~~~~~~~~~~~~~~~~~~~~~~~~
Environment – a deployment target (production, staging, …) and the
secrets runtime callers use to identify it.
"""
import uuid

from django.db import models


class Environment(models.Model):
    """
    A named deployment target that targeting rules are scoped to.

    ``is_prod`` is fixed at creation time; the update path does not accept
    it.  The production environment is the default a runtime caller gets
    when it sends no environment secret, and it cannot be deleted.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)
    is_prod = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Environment"
        verbose_name_plural = "Environments"

    def __str__(self) -> str:
        suffix = " [prod]" if self.is_prod else ""
        return f"{self.name}{suffix}"


class EnvironmentSecret(models.Model):
    """An opaque key that identifies an environment to runtime callers."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    environment = models.ForeignKey(
        Environment,
        on_delete=models.CASCADE,
        related_name="secrets",
    )
    key_name = models.CharField(max_length=255)
    key_value = models.CharField(max_length=255, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        verbose_name = "Environment Secret"
        verbose_name_plural = "Environment Secrets"

    def __str__(self) -> str:
        return f"{self.environment.slug}/{self.key_name}"
