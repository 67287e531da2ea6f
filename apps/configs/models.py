"""
apps.configs.models
~~~~~~~~~~~~~~~~~~~
Config – a named prompt/feature slot that environments target variants for.
"""
import uuid

from django.db import models

from common.ids import generate_short_id


class Config(models.Model):
    """
    A named slot that runtime callers ask a variant for.

    ``slug`` is a short random base62 id generated on first save.  Runtime
    callers may address a config by either its UUID or its slug.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    slug = models.CharField(max_length=32, unique=True, blank=True)
    name = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Config"
        verbose_name_plural = "Configs"

    def save(self, *args, **kwargs) -> None:
        """Auto-populate ``slug`` on first save."""
        if not self.slug:
            self.slug = generate_short_id()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.name} ({self.slug})"
