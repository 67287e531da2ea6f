"""
apps.playgrounds.models
~~~~~~~~~~~~~~~~~~~~~~~
Playground – a saved prompt-editing session from the UI.
"""
import uuid

from django.db import models


class Playground(models.Model):
    """
    Named scratch space whose editor state is stored as an opaque JSON object.

    The server never interprets ``state``; it only requires a JSON object.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    description = models.TextField(null=True, blank=True)
    state = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Playground"
        verbose_name_plural = "Playgrounds"

    def __str__(self) -> str:
        return self.name
