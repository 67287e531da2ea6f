"""
apps.requests.models
~~~~~~~~~~~~~~~~~~~~
One row per LLM call made through the gateway, with token counts, cost and
latency.  The analytics endpoints aggregate over these rows.

Costs are integers in micro-dollars (1 USD = 1_000_000) so sums stay exact.
"""
import uuid

from django.db import models

MICRO_DOLLARS_PER_DOLLAR = 1_000_000


class LLMRequest(models.Model):
    """
    A logged LLM request.

    ``config_id`` and ``variant_id`` are plain UUIDs rather than foreign
    keys: request logs outlive the configs and variants they mention.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    request_id = models.UUIDField(db_index=True)
    config_id = models.UUIDField(null=True, blank=True, db_index=True)
    variant_id = models.UUIDField(null=True, blank=True)
    provider = models.CharField(max_length=100, db_index=True)
    model = models.CharField(max_length=255, db_index=True)
    prompt_tokens = models.PositiveIntegerField(default=0)
    completion_tokens = models.PositiveIntegerField(default=0)
    total_tokens = models.PositiveIntegerField(default=0)
    cached_tokens = models.PositiveIntegerField(default=0)
    cost = models.BigIntegerField(default=0)
    input_cost = models.BigIntegerField(default=0)
    output_cost = models.BigIntegerField(default=0)
    endpoint = models.CharField(max_length=255)
    status_code = models.PositiveSmallIntegerField()
    latency_ms = models.PositiveIntegerField(default=0)
    is_streaming = models.BooleanField(default=False)
    user_id = models.CharField(max_length=255, null=True, blank=True)
    tags = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "LLM Request"
        verbose_name_plural = "LLM Requests"

    def __str__(self) -> str:
        return f"{self.request_id} {self.provider}/{self.model} ({self.status_code})"
