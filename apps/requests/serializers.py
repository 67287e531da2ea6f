"""
apps.requests.serializers
~~~~~~~~~~~~~~~~~~~~~~~~~
I/O-only serializers for request logs and the analytics endpoints.

Input serializers declare ``source=`` so ``validated_data`` arrives with the
snake_case keys the service layer expects.
"""
from datetime import datetime, time, timezone as dt_timezone

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers

from .models import LLMRequest
from .services import GROUP_BY_CHOICES


@extend_schema_field(OpenApiTypes.STR)
class BoundaryDateTimeField(serializers.Field):
    """
    ``YYYY-MM-DD`` or an ISO-8601 datetime.

    A bare date means the first instant of that UTC day, or its last
    microsecond when ``end_of_day=True``, so ``endDate=2026-01-02`` covers
    the whole of the 2nd.  Naive datetimes are taken as UTC.
    """

    default_error_messages = {"invalid": "Expected YYYY-MM-DD or an ISO-8601 datetime."}

    def __init__(self, *, end_of_day: bool = False, **kwargs) -> None:
        self.end_of_day = end_of_day
        super().__init__(**kwargs)

    def to_internal_value(self, data) -> datetime:
        if not isinstance(data, str):
            self.fail("invalid")
        try:
            day = parse_date(data)
            moment = None if day else parse_datetime(data)
        except ValueError:
            self.fail("invalid")
        if day is not None:
            bound = time.max if self.end_of_day else time.min
            return datetime.combine(day, bound, tzinfo=dt_timezone.utc)
        if moment is None:
            self.fail("invalid")
        if timezone.is_naive(moment):
            moment = timezone.make_aware(moment, dt_timezone.utc)
        return moment

    def to_representation(self, value) -> str:
        return value.isoformat()


# ---------------------------------------------------------------------------
# Request logs
# ---------------------------------------------------------------------------

class LLMRequestSerializer(serializers.ModelSerializer):
    requestId = serializers.UUIDField(source="request_id", read_only=True)
    configId = serializers.UUIDField(source="config_id", read_only=True, allow_null=True)
    variantId = serializers.UUIDField(source="variant_id", read_only=True, allow_null=True)
    promptTokens = serializers.IntegerField(source="prompt_tokens", read_only=True)
    completionTokens = serializers.IntegerField(source="completion_tokens", read_only=True)
    totalTokens = serializers.IntegerField(source="total_tokens", read_only=True)
    cachedTokens = serializers.IntegerField(source="cached_tokens", read_only=True)
    inputCost = serializers.IntegerField(source="input_cost", read_only=True)
    outputCost = serializers.IntegerField(source="output_cost", read_only=True)
    statusCode = serializers.IntegerField(source="status_code", read_only=True)
    latencyMs = serializers.IntegerField(source="latency_ms", read_only=True)
    isStreaming = serializers.BooleanField(source="is_streaming", read_only=True)
    userId = serializers.CharField(source="user_id", read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = LLMRequest
        fields = [
            "id",
            "requestId",
            "configId",
            "variantId",
            "provider",
            "model",
            "promptTokens",
            "completionTokens",
            "totalTokens",
            "cachedTokens",
            "cost",
            "inputCost",
            "outputCost",
            "endpoint",
            "statusCode",
            "latencyMs",
            "isStreaming",
            "userId",
            "tags",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields


class LLMRequestCreateSerializer(serializers.Serializer):
    """Validates one entry of POST /analytics/requests/.  Costs are micro-dollars."""

    requestId = serializers.UUIDField(source="request_id")
    configId = serializers.UUIDField(source="config_id", required=False, allow_null=True)
    variantId = serializers.UUIDField(source="variant_id", required=False, allow_null=True)
    provider = serializers.CharField(max_length=100)
    model = serializers.CharField(max_length=255)
    promptTokens = serializers.IntegerField(source="prompt_tokens", min_value=0, default=0)
    completionTokens = serializers.IntegerField(source="completion_tokens", min_value=0, default=0)
    totalTokens = serializers.IntegerField(source="total_tokens", min_value=0, default=0)
    cachedTokens = serializers.IntegerField(source="cached_tokens", min_value=0, default=0)
    cost = serializers.IntegerField(min_value=0, default=0)
    inputCost = serializers.IntegerField(source="input_cost", min_value=0, default=0)
    outputCost = serializers.IntegerField(source="output_cost", min_value=0, default=0)
    endpoint = serializers.CharField(max_length=255)
    statusCode = serializers.IntegerField(source="status_code", min_value=100, max_value=599)
    latencyMs = serializers.IntegerField(source="latency_ms", min_value=0, default=0)
    isStreaming = serializers.BooleanField(source="is_streaming", default=False)
    userId = serializers.CharField(source="user_id", max_length=255, required=False, allow_null=True)
    tags = serializers.DictField(child=serializers.CharField(allow_blank=True), required=False, default=dict)


class LLMRequestFilterSerializer(serializers.Serializer):
    """Query parameters of GET /analytics/requests/ (paging is separate)."""

    configId = serializers.UUIDField(source="config_id", required=False)
    provider = serializers.CharField(required=False)
    model = serializers.CharField(required=False)
    startDate = BoundaryDateTimeField(source="start", required=False)
    endDate = BoundaryDateTimeField(source="end", end_of_day=True, required=False)


class DateRangeSerializer(serializers.Serializer):
    startDate = BoundaryDateTimeField(source="start")
    endDate = BoundaryDateTimeField(source="end", end_of_day=True)


class CostSummaryQuerySerializer(DateRangeSerializer):
    groupBy = serializers.ChoiceField(source="group_by", choices=GROUP_BY_CHOICES, required=False)


# ---------------------------------------------------------------------------
# Aggregates (read-only, built from service dicts)
# ---------------------------------------------------------------------------

class CostSumsSerializer(serializers.Serializer):
    totalCost = serializers.IntegerField(source="total_cost")
    totalInputCost = serializers.IntegerField(source="total_input_cost")
    totalOutputCost = serializers.IntegerField(source="total_output_cost")
    totalTokens = serializers.IntegerField(source="total_token_count")
    requestCount = serializers.IntegerField(source="request_count")


class TotalCostSerializer(CostSumsSerializer):
    totalPromptTokens = serializers.IntegerField(source="total_prompt_tokens")
    totalCompletionTokens = serializers.IntegerField(source="total_completion_tokens")
    totalCostFormatted = serializers.CharField(source="total_cost_formatted")
    totalInputCostFormatted = serializers.CharField(source="total_input_cost_formatted")
    totalOutputCostFormatted = serializers.CharField(source="total_output_cost_formatted")


class ProviderCostSerializer(CostSumsSerializer):
    provider = serializers.CharField()
    avgLatencyMs = serializers.FloatField(source="avg_latency_ms")


class ModelCostSerializer(ProviderCostSerializer):
    model = serializers.CharField()


class ConfigCostSerializer(CostSumsSerializer):
    configId = serializers.UUIDField(source="config_id", allow_null=True)
    configName = serializers.CharField(source="config_name", allow_null=True)
    configSlug = serializers.CharField(source="config_slug", allow_null=True)


class DailyCostSerializer(CostSumsSerializer):
    date = serializers.DateField()


class CostSummaryRowSerializer(serializers.Serializer):
    groupKey = serializers.CharField(source="group_key")
    totalCost = serializers.IntegerField(source="total_cost")
    requestCount = serializers.IntegerField(source="request_count")
    totalTokens = serializers.IntegerField(source="total_token_count")


class RequestStatsSerializer(serializers.Serializer):
    totalRequests = serializers.IntegerField(source="total_requests")
    successfulRequests = serializers.IntegerField(source="successful_requests")
    failedRequests = serializers.IntegerField(source="failed_requests")
    streamingRequests = serializers.IntegerField(source="streaming_requests")
    avgLatencyMs = serializers.FloatField(source="avg_latency_ms")
    maxLatencyMs = serializers.IntegerField(source="max_latency_ms")
    minLatencyMs = serializers.IntegerField(source="min_latency_ms")
    successRate = serializers.FloatField(source="success_rate")
