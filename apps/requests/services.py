"""
apps.requests.services
~~~~~~~~~~~~~~~~~~~~~~
Ingestion of LLM request logs and the cost / usage aggregations behind the
analytics endpoints.

Views must call only these functions.  Every aggregation takes an inclusive
``[start, end]`` range of aware datetimes and returns plain dicts with
snake_case keys; serializers rename them for the API.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime

import structlog
from django.db import transaction
from django.db.models import Avg, Count, Max, Min, Q, Sum
from django.db.models.functions import TruncDate, TruncHour

from apps.configs.models import Config
from common.exceptions import NotFoundError, ValidationError
from .models import MICRO_DOLLARS_PER_DOLLAR, LLMRequest

logger = structlog.get_logger(__name__)

GROUP_BY_CHOICES = ("day", "hour", "model", "provider", "config")
NO_CONFIG_KEY = "no-config"

_REQUIRED_FIELDS = ("request_id", "provider", "model", "endpoint", "status_code")
_ACCEPTED_FIELDS = frozenset(
    {
        "request_id",
        "config_id",
        "variant_id",
        "provider",
        "model",
        "prompt_tokens",
        "completion_tokens",
        "total_tokens",
        "cached_tokens",
        "cost",
        "input_cost",
        "output_cost",
        "endpoint",
        "status_code",
        "latency_ms",
        "is_streaming",
        "user_id",
        "tags",
    }
)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def format_cost(micro_dollars: int, decimals: int = 6) -> str:
    """``1_500_000`` → ``"$1.500000"``."""
    return f"${micro_dollars / MICRO_DOLLARS_PER_DOLLAR:.{decimals}f}"


# ---------------------------------------------------------------------------
# Ingestion
# ---------------------------------------------------------------------------

def _build_request(values: Mapping) -> LLMRequest:
    errors = [
        {"field": _camel(name), "message": "This field is required."}
        for name in _REQUIRED_FIELDS
        if values.get(name) in (None, "")
    ]
    errors += [
        {"field": _camel(name), "message": "Unknown field."}
        for name in sorted(set(values) - _ACCEPTED_FIELDS)
    ]
    tags = values.get("tags") or {}
    if not isinstance(tags, Mapping) or not all(isinstance(v, str) for v in tags.values()):
        errors.append({"field": "tags", "message": "Must be an object of string values."})
    if errors:
        raise ValidationError("Invalid request log.", errors=errors)

    fields = {name: value for name, value in values.items() if value is not None}
    fields["tags"] = dict(tags)
    return LLMRequest(**fields)


def insert_request(**values) -> LLMRequest:
    """Store one request log.  Omitted counters default to zero."""
    llm_request = _build_request(values)
    llm_request.save()
    logger.info(
        "llm_request_logged",
        request_id=str(llm_request.request_id),
        provider=llm_request.provider,
        model=llm_request.model,
    )
    return llm_request


def batch_insert_requests(records: Iterable[Mapping]) -> int:
    """
    Store many request logs in one statement.

    All records are validated first; one invalid record rejects the batch.
    Returns the number of rows written.
    """
    rows = [_build_request(record) for record in records]
    if not rows:
        return 0
    with transaction.atomic():
        LLMRequest.objects.bulk_create(rows)
    logger.info("llm_requests_logged", count=len(rows))
    return len(rows)


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------

def list_requests(
    *,
    limit: int = 100,
    offset: int = 0,
    config_id=None,
    provider: str | None = None,
    model: str | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
) -> tuple[list[LLMRequest], int]:
    """Return ``(page, total)``; newest first, ``total`` ignores paging."""
    qs = LLMRequest.objects.all()
    if config_id is not None:
        qs = qs.filter(config_id=config_id)
    if provider:
        qs = qs.filter(provider=provider)
    if model:
        qs = qs.filter(model=model)
    if start is not None:
        qs = qs.filter(created_at__gte=start)
    if end is not None:
        qs = qs.filter(created_at__lte=end)
    return list(qs[offset:offset + limit]), qs.count()


def get_request_by_request_id(request_id) -> LLMRequest:
    llm_request = LLMRequest.objects.filter(request_id=request_id).order_by("created_at").first()
    if llm_request is None:
        raise NotFoundError(f"Request '{request_id}' not found.")
    return llm_request


# ---------------------------------------------------------------------------
# Aggregations
# ---------------------------------------------------------------------------

def _in_range(start: datetime, end: datetime):
    if start > end:
        raise ValidationError(
            "Invalid date range.",
            errors=[{"field": "startDate", "message": "Must not be after endDate."}],
        )
    return LLMRequest.objects.filter(created_at__gte=start, created_at__lte=end)


def _cost_sums() -> dict:
    return {
        "total_cost": Sum("cost", default=0),
        "total_input_cost": Sum("input_cost", default=0),
        "total_output_cost": Sum("output_cost", default=0),
        "total_token_count": Sum("total_tokens", default=0),
        "request_count": Count("id"),
    }


def get_total_cost(start: datetime, end: datetime) -> dict:
    """Cost and token totals for the range, with dollar-formatted costs."""
    totals = _in_range(start, end).aggregate(
        **_cost_sums(),
        total_prompt_tokens=Sum("prompt_tokens", default=0),
        total_completion_tokens=Sum("completion_tokens", default=0),
    )
    totals["total_cost_formatted"] = format_cost(totals["total_cost"])
    totals["total_input_cost_formatted"] = format_cost(totals["total_input_cost"])
    totals["total_output_cost_formatted"] = format_cost(totals["total_output_cost"])
    return totals


def get_cost_by_model(start: datetime, end: datetime) -> list[dict]:
    """One row per ``(provider, model)``, most expensive first."""
    return list(
        _in_range(start, end)
        .values("provider", "model")
        .annotate(**_cost_sums(), avg_latency_ms=Avg("latency_ms", default=0))
        .order_by("-total_cost", "provider", "model")
    )


def get_cost_by_provider(start: datetime, end: datetime) -> list[dict]:
    return list(
        _in_range(start, end)
        .values("provider")
        .annotate(**_cost_sums(), avg_latency_ms=Avg("latency_ms", default=0))
        .order_by("-total_cost", "provider")
    )


def get_cost_by_config(start: datetime, end: datetime) -> list[dict]:
    """
    One row per config id, with the config's current name and slug.

    Requests without a config, or whose config has since been deleted,
    keep their id and report ``None`` for name and slug.
    """
    rows = list(
        _in_range(start, end)
        .values("config_id")
        .annotate(**_cost_sums())
        .order_by("-total_cost")
    )
    configs = Config.objects.in_bulk([row["config_id"] for row in rows if row["config_id"]])
    for row in rows:
        config = configs.get(row["config_id"])
        row["config_name"] = config.name if config else None
        row["config_slug"] = config.slug if config else None
    return rows


def get_daily_costs(start: datetime, end: datetime) -> list[dict]:
    """One row per UTC calendar day that has requests, oldest first."""
    return list(
        _in_range(start, end)
        .annotate(date=TruncDate("created_at"))
        .values("date")
        .annotate(**_cost_sums())
        .order_by("date")
    )


def get_cost_summary(start: datetime, end: datetime, group_by: str | None = None) -> list[dict]:
    """
    Cost, request count and tokens grouped by *group_by*.

    ``group_key`` is an ISO date or hour for ``day`` / ``hour``,
    ``provider/model`` for ``model``, the provider id for ``provider`` and
    the config id (or ``"no-config"``) for ``config``.  Without *group_by*
    a single ``"total"`` row is returned.
    """
    qs = _in_range(start, end)
    sums = {
        "total_cost": Sum("cost", default=0),
        "request_count": Count("id"),
        "total_token_count": Sum("total_tokens", default=0),
    }

    if group_by is None:
        return [{"group_key": "total", **qs.aggregate(**sums)}]

    if group_by in ("day", "hour"):
        trunc = TruncDate if group_by == "day" else TruncHour
        rows = qs.annotate(bucket=trunc("created_at")).values("bucket").annotate(**sums).order_by("bucket")
        return [_summary_row(row["bucket"].isoformat(), row) for row in rows]

    if group_by == "model":
        rows = qs.values("provider", "model").annotate(**sums).order_by("-total_cost", "provider", "model")
        return [_summary_row(f"{row['provider']}/{row['model']}", row) for row in rows]

    if group_by == "provider":
        rows = qs.values("provider").annotate(**sums).order_by("-total_cost", "provider")
        return [_summary_row(row["provider"], row) for row in rows]

    if group_by == "config":
        rows = qs.values("config_id").annotate(**sums).order_by("-total_cost")
        return [
            _summary_row(str(row["config_id"]) if row["config_id"] else NO_CONFIG_KEY, row)
            for row in rows
        ]

    raise ValidationError(
        "Invalid groupBy.",
        errors=[{"field": "groupBy", "message": f"Must be one of: {', '.join(GROUP_BY_CHOICES)}."}],
    )


def _summary_row(group_key: str, row: Mapping) -> dict:
    return {
        "group_key": group_key,
        "total_cost": row["total_cost"],
        "request_count": row["request_count"],
        "total_token_count": row["total_token_count"],
    }


def get_request_stats(start: datetime, end: datetime) -> dict:
    """Request counts by outcome and latency figures; ``success_rate`` is a percentage."""
    stats = _in_range(start, end).aggregate(
        total_requests=Count("id"),
        successful_requests=Count("id", filter=Q(status_code__gte=200, status_code__lt=300)),
        failed_requests=Count("id", filter=Q(status_code__gte=400)),
        streaming_requests=Count("id", filter=Q(is_streaming=True)),
        avg_latency_ms=Avg("latency_ms", default=0),
        max_latency_ms=Max("latency_ms", default=0),
        min_latency_ms=Min("latency_ms", default=0),
    )
    total = stats["total_requests"]
    stats["success_rate"] = round(stats["successful_requests"] * 100 / total, 2) if total else 0.0
    return stats
