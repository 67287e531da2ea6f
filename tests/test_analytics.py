"""
tests.test_analytics
~~~~~~~~~~~~~~~~~~~~
Request-log ingestion and the cost / usage aggregations.
"""
from __future__ import annotations

import uuid
from datetime import date, datetime, timezone

import pytest
from rest_framework import status

from apps.requests import services as request_services
from apps.requests.models import LLMRequest
from apps.requests.serializers import DateRangeSerializer
from common.exceptions import NotFoundError, ValidationError

REQUESTS_URL = "/v1/analytics/requests/"
JAN_1 = datetime(2026, 1, 1, tzinfo=timezone.utc)
JAN_2_END = datetime(2026, 1, 2, 23, 59, 59, 999999, tzinfo=timezone.utc)
RANGE = {"start": JAN_1, "end": JAN_2_END}
RANGE_QUERY = "?startDate=2026-01-01&endDate=2026-01-02"


def log_request(when: datetime, **values) -> LLMRequest:
    """Insert a request log and backdate it to *when*."""
    values.setdefault("request_id", uuid.uuid4())
    values.setdefault("endpoint", "/v1/chat/completions")
    values.setdefault("status_code", 200)
    row = request_services.insert_request(**values)
    LLMRequest.objects.filter(pk=row.pk).update(created_at=when)
    row.refresh_from_db()
    return row


@pytest.fixture
def logged(greeting):
    """
    Three requests on 1-2 Jan 2026 plus one in February:

    ========  =========  ==============  =========  ======  =======  ======
    when      provider   model           cost (µ$)  tokens  latency  status
    ========  =========  ==============  =========  ======  =======  ======
    01 10:00  openai     gpt-4o          1_000_000  100     100      200
    02 15:30  openai     gpt-4o            500_000   50     300      500 (stream, no config)
    02 16:00  anthropic  claude-3-5-...  2_000_000  200     200      201
    02-01     openai     gpt-4o-mini         9_999   10      10      200
    ========  =========  ==============  =========  ======  =======  ======
    """
    return [
        log_request(
            datetime(2026, 1, 1, 10, 0, tzinfo=timezone.utc),
            config_id=greeting.id, provider="openai", model="gpt-4o",
            cost=1_000_000, input_cost=400_000, output_cost=600_000,
            prompt_tokens=60, completion_tokens=40, total_tokens=100, latency_ms=100,
        ),
        log_request(
            datetime(2026, 1, 2, 15, 30, tzinfo=timezone.utc),
            provider="openai", model="gpt-4o", status_code=500, is_streaming=True,
            cost=500_000, input_cost=200_000, output_cost=300_000,
            prompt_tokens=30, completion_tokens=20, total_tokens=50, latency_ms=300,
        ),
        log_request(
            datetime(2026, 1, 2, 16, 0, tzinfo=timezone.utc),
            config_id=greeting.id, provider="anthropic", model="claude-3-5-haiku-latest", status_code=201,
            cost=2_000_000, input_cost=1_000_000, output_cost=1_000_000,
            prompt_tokens=120, completion_tokens=80, total_tokens=200, latency_ms=200,
        ),
        log_request(
            datetime(2026, 2, 1, 9, 0, tzinfo=timezone.utc),
            provider="openai", model="gpt-4o-mini", cost=9_999, total_tokens=10, latency_ms=10,
        ),
    ]


# ===========================================================================
# Date range parsing & formatting  (unit, no DB)
# ===========================================================================

class TestDateRangeParsing:

    def test_bare_dates_cover_whole_days(self):
        serializer = DateRangeSerializer(data={"startDate": "2026-01-01", "endDate": "2026-01-02"})
        assert serializer.is_valid(), serializer.errors
        assert serializer.validated_data == RANGE

    def test_naive_datetime_is_utc(self):
        serializer = DateRangeSerializer(
            data={"startDate": "2026-01-01T08:30:00", "endDate": "2026-01-01T09:00:00+02:00"}
        )
        assert serializer.is_valid(), serializer.errors
        assert serializer.validated_data["start"] == datetime(2026, 1, 1, 8, 30, tzinfo=timezone.utc)
        assert serializer.validated_data["end"] == datetime(2026, 1, 1, 7, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize("raw", ["yesterday", "2026-13-01", ""])
    def test_invalid_dates_rejected(self, raw):
        serializer = DateRangeSerializer(data={"startDate": raw, "endDate": "2026-01-02"})
        assert not serializer.is_valid()
        assert "startDate" in serializer.errors

    def test_format_cost(self):
        assert request_services.format_cost(1_500_000) == "$1.500000"
        assert request_services.format_cost(0) == "$0.000000"


# ===========================================================================
# Ingestion & lookup  (services, DB)
# ===========================================================================

@pytest.mark.django_db
class TestIngestion:

    def test_insert_defaults_counters(self):
        row = request_services.insert_request(
            request_id=uuid.uuid4(), provider="openai", model="gpt-4o", endpoint="/v1/embeddings", status_code=200
        )
        assert (row.cost, row.total_tokens, row.latency_ms, row.is_streaming) == (0, 0, 0, False)
        assert row.tags == {}

    def test_batch_is_all_or_nothing(self):
        good = {"request_id": uuid.uuid4(), "provider": "openai", "model": "gpt-4o", "endpoint": "/x", "status_code": 200}
        bad = {**good, "request_id": uuid.uuid4(), "provider": ""}
        with pytest.raises(ValidationError) as exc_info:
            request_services.batch_insert_requests([good, bad])
        assert exc_info.value.errors == [{"field": "provider", "message": "This field is required."}]
        assert LLMRequest.objects.count() == 0
        assert request_services.batch_insert_requests([good]) == 1
        assert request_services.batch_insert_requests([]) == 0

    def test_tags_must_be_strings(self):
        with pytest.raises(ValidationError):
            request_services.insert_request(
                request_id=uuid.uuid4(), provider="openai", model="gpt-4o", endpoint="/x",
                status_code=200, tags={"team": 7},
            )

    def test_list_filters_and_total(self, logged):
        rows, total = request_services.list_requests(provider="openai", limit=1)
        assert total == 3
        assert [r.id for r in rows] == [logged[3].id]
        rows, total = request_services.list_requests(start=JAN_1, end=JAN_2_END, model="gpt-4o")
        assert total == 2
        assert [r.id for r in rows] == [logged[1].id, logged[0].id]

    def test_get_by_request_id(self, logged):
        assert request_services.get_request_by_request_id(logged[2].request_id).id == logged[2].id
        with pytest.raises(NotFoundError):
            request_services.get_request_by_request_id(uuid.uuid4())


# ===========================================================================
# Aggregations  (services, DB)
# ===========================================================================

@pytest.mark.django_db
class TestAggregations:

    def test_total_cost(self, logged):
        totals = request_services.get_total_cost(**RANGE)
        assert totals["total_cost"] == 3_500_000
        assert totals["total_input_cost"] == 1_600_000
        assert totals["total_output_cost"] == 1_900_000
        assert totals["total_token_count"] == 350
        assert totals["total_prompt_tokens"] == 210
        assert totals["total_completion_tokens"] == 140
        assert totals["request_count"] == 3
        assert totals["total_cost_formatted"] == "$3.500000"

    def test_empty_range_is_zero(self, db):
        totals = request_services.get_total_cost(**RANGE)
        assert (totals["total_cost"], totals["request_count"]) == (0, 0)
        stats = request_services.get_request_stats(**RANGE)
        assert stats["total_requests"] == 0
        assert stats["avg_latency_ms"] == 0
        assert stats["success_rate"] == 0.0

    def test_start_after_end_rejected(self, db):
        with pytest.raises(ValidationError):
            request_services.get_total_cost(start=JAN_2_END, end=JAN_1)

    def test_cost_by_model(self, logged):
        rows = request_services.get_cost_by_model(**RANGE)
        assert [(r["provider"], r["model"], r["total_cost"], r["request_count"]) for r in rows] == [
            ("anthropic", "claude-3-5-haiku-latest", 2_000_000, 1),
            ("openai", "gpt-4o", 1_500_000, 2),
        ]
        assert rows[1]["avg_latency_ms"] == pytest.approx(200.0)

    def test_cost_by_provider(self, logged):
        rows = request_services.get_cost_by_provider(**RANGE)
        assert [(r["provider"], r["total_cost"], r["request_count"]) for r in rows] == [
            ("anthropic", 2_000_000, 1),
            ("openai", 1_500_000, 2),
        ]

    def test_cost_by_config_joins_names(self, logged, greeting):
        rows = request_services.get_cost_by_config(**RANGE)
        assert [(r["config_id"], r["config_name"], r["total_cost"]) for r in rows] == [
            (greeting.id, "greeting", 3_000_000),
            (None, None, 500_000),
        ]

    def test_daily_costs(self, logged):
        rows = request_services.get_daily_costs(**RANGE)
        assert [(r["date"], r["total_cost"], r["request_count"]) for r in rows] == [
            (date(2026, 1, 1), 1_000_000, 1),
            (date(2026, 1, 2), 2_500_000, 2),
        ]

    @pytest.mark.parametrize(
        "group_by, keys",
        [
            (None, ["total"]),
            ("day", ["2026-01-01", "2026-01-02"]),
            ("hour", ["2026-01-01T10:00:00+00:00", "2026-01-02T15:00:00+00:00", "2026-01-02T16:00:00+00:00"]),
            ("model", ["anthropic/claude-3-5-haiku-latest", "openai/gpt-4o"]),
            ("provider", ["anthropic", "openai"]),
        ],
    )
    def test_cost_summary_group_keys(self, logged, group_by, keys):
        rows = request_services.get_cost_summary(**RANGE, group_by=group_by)
        assert [r["group_key"] for r in rows] == keys
        assert sum(r["total_cost"] for r in rows) == 3_500_000

    def test_cost_summary_by_config_labels_missing(self, logged, greeting):
        rows = request_services.get_cost_summary(**RANGE, group_by="config")
        assert [r["group_key"] for r in rows] == [str(greeting.id), "no-config"]

    def test_cost_summary_unknown_group(self, logged):
        with pytest.raises(ValidationError):
            request_services.get_cost_summary(**RANGE, group_by="week")

    def test_request_stats(self, logged):
        stats = request_services.get_request_stats(**RANGE)
        assert stats["total_requests"] == 3
        assert stats["successful_requests"] == 2
        assert stats["failed_requests"] == 1
        assert stats["streaming_requests"] == 1
        assert stats["avg_latency_ms"] == pytest.approx(200.0)
        assert (stats["min_latency_ms"], stats["max_latency_ms"]) == (100, 300)
        assert stats["success_rate"] == 66.67


# ===========================================================================
# API  (integration, DB)
# ===========================================================================

@pytest.mark.django_db
class TestAnalyticsAPI:

    def test_log_single_and_batch(self, api_client):
        entry = {
            "requestId": str(uuid.uuid4()),
            "provider": "openai",
            "model": "gpt-4o",
            "endpoint": "/v1/chat/completions",
            "statusCode": 200,
            "cost": 42,
            "tags": {"team": "search"},
        }
        single = api_client.post(REQUESTS_URL, data=entry, format="json").json()["data"]
        assert single["requestId"] == entry["requestId"]
        assert single["cost"] == 42
        assert single["tags"] == {"team": "search"}

        batch = [{**entry, "requestId": str(uuid.uuid4())} for _ in range(3)]
        resp = api_client.post(REQUESTS_URL, data=batch, format="json")
        assert resp.json()["data"] == {"count": 3}
        assert LLMRequest.objects.count() == 4

    def test_log_invalid_400(self, api_client):
        resp = api_client.post(REQUESTS_URL, data={"provider": "openai"}, format="json")
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        fields = {e["field"] for e in resp.json()["errors"]}
        assert {"requestId", "model", "endpoint", "statusCode"} <= fields

    def test_list_envelope(self, api_client, logged):
        data = api_client.get(f"{REQUESTS_URL}{RANGE_QUERY}&limit=2").json()["data"]
        assert data["total"] == 3
        assert (data["limit"], data["offset"]) == (2, 0)
        assert [r["id"] for r in data["data"]] == [str(logged[2].id), str(logged[1].id)]

    def test_detail_by_request_id(self, api_client, logged):
        data = api_client.get(f"{REQUESTS_URL}{logged[0].request_id}/").json()["data"]
        assert data["id"] == str(logged[0].id)
        assert api_client.get(f"{REQUESTS_URL}{uuid.uuid4()}/").status_code == status.HTTP_404_NOT_FOUND

    def test_total_includes_whole_end_day(self, api_client, logged):
        data = api_client.get(f"/v1/analytics/costs/total/{RANGE_QUERY}").json()["data"]
        assert data["totalCost"] == 3_500_000
        assert data["totalTokens"] == 350
        assert data["requestCount"] == 3
        assert data["totalCostFormatted"] == "$3.500000"

    def test_breakdowns(self, api_client, logged, greeting):
        by_model = api_client.get(f"/v1/analytics/costs/by-model/{RANGE_QUERY}").json()["data"]
        assert by_model[0]["model"] == "claude-3-5-haiku-latest"
        by_config = api_client.get(f"/v1/analytics/costs/by-config/{RANGE_QUERY}").json()["data"]
        assert by_config[0]["configSlug"] == greeting.slug
        assert by_config[1]["configId"] is None
        daily = api_client.get(f"/v1/analytics/costs/daily/{RANGE_QUERY}").json()["data"]
        assert [d["date"] for d in daily] == ["2026-01-01", "2026-01-02"]
        summary = api_client.get(f"/v1/analytics/costs/summary/{RANGE_QUERY}&groupBy=provider").json()["data"]
        assert [s["groupKey"] for s in summary] == ["anthropic", "openai"]

    def test_stats(self, api_client, logged):
        data = api_client.get(f"/v1/analytics/stats/{RANGE_QUERY}").json()["data"]
        assert data["totalRequests"] == 3
        assert data["successRate"] == 66.67

    def test_date_range_required(self, api_client):
        resp = api_client.get("/v1/analytics/costs/total/?startDate=2026-01-01")
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert resp.json()["errors"][0]["field"] == "endDate"

    def test_unknown_group_by_400(self, api_client):
        resp = api_client.get(f"/v1/analytics/costs/summary/{RANGE_QUERY}&groupBy=week")
        assert resp.status_code == status.HTTP_400_BAD_REQUEST

    def test_requires_super_admin(self, anon_client, admin_user):
        resp = anon_client.get(f"/v1/analytics/stats/{RANGE_QUERY}")
        assert resp.status_code == status.HTTP_401_UNAUTHORIZED
