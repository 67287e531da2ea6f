"""
apps.requests.views
~~~~~~~~~~~~~~~~~~~
Thin DRF views for request logs and cost analytics.

Endpoints
---------
POST /analytics/requests/              – log one request, or a list of them
GET  /analytics/requests/              – list with filters, newest first
GET  /analytics/requests/{requestId}/  – one request by its request id
GET  /analytics/costs/total/           – cost and token totals
GET  /analytics/costs/by-model/        – cost per provider/model
GET  /analytics/costs/by-provider/     – cost per provider
GET  /analytics/costs/by-config/       – cost per config
GET  /analytics/costs/daily/           – cost per UTC day
GET  /analytics/costs/summary/         – cost grouped by ?groupBy=
GET  /analytics/stats/                 – request counts and latency

Every aggregate takes ``?startDate=&endDate=`` (``YYYY-MM-DD`` or ISO-8601).
"""
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from common.pagination import get_limit_offset
from common.responses import success_response
from . import services
from .serializers import (
    ConfigCostSerializer,
    CostSummaryQuerySerializer,
    CostSummaryRowSerializer,
    DailyCostSerializer,
    DateRangeSerializer,
    LLMRequestCreateSerializer,
    LLMRequestFilterSerializer,
    LLMRequestSerializer,
    ModelCostSerializer,
    ProviderCostSerializer,
    RequestStatsSerializer,
    TotalCostSerializer,
)

_DATE_RANGE_PARAMS = [
    OpenApiParameter("startDate", str, required=True, description="YYYY-MM-DD or ISO-8601, inclusive."),
    OpenApiParameter("endDate", str, required=True, description="YYYY-MM-DD (whole day) or ISO-8601, inclusive."),
]


class LLMRequestListCreateView(APIView):
    """GET / POST /analytics/requests/"""

    @extend_schema(
        summary="List Requests",
        parameters=[LLMRequestFilterSerializer],
        responses={200: LLMRequestSerializer(many=True)},
        tags=["Analytics"],
    )
    def get(self, request: Request) -> Response:
        limit, offset = get_limit_offset(request)
        filters = LLMRequestFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        rows, total = services.list_requests(limit=limit, offset=offset, **filters.validated_data)
        return success_response(
            {
                "data": LLMRequestSerializer(rows, many=True).data,
                "total": total,
                "limit": limit,
                "offset": offset,
            }
        )

    @extend_schema(
        summary="Log Requests",
        description="Accepts a single request log object or a list of them.",
        request=LLMRequestCreateSerializer,
        responses={
            200: LLMRequestSerializer,
            400: OpenApiResponse(description="A request log failed validation; nothing was stored."),
        },
        tags=["Analytics"],
    )
    def post(self, request: Request) -> Response:
        if isinstance(request.data, list):
            serializer = LLMRequestCreateSerializer(data=request.data, many=True)
            serializer.is_valid(raise_exception=True)
            count = services.batch_insert_requests(serializer.validated_data)
            return success_response({"count": count})

        serializer = LLMRequestCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        llm_request = services.insert_request(**serializer.validated_data)
        return success_response(LLMRequestSerializer(llm_request).data)


class LLMRequestDetailView(APIView):
    """GET /analytics/requests/{requestId}/"""

    @extend_schema(summary="Get Request", responses={200: LLMRequestSerializer}, tags=["Analytics"])
    def get(self, request: Request, request_id) -> Response:
        llm_request = services.get_request_by_request_id(request_id)
        return success_response(LLMRequestSerializer(llm_request).data)


class _DateRangeView(APIView):
    """Base for the aggregate endpoints: parses ``startDate`` / ``endDate``."""

    query_serializer_class = DateRangeSerializer

    def query(self, request: Request) -> dict:
        serializer = self.query_serializer_class(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data


class TotalCostView(_DateRangeView):
    @extend_schema(
        summary="Total Cost",
        parameters=_DATE_RANGE_PARAMS,
        responses={200: TotalCostSerializer},
        tags=["Analytics"],
    )
    def get(self, request: Request) -> Response:
        totals = services.get_total_cost(**self.query(request))
        return success_response(TotalCostSerializer(totals).data)


class CostByModelView(_DateRangeView):
    @extend_schema(
        summary="Cost By Model",
        parameters=_DATE_RANGE_PARAMS,
        responses={200: ModelCostSerializer(many=True)},
        tags=["Analytics"],
    )
    def get(self, request: Request) -> Response:
        rows = services.get_cost_by_model(**self.query(request))
        return success_response(ModelCostSerializer(rows, many=True).data)


class CostByProviderView(_DateRangeView):
    @extend_schema(
        summary="Cost By Provider",
        parameters=_DATE_RANGE_PARAMS,
        responses={200: ProviderCostSerializer(many=True)},
        tags=["Analytics"],
    )
    def get(self, request: Request) -> Response:
        rows = services.get_cost_by_provider(**self.query(request))
        return success_response(ProviderCostSerializer(rows, many=True).data)


class CostByConfigView(_DateRangeView):
    @extend_schema(
        summary="Cost By Config",
        parameters=_DATE_RANGE_PARAMS,
        responses={200: ConfigCostSerializer(many=True)},
        tags=["Analytics"],
    )
    def get(self, request: Request) -> Response:
        rows = services.get_cost_by_config(**self.query(request))
        return success_response(ConfigCostSerializer(rows, many=True).data)


class DailyCostView(_DateRangeView):
    @extend_schema(
        summary="Daily Costs",
        parameters=_DATE_RANGE_PARAMS,
        responses={200: DailyCostSerializer(many=True)},
        tags=["Analytics"],
    )
    def get(self, request: Request) -> Response:
        rows = services.get_daily_costs(**self.query(request))
        return success_response(DailyCostSerializer(rows, many=True).data)


class CostSummaryView(_DateRangeView):
    query_serializer_class = CostSummaryQuerySerializer

    @extend_schema(
        summary="Cost Summary",
        parameters=[CostSummaryQuerySerializer],
        responses={200: CostSummaryRowSerializer(many=True)},
        tags=["Analytics"],
    )
    def get(self, request: Request) -> Response:
        rows = services.get_cost_summary(**self.query(request))
        return success_response(CostSummaryRowSerializer(rows, many=True).data)


class RequestStatsView(_DateRangeView):
    @extend_schema(
        summary="Request Stats",
        parameters=_DATE_RANGE_PARAMS,
        responses={200: RequestStatsSerializer},
        tags=["Analytics"],
    )
    def get(self, request: Request) -> Response:
        stats = services.get_request_stats(**self.query(request))
        return success_response(RequestStatsSerializer(stats).data)
