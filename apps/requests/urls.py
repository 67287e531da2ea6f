"""
apps.requests.urls
~~~~~~~~~~~~~~~~~~
Mounted at /v1/ by the root URLconf.
"""
from django.urls import path

from .views import (
    CostByConfigView,
    CostByModelView,
    CostByProviderView,
    CostSummaryView,
    DailyCostView,
    LLMRequestDetailView,
    LLMRequestListCreateView,
    RequestStatsView,
    TotalCostView,
)

urlpatterns = [
    path("analytics/requests/", LLMRequestListCreateView.as_view(), name="analytics-requests"),
    path(
        "analytics/requests/<uuid:request_id>/",
        LLMRequestDetailView.as_view(),
        name="analytics-request-detail",
    ),
    path("analytics/costs/total/", TotalCostView.as_view(), name="analytics-costs-total"),
    path("analytics/costs/by-model/", CostByModelView.as_view(), name="analytics-costs-by-model"),
    path("analytics/costs/by-provider/", CostByProviderView.as_view(), name="analytics-costs-by-provider"),
    path("analytics/costs/by-config/", CostByConfigView.as_view(), name="analytics-costs-by-config"),
    path("analytics/costs/daily/", DailyCostView.as_view(), name="analytics-costs-daily"),
    path("analytics/costs/summary/", CostSummaryView.as_view(), name="analytics-costs-summary"),
    path("analytics/stats/", RequestStatsView.as_view(), name="analytics-stats"),
]
