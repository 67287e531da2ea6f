"""
apps.targeting.urls
~~~~~~~~~~~~~~~~~~~
Mounted at /v1/ by the root URLconf.  The literal routes come before
``targeting/<uuid:pk>/``.
"""
from django.urls import path

from .views import (
    ConfigTargetingView,
    EnvironmentTargetingView,
    ResolveView,
    SetTargetingView,
    TargetingRuleDetailView,
    TargetingRuleListCreateView,
)

urlpatterns = [
    path("targeting/", TargetingRuleListCreateView.as_view(), name="targeting-list-create"),
    path("targeting/set/", SetTargetingView.as_view(), name="targeting-set"),
    path("targeting/resolve/", ResolveView.as_view(), name="targeting-resolve"),
    path("targeting/config/<uuid:config_id>/", ConfigTargetingView.as_view(), name="targeting-config"),
    path(
        "targeting/environment/<uuid:environment_id>/",
        EnvironmentTargetingView.as_view(),
        name="targeting-environment",
    ),
    path("targeting/<uuid:pk>/", TargetingRuleDetailView.as_view(), name="targeting-detail"),
]
