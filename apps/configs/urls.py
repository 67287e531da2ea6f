"""
apps.configs.urls
~~~~~~~~~~~~~~~~~
Mounted at /v1/ by the root URLconf.
"""
from django.urls import path

from .views import (
    ConfigDetailView,
    ConfigListCreateView,
    ConfigVariantDetailView,
    ConfigVariantListCreateView,
)

urlpatterns = [
    path("configs/", ConfigListCreateView.as_view(), name="config-list-create"),
    path("configs/<uuid:pk>/", ConfigDetailView.as_view(), name="config-detail"),
    path("configs/<uuid:pk>/variants/", ConfigVariantListCreateView.as_view(), name="config-variants"),
    path(
        "configs/<uuid:pk>/variants/<uuid:variant_id>/",
        ConfigVariantDetailView.as_view(),
        name="config-variant-detail",
    ),
]
