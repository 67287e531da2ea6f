"""
apps.providers.urls
~~~~~~~~~~~~~~~~~~~
Mounted at /v1/ by the root URLconf.
"""
from django.urls import path

from .views import ProviderConfigDetailView, ProviderConfigListView, ProviderListView, ProviderModelListView

urlpatterns = [
    path("providers/", ProviderListView.as_view(), name="provider-list"),
    path("providers/configs/", ProviderConfigListView.as_view(), name="provider-config-list"),
    path("providers/configs/<uuid:pk>/", ProviderConfigDetailView.as_view(), name="provider-config-detail"),
    path("providers/<str:provider_id>/models/", ProviderModelListView.as_view(), name="provider-models"),
]
