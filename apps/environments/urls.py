"""
apps.environments.urls
~~~~~~~~~~~~~~~~~~~~~~
Mounted at /v1/ by the root URLconf.
"""
from django.urls import path

from .views import EnvironmentDetailView, EnvironmentListCreateView, EnvironmentSecretListView

urlpatterns = [
    path("environments/", EnvironmentListCreateView.as_view(), name="environment-list-create"),
    path("environments/<uuid:pk>/", EnvironmentDetailView.as_view(), name="environment-detail"),
    path("environments/<uuid:pk>/secrets/", EnvironmentSecretListView.as_view(), name="environment-secrets"),
]
