"""
apps.variants.urls
"""
from django.urls import path

from .views import VariantDetailView, VariantListCreateView, VariantVersionListCreateView

urlpatterns = [
    path("variants/", VariantListCreateView.as_view(), name="variant-list-create"),
    path("variants/<uuid:pk>/", VariantDetailView.as_view(), name="variant-detail"),
    path("variants/<uuid:pk>/versions/", VariantVersionListCreateView.as_view(), name="variant-versions"),
]
