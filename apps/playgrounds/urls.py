"""
apps.playgrounds.urls
~~~~~~~~~~~~~~~~~~~~~
Mounted at /v1/ by the root URLconf.
"""
from django.urls import path

from .views import PlaygroundDetailView, PlaygroundListCreateView

urlpatterns = [
    path("playgrounds/", PlaygroundListCreateView.as_view(), name="playground-list-create"),
    path("playgrounds/<uuid:pk>/", PlaygroundDetailView.as_view(), name="playground-detail"),
]
