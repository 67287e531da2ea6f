"""
apps.workspace.urls
~~~~~~~~~~~~~~~~~~~
Mounted at /v1/ by the root URLconf.
"""
from django.urls import path

from .views import MeView, SetupView, WorkspaceSettingsView

urlpatterns = [
    path("workspace-settings/", WorkspaceSettingsView.as_view(), name="workspace-settings"),
    path("auth/setup/", SetupView.as_view(), name="auth-setup"),
    path("auth/me/", MeView.as_view(), name="auth-me"),
]
