"""
apps.workspace.views
~~~~~~~~~~~~~~~~~~~~
Thin DRF views for workspace settings and first-run setup.

Endpoints
---------
GET    /workspace-settings/  – get-or-create the singleton
PATCH  /workspace-settings/  – update ``name``
POST   /auth/setup/          – create the owner account (open, once)
GET    /auth/me/             – current user
"""
from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from common.responses import success_response
from . import services
from .serializers import (
    SetupSerializer,
    UserSerializer,
    WorkspaceSettingsSerializer,
    WorkspaceSettingsUpdateSerializer,
)
from .state import super_admin_cache


class WorkspaceSettingsView(APIView):
    """GET / PATCH /workspace-settings/"""

    @extend_schema(
        summary="Get Workspace Settings",
        description="Returns the workspace settings, creating defaults on first access.",
        responses={200: WorkspaceSettingsSerializer},
        tags=["Workspace"],
    )
    def get(self, request: Request) -> Response:
        settings_row = services.get_workspace_settings()
        return success_response(WorkspaceSettingsSerializer(settings_row).data)

    @extend_schema(
        summary="Update Workspace Settings",
        request=WorkspaceSettingsUpdateSerializer,
        responses={200: WorkspaceSettingsSerializer},
        tags=["Workspace"],
    )
    def patch(self, request: Request) -> Response:
        serializer = WorkspaceSettingsUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        settings_row = services.update_workspace_settings(**serializer.validated_data)
        return success_response(WorkspaceSettingsSerializer(settings_row).data)


class SetupView(APIView):
    """POST /auth/setup/ – create the first user and make it super admin."""

    authentication_classes: list = []
    permission_classes = [AllowAny]

    @extend_schema(
        summary="Initial Setup",
        request=SetupSerializer,
        responses={
            201: UserSerializer,
            403: OpenApiResponse(description="Setup has already been completed."),
        },
        tags=["Auth"],
    )
    def post(self, request: Request) -> Response:
        serializer = SetupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = services.run_initial_setup(**serializer.validated_data)
        data = UserSerializer(user, context={"super_admin_id": super_admin_cache.get()}).data
        return success_response(data, status.HTTP_201_CREATED)


class MeView(APIView):
    """GET /auth/me/ – the authenticated user, admin or not."""

    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Current User", responses={200: UserSerializer}, tags=["Auth"])
    def get(self, request: Request) -> Response:
        data = UserSerializer(request.user, context={"super_admin_id": super_admin_cache.get()}).data
        return success_response(data)
