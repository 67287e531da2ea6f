"""
apps.environments.views
~~~~~~~~~~~~~~~~~~~~~~~
Thin DRF views for environments; all logic delegated to services.

Endpoints
---------
POST   /environments/               – create (issues a secret key)
GET    /environments/               – list
GET    /environments/{id}/          – read
PATCH  /environments/{id}/          – rename / re-slug
DELETE /environments/{id}/          – delete (non-production only)
GET    /environments/{id}/secrets/  – list secrets
"""
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from common.pagination import get_limit_offset
from common.responses import success_response
from . import services
from .serializers import (
    EnvironmentCreateSerializer,
    EnvironmentSecretSerializer,
    EnvironmentSerializer,
    EnvironmentUpdateSerializer,
)


class EnvironmentListCreateView(APIView):
    """GET / POST /environments/"""

    @extend_schema(summary="List Environments", responses={200: EnvironmentSerializer(many=True)}, tags=["Environments"])
    def get(self, request: Request) -> Response:
        limit, offset = get_limit_offset(request)
        environments = services.list_environments(limit=limit, offset=offset)
        return success_response(EnvironmentSerializer(environments, many=True).data)

    @extend_schema(
        summary="Create Environment",
        request=EnvironmentCreateSerializer,
        responses={
            200: EnvironmentSerializer,
            400: OpenApiResponse(description="Invalid body or slug already in use."),
        },
        tags=["Environments"],
    )
    def post(self, request: Request) -> Response:
        serializer = EnvironmentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        vd = serializer.validated_data
        environment = services.create_environment(
            name=vd["name"],
            slug=vd["slug"],
            is_prod=vd.get("isProd"),
        )
        return success_response(EnvironmentSerializer(environment).data)


class EnvironmentDetailView(APIView):
    """GET / PATCH / DELETE /environments/{id}/"""

    @extend_schema(summary="Get Environment", responses={200: EnvironmentSerializer}, tags=["Environments"])
    def get(self, request: Request, pk) -> Response:
        environment = services.get_environment(pk)
        return success_response(EnvironmentSerializer(environment).data)

    @extend_schema(
        summary="Update Environment",
        request=EnvironmentUpdateSerializer,
        responses={200: EnvironmentSerializer},
        tags=["Environments"],
    )
    def patch(self, request: Request, pk) -> Response:
        serializer = EnvironmentUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        environment = services.update_environment(pk, **serializer.validated_data)
        return success_response(EnvironmentSerializer(environment).data)

    @extend_schema(summary="Delete Environment", responses={200: EnvironmentSerializer}, tags=["Environments"])
    def delete(self, request: Request, pk) -> Response:
        data = EnvironmentSerializer(services.get_environment(pk)).data
        services.delete_environment(pk)
        return success_response(data)


class EnvironmentSecretListView(APIView):
    """GET /environments/{id}/secrets/"""

    @extend_schema(
        summary="List Environment Secrets",
        responses={200: EnvironmentSecretSerializer(many=True)},
        tags=["Environments"],
    )
    def get(self, request: Request, pk) -> Response:
        secrets = services.list_secrets(pk)
        return success_response(EnvironmentSecretSerializer(secrets, many=True).data)
