"""
apps.providers.views
~~~~~~~~~~~~~~~~~~~~
Thin DRF views for the provider catalog and provider configs.
"""
from drf_spectacular.utils import extend_schema
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from common.pagination import get_limit_offset
from common.responses import success_response
from . import services
from .serializers import (
    ProviderConfigSerializer,
    ProviderConfigUpdateSerializer,
    ProviderConfigUpsertSerializer,
    ProviderInfoSerializer,
    ProviderModelSerializer,
)


class ProviderListView(APIView):
    """GET /providers/"""

    @extend_schema(summary="List Providers", responses={200: ProviderInfoSerializer(many=True)}, tags=["Providers"])
    def get(self, request: Request) -> Response:
        return success_response(ProviderInfoSerializer(services.list_providers(), many=True).data)


class ProviderModelListView(APIView):
    """GET /providers/{providerId}/models/"""

    @extend_schema(
        summary="List Provider Models",
        description="Unknown providers return an empty list.",
        responses={200: ProviderModelSerializer(many=True)},
        tags=["Providers"],
    )
    def get(self, request: Request, provider_id: str) -> Response:
        return success_response(ProviderModelSerializer(services.list_models(provider_id), many=True).data)


class ProviderConfigListView(APIView):
    """GET / POST /providers/configs/"""

    @extend_schema(
        summary="List Provider Configs",
        responses={200: ProviderConfigSerializer(many=True)},
        tags=["Providers"],
    )
    def get(self, request: Request) -> Response:
        limit, offset = get_limit_offset(request)
        configs = services.list_provider_configs(limit=limit, offset=offset)
        return success_response(ProviderConfigSerializer(configs, many=True).data)

    @extend_schema(
        summary="Upsert Provider Config",
        description="Creates the config for providerId, or replaces the existing one.",
        request=ProviderConfigUpsertSerializer,
        responses={200: ProviderConfigSerializer},
        tags=["Providers"],
    )
    def post(self, request: Request) -> Response:
        serializer = ProviderConfigUpsertSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        vd = serializer.validated_data
        provider_config = services.upsert_provider_config(
            provider_id=vd["providerId"],
            config=vd["config"],
            slug=vd["slug"],
            name=vd["name"],
            enabled=vd["enabled"],
        )
        return success_response(ProviderConfigSerializer(provider_config).data)


class ProviderConfigDetailView(APIView):
    """GET / PATCH / DELETE /providers/configs/{id}/"""

    @extend_schema(summary="Get Provider Config", responses={200: ProviderConfigSerializer}, tags=["Providers"])
    def get(self, request: Request, pk) -> Response:
        return success_response(ProviderConfigSerializer(services.get_provider_config(pk)).data)

    @extend_schema(
        summary="Update Provider Config",
        request=ProviderConfigUpdateSerializer,
        responses={200: ProviderConfigSerializer},
        tags=["Providers"],
    )
    def patch(self, request: Request, pk) -> Response:
        serializer = ProviderConfigUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        provider_config = services.update_provider_config(pk, **serializer.validated_data)
        return success_response(ProviderConfigSerializer(provider_config).data)

    @extend_schema(summary="Delete Provider Config", responses={200: ProviderConfigSerializer}, tags=["Providers"])
    def delete(self, request: Request, pk) -> Response:
        data = ProviderConfigSerializer(services.get_provider_config(pk)).data
        services.delete_provider_config(pk)
        return success_response(data)
