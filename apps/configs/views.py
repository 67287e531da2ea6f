"""
apps.configs.views
~~~~~~~~~~~~~~~~~~
Thin DRF views for configs and the variants linked to them.

Endpoints
---------
POST   /configs/                           – create
GET    /configs/                           – list
GET    /configs/{id}/                      – read
PATCH  /configs/{id}/                      – rename
DELETE /configs/{id}/                      – delete
GET    /configs/{id}/variants/             – linked variants with latest version
POST   /configs/{id}/variants/             – create a variant and link it
DELETE /configs/{id}/variants/{variantId}/ – unlink a variant
"""
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.variants import services as variant_services
from apps.variants.serializers import ConfigVariantSerializer, VariantCreateSerializer
from common.pagination import get_limit_offset
from common.responses import success_response
from . import services
from .serializers import ConfigNameSerializer, ConfigSerializer


class ConfigListCreateView(APIView):
    """GET / POST /configs/"""

    @extend_schema(summary="List Configs", responses={200: ConfigSerializer(many=True)}, tags=["Configs"])
    def get(self, request: Request) -> Response:
        limit, offset = get_limit_offset(request)
        configs = services.list_configs(limit=limit, offset=offset)
        return success_response(ConfigSerializer(configs, many=True).data)

    @extend_schema(
        summary="Create Config",
        request=ConfigNameSerializer,
        responses={
            200: ConfigSerializer,
            400: OpenApiResponse(description="Name missing or blank."),
        },
        tags=["Configs"],
    )
    def post(self, request: Request) -> Response:
        serializer = ConfigNameSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        config = services.create_config(name=serializer.validated_data["name"])
        return success_response(ConfigSerializer(config).data)


class ConfigDetailView(APIView):
    """GET / PATCH / DELETE /configs/{id}/"""

    @extend_schema(summary="Get Config", responses={200: ConfigSerializer}, tags=["Configs"])
    def get(self, request: Request, pk) -> Response:
        return success_response(ConfigSerializer(services.get_config(pk)).data)

    @extend_schema(
        summary="Rename Config",
        request=ConfigNameSerializer,
        responses={200: ConfigSerializer},
        tags=["Configs"],
    )
    def patch(self, request: Request, pk) -> Response:
        serializer = ConfigNameSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        config = services.rename_config(pk, name=serializer.validated_data["name"])
        return success_response(ConfigSerializer(config).data)

    @extend_schema(summary="Delete Config", responses={200: ConfigSerializer}, tags=["Configs"])
    def delete(self, request: Request, pk) -> Response:
        data = ConfigSerializer(services.get_config(pk)).data
        services.delete_config(pk)
        return success_response(data)


class ConfigVariantListCreateView(APIView):
    """GET / POST /configs/{id}/variants/"""

    @extend_schema(
        summary="List Config Variants",
        responses={200: ConfigVariantSerializer(many=True)},
        tags=["Configs"],
    )
    def get(self, request: Request, pk) -> Response:
        limit, offset = get_limit_offset(request)
        links = variant_services.list_config_variants(pk, limit=limit, offset=offset)
        return success_response(ConfigVariantSerializer(links, many=True).data)

    @extend_schema(
        summary="Create Variant For Config",
        description="Creates a variant with its first version and links it to the config.",
        request=VariantCreateSerializer,
        responses={200: ConfigVariantSerializer},
        tags=["Configs"],
    )
    def post(self, request: Request, pk) -> Response:
        serializer = VariantCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        vd = serializer.validated_data
        link = variant_services.create_variant_for_config(
            pk,
            name=vd["name"],
            provider=vd["provider"],
            model_name=vd["modelName"],
            json_data=vd["jsonData"],
        )
        return success_response(ConfigVariantSerializer(link).data)


class ConfigVariantDetailView(APIView):
    """DELETE /configs/{id}/variants/{variantId}/"""

    @extend_schema(
        summary="Remove Variant From Config",
        responses={404: OpenApiResponse(description="Variant is not linked to the config.")},
        tags=["Configs"],
    )
    def delete(self, request: Request, pk, variant_id) -> Response:
        variant_services.remove_variant_from_config(pk, variant_id)
        return success_response({"configId": str(pk), "variantId": str(variant_id)})
