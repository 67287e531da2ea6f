"""
apps.variants.views
~~~~~~~~~~~~~~~~~~~
DRF views for variants and their versions – thin layer; all logic
delegated to services.
"""
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from common.pagination import get_limit_offset
from common.responses import success_response
from . import services
from .serializers import (
    VariantCreateSerializer,
    VariantSerializer,
    VariantUpdateSerializer,
    VariantVersionCreateSerializer,
    VariantVersionSerializer,
)


class VariantListCreateView(APIView):
    """GET /v1/variants/  –  POST /v1/variants/"""

    @extend_schema(summary="List Variants", responses={200: VariantSerializer(many=True)}, tags=["Variants"])
    def get(self, request: Request) -> Response:
        limit, offset = get_limit_offset(request)
        variants = services.list_variants(limit=limit, offset=offset)
        return success_response(VariantSerializer(variants, many=True).data)

    @extend_schema(
        summary="Create Variant",
        description="Creates a variant and its first version.",
        request=VariantCreateSerializer,
        responses={200: VariantSerializer},
        tags=["Variants"],
    )
    def post(self, request: Request) -> Response:
        serializer = VariantCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        vd = serializer.validated_data
        variant = services.create_variant(
            name=vd["name"],
            provider=vd["provider"],
            model_name=vd["modelName"],
            json_data=vd["jsonData"],
        )
        return success_response(VariantSerializer(variant).data)


class VariantDetailView(APIView):
    """GET / PATCH / DELETE /v1/variants/<pk>/"""

    @extend_schema(summary="Get Variant", responses={200: VariantSerializer}, tags=["Variants"])
    def get(self, request: Request, pk) -> Response:
        return success_response(VariantSerializer(services.get_variant(pk)).data)

    @extend_schema(
        summary="Rename Variant",
        request=VariantUpdateSerializer,
        responses={200: VariantSerializer},
        tags=["Variants"],
    )
    def patch(self, request: Request, pk) -> Response:
        serializer = VariantUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        variant = services.rename_variant(pk, name=serializer.validated_data["name"])
        return success_response(VariantSerializer(variant).data)

    @extend_schema(summary="Delete Variant", responses={200: VariantSerializer}, tags=["Variants"])
    def delete(self, request: Request, pk) -> Response:
        data = VariantSerializer(services.get_variant(pk)).data
        services.delete_variant(pk)
        return success_response(data)


class VariantVersionListCreateView(APIView):
    """GET / POST /v1/variants/<pk>/versions/"""

    @extend_schema(
        summary="List Variant Versions",
        description="All versions of the variant, most recent first.",
        responses={200: VariantVersionSerializer(many=True)},
        tags=["Variants"],
    )
    def get(self, request: Request, pk) -> Response:
        limit, offset = get_limit_offset(request)
        versions = services.list_versions(pk, limit=limit, offset=offset)
        return success_response(VariantVersionSerializer(versions, many=True).data)

    @extend_schema(
        summary="Create Variant Version",
        description=(
            "Appends an immutable version with the next version number.  "
            "Targeting rules are not repointed."
        ),
        request=VariantVersionCreateSerializer,
        responses={
            200: VariantVersionSerializer,
            400: OpenApiResponse(description="provider or modelName empty, or jsonData not an object."),
            404: OpenApiResponse(description="Variant not found."),
        },
        tags=["Variants"],
    )
    def post(self, request: Request, pk) -> Response:
        serializer = VariantVersionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        vd = serializer.validated_data
        version = services.create_version(
            pk,
            provider=vd["provider"],
            model_name=vd["modelName"],
            json_data=vd["jsonData"],
        )
        return success_response(VariantVersionSerializer(version).data)
