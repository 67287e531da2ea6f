"""
apps.playgrounds.views
~~~~~~~~~~~~~~~~~~~~~~
Thin DRF views for playgrounds.

Endpoints
---------
POST   /playgrounds/       – create
GET    /playgrounds/       – list (newest first)
GET    /playgrounds/{id}/  – read
PATCH  /playgrounds/{id}/  – update name, description and/or state
DELETE /playgrounds/{id}/  – delete
"""
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from common.pagination import get_limit_offset
from common.responses import success_response
from . import services
from .serializers import (
    PlaygroundCreateSerializer,
    PlaygroundSerializer,
    PlaygroundUpdateSerializer,
)


class PlaygroundListCreateView(APIView):
    """GET / POST /playgrounds/"""

    @extend_schema(summary="List Playgrounds", responses={200: PlaygroundSerializer(many=True)}, tags=["Playgrounds"])
    def get(self, request: Request) -> Response:
        limit, offset = get_limit_offset(request)
        playgrounds = services.list_playgrounds(limit=limit, offset=offset)
        return success_response(PlaygroundSerializer(playgrounds, many=True).data)

    @extend_schema(
        summary="Create Playground",
        request=PlaygroundCreateSerializer,
        responses={
            200: PlaygroundSerializer,
            400: OpenApiResponse(description="Name missing or state is not an object."),
        },
        tags=["Playgrounds"],
    )
    def post(self, request: Request) -> Response:
        serializer = PlaygroundCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        playground = services.create_playground(**serializer.validated_data)
        return success_response(PlaygroundSerializer(playground).data)


class PlaygroundDetailView(APIView):
    """GET / PATCH / DELETE /playgrounds/{id}/"""

    @extend_schema(summary="Get Playground", responses={200: PlaygroundSerializer}, tags=["Playgrounds"])
    def get(self, request: Request, pk) -> Response:
        return success_response(PlaygroundSerializer(services.get_playground(pk)).data)

    @extend_schema(
        summary="Update Playground",
        request=PlaygroundUpdateSerializer,
        responses={200: PlaygroundSerializer},
        tags=["Playgrounds"],
    )
    def patch(self, request: Request, pk) -> Response:
        serializer = PlaygroundUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        playground = services.update_playground(pk, **serializer.validated_data)
        return success_response(PlaygroundSerializer(playground).data)

    @extend_schema(summary="Delete Playground", responses={200: PlaygroundSerializer}, tags=["Playgrounds"])
    def delete(self, request: Request, pk) -> Response:
        data = PlaygroundSerializer(services.get_playground(pk)).data
        services.delete_playground(pk)
        return success_response(data)
