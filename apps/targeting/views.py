"""
apps.targeting.views
~~~~~~~~~~~~~~~~~~~~
Thin DRF views for targeting rules and resolution.

Endpoints
---------
POST   /targeting/                             – create a rule
GET    /targeting/                             – list rules (?environmentId=&configId=)
GET    /targeting/{id}/                        – read
PATCH  /targeting/{id}/                        – update
DELETE /targeting/{id}/                        – delete
POST   /targeting/set/                         – one-rule upsert for a pair
GET    /targeting/config/{configId}/           – rules for a config
GET    /targeting/environment/{environmentId}/ – rules for an environment
POST   /targeting/resolve/                     – resolve the serving version
"""
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from common.pagination import get_limit_offset
from common.permissions import ENV_SECRET_HEADER, HasEnvironmentSecret, IsSuperAdmin, get_env_secret
from common.responses import success_response
from . import services
from .serializers import (
    ResolutionSerializer,
    ResolveSerializer,
    SetTargetingSerializer,
    TargetingRuleCreateSerializer,
    TargetingRuleFilterSerializer,
    TargetingRuleSerializer,
    TargetingRuleUpdateSerializer,
)

# request key → service keyword
_UPDATE_FIELDS = {
    "configVariantId": "config_variant_id",
    "variantVersionId": "variant_version_id",
    "weight": "weight",
    "priority": "priority",
    "enabled": "enabled",
    "conditions": "conditions",
}


class TargetingRuleListCreateView(APIView):
    """GET / POST /targeting/"""

    @extend_schema(
        summary="List Targeting Rules",
        parameters=[
            OpenApiParameter("environmentId", str, description="Only rules for this environment."),
            OpenApiParameter("configId", str, description="Only rules for this config."),
        ],
        responses={200: TargetingRuleSerializer(many=True)},
        tags=["Targeting"],
    )
    def get(self, request: Request) -> Response:
        filters = TargetingRuleFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        limit, offset = get_limit_offset(request)
        rules = services.list_rules(
            environment_id=filters.validated_data.get("environmentId"),
            config_id=filters.validated_data.get("configId"),
            limit=limit,
            offset=offset,
        )
        return success_response(TargetingRuleSerializer(rules, many=True).data)

    @extend_schema(
        summary="Create Targeting Rule",
        description="Adds a rule for the pair; existing rules are left untouched.",
        request=TargetingRuleCreateSerializer,
        responses={200: TargetingRuleSerializer},
        tags=["Targeting"],
    )
    def post(self, request: Request) -> Response:
        serializer = TargetingRuleCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        vd = serializer.validated_data
        rule = services.create_rule(
            environment_id=vd["environmentId"],
            config_id=vd["configId"],
            config_variant_id=vd["configVariantId"],
            variant_version_id=vd["variantVersionId"],
            weight=vd["weight"],
            priority=vd["priority"],
            enabled=vd["enabled"],
            conditions=vd["conditions"],
        )
        return success_response(TargetingRuleSerializer(rule).data)


class TargetingRuleDetailView(APIView):
    """GET / PATCH / DELETE /targeting/{id}/"""

    @extend_schema(summary="Get Targeting Rule", responses={200: TargetingRuleSerializer}, tags=["Targeting"])
    def get(self, request: Request, pk) -> Response:
        return success_response(TargetingRuleSerializer(services.get_rule_details(pk)).data)

    @extend_schema(
        summary="Update Targeting Rule",
        request=TargetingRuleUpdateSerializer,
        responses={200: TargetingRuleSerializer},
        tags=["Targeting"],
    )
    def patch(self, request: Request, pk) -> Response:
        serializer = TargetingRuleUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        changes = {_UPDATE_FIELDS[key]: value for key, value in serializer.validated_data.items()}
        rule = services.update_rule(pk, **changes)
        return success_response(TargetingRuleSerializer(rule).data)

    @extend_schema(summary="Delete Targeting Rule", responses={200: TargetingRuleSerializer}, tags=["Targeting"])
    def delete(self, request: Request, pk) -> Response:
        data = TargetingRuleSerializer(services.get_rule_details(pk)).data
        services.delete_rule(pk)
        return success_response(data)


class SetTargetingView(APIView):
    """POST /targeting/set/"""

    @extend_schema(
        summary="Set Targeting",
        description=(
            "Points the (config, environment) pair at one variant.  Leaves exactly "
            "one enabled, full-weight rule without conditions."
        ),
        request=SetTargetingSerializer,
        responses={
            200: TargetingRuleSerializer,
            404: OpenApiResponse(description="Environment, config, variant or version not found."),
        },
        tags=["Targeting"],
    )
    def post(self, request: Request) -> Response:
        serializer = SetTargetingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        vd = serializer.validated_data
        rule = services.set_targeting(
            vd["environmentId"],
            vd["configId"],
            vd["configVariantId"],
            vd["variantVersionId"],
        )
        return success_response(TargetingRuleSerializer(rule).data)


class ConfigTargetingView(APIView):
    """GET /targeting/config/{configId}/"""

    @extend_schema(
        summary="List Targeting Rules For Config",
        responses={200: TargetingRuleSerializer(many=True)},
        tags=["Targeting"],
    )
    def get(self, request: Request, config_id) -> Response:
        rules = services.list_targeting_rules(config_id)
        return success_response(TargetingRuleSerializer(rules, many=True).data)


class EnvironmentTargetingView(APIView):
    """GET /targeting/environment/{environmentId}/"""

    @extend_schema(
        summary="List Targeting Rules For Environment",
        responses={200: TargetingRuleSerializer(many=True)},
        tags=["Targeting"],
    )
    def get(self, request: Request, environment_id) -> Response:
        rules = services.list_rules_for_environment(environment_id)
        return success_response(TargetingRuleSerializer(rules, many=True).data)


class ResolveView(APIView):
    """
    POST /targeting/resolve/

    Open to the super admin and to runtime callers holding an environment
    secret.  When the secret header is sent it selects the environment and
    ``environmentId`` in the body is ignored.
    """

    permission_classes = [IsSuperAdmin | HasEnvironmentSecret]

    @extend_schema(
        summary="Resolve Variant",
        parameters=[
            OpenApiParameter(
                ENV_SECRET_HEADER,
                str,
                location=OpenApiParameter.HEADER,
                required=False,
                description="Environment secret; selects the environment.",
            ),
        ],
        request=ResolveSerializer,
        responses={
            200: ResolutionSerializer,
            401: OpenApiResponse(description="Unknown environment secret."),
            404: OpenApiResponse(description="Config not found, or no variant configured."),
        },
        tags=["Targeting"],
    )
    def post(self, request: Request) -> Response:
        serializer = ResolveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        vd = serializer.validated_data
        env_secret = get_env_secret(request)
        resolution = services.resolve_for_runtime(
            vd["configId"],
            environment_id=None if env_secret else vd["environmentId"],
            env_secret=env_secret,
            attributes=vd["attributes"],
        )
        return success_response(ResolutionSerializer(resolution).data)
