"""
apps.gateway.views
~~~~~~~~~~~~~~~~~~
OpenAI-compatible gateway surface under ``/v1/genai/``.

Provider dispatch is not implemented: every operation except the health
probe answers 501 in the standard error envelope, so clients get a
well-formed "not implemented" instead of a 404.
"""
import structlog
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from common.exceptions import NotImplementedAppError

logger = structlog.get_logger(__name__)

_NOT_IMPLEMENTED = OpenApiResponse(description="Gateway operation not implemented.")


class GatewayHealthView(APIView):
    """GET /genai/health/"""

    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(summary="Gateway Health", tags=["Gateway"])
    def get(self, request: Request) -> Response:
        return Response({"status": "healthy"})


class GatewayStubView(APIView):
    """
    Placeholder for one OpenAI-compatible operation.

    ``operation`` names the endpoint in logs and in the error message; the
    allowed verbs come from ``http_method_names`` passed to ``as_view``.
    """

    authentication_classes = []
    permission_classes = [AllowAny]
    operation = "unknown"

    def _not_implemented(self, request: Request):
        logger.info("gateway_operation_not_implemented", operation=self.operation, method=request.method)
        raise NotImplementedAppError(f"Gateway operation '{self.operation}' is not implemented yet.")

    @extend_schema(summary="Gateway operation", responses={501: _NOT_IMPLEMENTED}, tags=["Gateway"])
    def get(self, request: Request, **kwargs) -> Response:
        self._not_implemented(request)

    @extend_schema(summary="Gateway operation", responses={501: _NOT_IMPLEMENTED}, tags=["Gateway"])
    def post(self, request: Request, **kwargs) -> Response:
        self._not_implemented(request)

    @extend_schema(summary="Gateway operation", responses={501: _NOT_IMPLEMENTED}, tags=["Gateway"])
    def delete(self, request: Request, **kwargs) -> Response:
        self._not_implemented(request)
