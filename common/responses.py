"""
common.responses
~~~~~~~~~~~~~~~~
The JSON envelope every ``/v1/`` endpoint answers with::

    {"code": 200, "success": true,  "data": {...}}
    {"code": 404, "success": false, "message": "Config not found."}

``code`` mirrors the HTTP status.  Validation failures additionally carry
an ``errors`` list of ``{"field", "message"}`` dicts.
"""
from __future__ import annotations

from typing import Any

from rest_framework import status
from rest_framework.response import Response


def success_response(data: Any, code: int = status.HTTP_200_OK) -> Response:
    """Wrap *data* in a success envelope."""
    return Response({"code": code, "success": True, "data": data}, status=code)


def error_response(
    message: str,
    code: int,
    errors: list[dict[str, str]] | None = None,
) -> Response:
    """Build a failure envelope.  Used by the global exception handler."""
    body: dict[str, Any] = {"code": code, "success": False, "message": message}
    if errors:
        body["errors"] = errors
    return Response(body, status=code)
