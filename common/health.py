"""
common.health
~~~~~~~~~~~~~
GET /health/ – liveness + readiness probe, reachable without credentials.

Returns:
    200  {"status": "ok", "db": "ok", "setup_complete": bool}
    503  {"status": "degraded", "db": "error: <msg>", "setup_complete": null}

``setup_complete`` lets a fresh deployment's UI know it must run
``POST /v1/auth/setup/`` before anything else.
"""
import structlog
from django.db import DatabaseError, connection
from django.http import JsonResponse

from apps.workspace import services as workspace_services

logger = structlog.get_logger(__name__)


def health_check(request):
    """Return service health including database connectivity status."""
    setup_complete = None
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        setup_complete = workspace_services.is_setup_complete()
        db_status = "ok"
        http_status = 200
    except DatabaseError as exc:
        db_status = f"error: {exc}"
        http_status = 503
        logger.error("health_check_db_failure", error=str(exc))

    return JsonResponse(
        {
            "status": "ok" if http_status == 200 else "degraded",
            "db": db_status,
            "setup_complete": setup_complete,
        },
        status=http_status,
    )
