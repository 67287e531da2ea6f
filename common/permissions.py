"""
common.permissions
~~~~~~~~~~~~~~~~~~
DRF permission gate for the ``/v1/`` API: the caller must be authenticated
and must be the workspace super admin.
"""
from django.conf import settings
from rest_framework.permissions import BasePermission

from apps.workspace.state import super_admin_cache


class IsSuperAdmin(BasePermission):
    """
    Allow access only to the user recorded as ``super_admin_id`` in the
    workspace settings.

    Unauthenticated requests are refused with 401 (DRF consults the first
    authentication class for the ``WWW-Authenticate`` header), authenticated
    non-admins with 403.  Setting ``LLMOPS_REQUIRE_SUPER_ADMIN = False``
    relaxes the check to "any authenticated user".
    """

    message = "Only the workspace super admin may access this resource."

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not (user and user.is_authenticated):
            return False
        if not getattr(settings, "LLMOPS_REQUIRE_SUPER_ADMIN", True):
            return True
        admin_id = super_admin_cache.get()
        return admin_id is not None and str(user.pk) == admin_id


ENV_SECRET_HEADER = "X-LLMOps-Env-Secret"


def get_env_secret(request) -> str | None:
    """The environment secret sent in the ``X-LLMOps-Env-Secret`` header, if any."""
    return request.headers.get(ENV_SECRET_HEADER) or None


class HasEnvironmentSecret(BasePermission):
    """
    Admit runtime callers that present an environment secret.

    Only the header's presence is checked here; the service layer looks the
    secret up and rejects unknown values with 401.
    """

    def has_permission(self, request, view) -> bool:
        return get_env_secret(request) is not None
