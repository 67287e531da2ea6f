"""
apps.workspace.services
~~~~~~~~~~~~~~~~~~~~~~~
Business logic for the workspace singleton and the first-run setup flow.

Views must call only these functions.
"""
from __future__ import annotations

import structlog
from django.contrib.auth import get_user_model
from django.db import transaction

from common.exceptions import ForbiddenError, ValidationError
from .models import WorkspaceSettings
from .state import super_admin_cache

logger = structlog.get_logger(__name__)

_UNCHANGED = object()


# ---------------------------------------------------------------------------
# Singleton access
# ---------------------------------------------------------------------------

def _first_settings() -> WorkspaceSettings | None:
    return WorkspaceSettings.objects.order_by("created_at", "id").first()


def get_workspace_settings() -> WorkspaceSettings:
    """
    Return the workspace settings row, creating a default one if absent.

    Idempotent: with no intervening write, repeated calls return the same
    row.  Concurrent first calls may each insert; the oldest row wins for
    every later reader.
    """
    settings_row = _first_settings()
    if settings_row is None:
        settings_row = WorkspaceSettings.objects.create()
        logger.info("workspace_settings_created", settings_id=str(settings_row.id))
    return settings_row


def update_workspace_settings(*, name=_UNCHANGED) -> WorkspaceSettings:
    """
    Read-or-create the settings row, then patch ``name``.

    ``name=None`` clears the name; omitting it leaves it untouched.
    ``updated_at`` is bumped in every case.
    """
    settings_row = get_workspace_settings()
    if name is not _UNCHANGED:
        settings_row.name = name
    settings_row.save()
    logger.info("workspace_settings_updated", settings_id=str(settings_row.id))
    return settings_row


# ---------------------------------------------------------------------------
# Super admin & setup
# ---------------------------------------------------------------------------

def get_super_admin_id() -> str | None:
    settings_row = _first_settings()
    return settings_row.super_admin_id if settings_row else None


def set_super_admin_id(user_id) -> bool:
    """
    Record *user_id* as the super admin, only if none is set yet.

    Returns ``True`` when the id was written.  The process-wide cache is
    invalidated here so callers never have to.
    """
    settings_row = get_workspace_settings()
    if settings_row.super_admin_id:
        return False
    settings_row.super_admin_id = str(user_id)
    settings_row.save(update_fields=["super_admin_id", "updated_at"])
    super_admin_cache.invalidate()
    logger.info("super_admin_assigned", user_id=str(user_id))
    return True


def is_setup_complete() -> bool:
    settings_row = _first_settings()
    return bool(settings_row and settings_row.setup_complete)


def mark_setup_complete() -> WorkspaceSettings:
    settings_row = get_workspace_settings()
    settings_row.setup_complete = True
    settings_row.save(update_fields=["setup_complete", "updated_at"])
    logger.info("workspace_setup_completed", settings_id=str(settings_row.id))
    return settings_row


def run_initial_setup(*, username: str, password: str, email: str = ""):
    """
    First-run setup: create the owner account and make it the super admin.

    Raises:
        ForbiddenError: if setup has already been completed or a super admin
            is already recorded.
        ValidationError: if *username* is already taken.
    """
    settings_id = get_workspace_settings().id
    user_model = get_user_model()
    with transaction.atomic():
        # Concurrent setups queue on this lock; only the first sees it incomplete.
        locked = WorkspaceSettings.objects.select_for_update().get(pk=settings_id)
        if locked.setup_complete or locked.super_admin_id:
            raise ForbiddenError("Workspace setup has already been completed.")
        if user_model.objects.filter(username=username).exists():
            raise ValidationError(
                "Username already taken.",
                errors=[{"field": "username", "message": "A user with that username already exists."}],
            )
        user = user_model.objects.create_user(username=username, email=email, password=password)
        set_super_admin_id(user.pk)
        mark_setup_complete()

    logger.info("workspace_setup_user_created", user_id=str(user.pk))
    return user
