"""
apps.environments.services
~~~~~~~~~~~~~~~~~~~~~~~~~~
All business logic for environments and their secrets.

Responsibilities
----------------
- CRUD for :class:`~apps.environments.models.Environment`.
- Issuing one secret key per new environment.
- Looking environments up the ways a runtime caller can name them: by id,
  by secret key, or "the production environment".
"""
from __future__ import annotations

import structlog
from django.db import IntegrityError, transaction

from common.exceptions import NotFoundError, ValidationError
from common.ids import generate_secret_key
from common.lookups import get_or_not_found
from .models import Environment, EnvironmentSecret

logger = structlog.get_logger(__name__)

DEFAULT_SECRET_NAME = "Secret key"

_TRUE_STRINGS = {"true", "1", "yes", "on", "t", "y"}
_FALSE_STRINGS = {"false", "0", "no", "off", "f", "n", ""}


def normalize_is_prod(value) -> bool:
    """
    Normalise an ``isProd`` flag that may arrive as a bool, an int (0/1) or
    a string (``"true"``, ``"0"``…).  ``None`` means ``False``.

    Raises:
        ValidationError: for any other value.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValidationError(
        "Invalid isProd value.",
        errors=[{"field": "isProd", "message": f"Cannot interpret {value!r} as a boolean."}],
    )


def _duplicate_slug(slug: str) -> ValidationError:
    return ValidationError(
        f"Environment slug '{slug}' is already in use.",
        errors=[{"field": "slug", "message": "An environment with this slug already exists."}],
    )


# ---------------------------------------------------------------------------
# Environment CRUD
# ---------------------------------------------------------------------------

def create_environment(*, name: str, slug: str, is_prod=False) -> Environment:
    """
    Create an environment and issue its secret key.

    Both rows are written in one transaction.
    """
    is_prod = normalize_is_prod(is_prod)
    try:
        with transaction.atomic():
            environment = Environment.objects.create(name=name, slug=slug, is_prod=is_prod)
            EnvironmentSecret.objects.create(
                environment=environment,
                key_name=DEFAULT_SECRET_NAME,
                key_value=generate_secret_key(slug),
            )
    except IntegrityError as exc:
        raise _duplicate_slug(slug) from exc

    logger.info(
        "environment_created",
        environment_id=str(environment.id),
        slug=slug,
        is_prod=is_prod,
    )
    return environment


def list_environments(*, limit: int = 100, offset: int = 0) -> list[Environment]:
    return list(Environment.objects.all()[offset:offset + limit])


def get_environment(environment_id) -> Environment:
    return get_or_not_found(Environment, environment_id, "Environment")


def get_environment_by_secret(key_value: str) -> Environment:
    secret = (
        EnvironmentSecret.objects.select_related("environment")
        .filter(key_value=key_value)
        .first()
    )
    if secret is None:
        raise NotFoundError("Invalid environment secret.")
    return secret.environment


def get_production_environment() -> Environment:
    environment = Environment.objects.filter(is_prod=True).order_by("created_at").first()
    if environment is None:
        raise NotFoundError("No production environment found.")
    return environment


def update_environment(environment_id, *, name: str | None = None, slug: str | None = None) -> Environment:
    """Rename and/or re-slug an environment.  ``is_prod`` is not updatable."""
    environment = get_environment(environment_id)
    update_fields = ["updated_at"]
    if name is not None:
        environment.name = name
        update_fields.append("name")
    if slug is not None:
        environment.slug = slug
        update_fields.append("slug")
    try:
        with transaction.atomic():
            environment.save(update_fields=update_fields)
    except IntegrityError as exc:
        raise _duplicate_slug(slug) from exc
    logger.info("environment_updated", environment_id=str(environment.id))
    return environment


def delete_environment(environment_id) -> None:
    """Delete a non-production environment (its secrets and rules go too)."""
    environment = get_environment(environment_id)
    if environment.is_prod:
        raise ValidationError(
            "Production environments cannot be deleted.",
            errors=[{"field": "id", "message": "Environment is marked as production."}],
        )
    environment.delete()
    logger.info("environment_deleted", environment_id=str(environment_id))


# ---------------------------------------------------------------------------
# Secrets
# ---------------------------------------------------------------------------

def list_secrets(environment_id) -> list[EnvironmentSecret]:
    environment = get_environment(environment_id)
    return list(environment.secrets.all())
