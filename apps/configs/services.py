"""
apps.configs.services
~~~~~~~~~~~~~~~~~~~~~
All business logic for configs.  Views must call only these functions.
"""
from __future__ import annotations

import uuid

import structlog

from common.exceptions import NotFoundError, ValidationError
from common.lookups import get_or_not_found
from .models import Config

logger = structlog.get_logger(__name__)


def _require_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError(
            "Config name must not be empty.",
            errors=[{"field": "name", "message": "This field may not be blank."}],
        )
    return name


def create_config(*, name: str) -> Config:
    """Create a config; a unique short slug is generated on save."""
    config = Config.objects.create(name=_require_name(name))
    logger.info("config_created", config_id=str(config.id), slug=config.slug)
    return config


def list_configs(*, limit: int = 100, offset: int = 0) -> list[Config]:
    return list(Config.objects.all()[offset:offset + limit])


def get_config(config_id) -> Config:
    """Fetch a config by UUID, raising :class:`NotFoundError` if absent."""
    return get_or_not_found(Config, config_id, "Config")


def get_config_by_ref(ref: str) -> Config:
    """
    Fetch a config by UUID *or* slug.

    Runtime callers (SDKs, the gateway) usually only know the slug.
    """
    try:
        config_uuid = uuid.UUID(str(ref))
    except ValueError:
        config = Config.objects.filter(slug=ref).first()
    else:
        config = Config.objects.filter(pk=config_uuid).first()
    if config is None:
        raise NotFoundError(f"Config '{ref}' not found.")
    return config


def rename_config(config_id, *, name: str) -> Config:
    config = get_config(config_id)
    config.name = _require_name(name)
    config.save(update_fields=["name", "updated_at"])
    logger.info("config_renamed", config_id=str(config.id))
    return config


def delete_config(config_id) -> None:
    """Delete a config together with its variant links and targeting rules."""
    get_config(config_id).delete()
    logger.info("config_deleted", config_id=str(config_id))
