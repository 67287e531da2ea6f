"""
apps.providers.services
~~~~~~~~~~~~~~~~~~~~~~~
Business logic for the provider catalog and stored provider configs.

Views must call only these functions.
"""
from __future__ import annotations

import uuid
from collections.abc import Mapping

import structlog
from django.db import IntegrityError, transaction

from common.exceptions import ValidationError
from common.lookups import get_or_not_found
from .catalog import get_catalog
from .models import ProviderConfig

logger = structlog.get_logger(__name__)

_UNCHANGED = object()
_MAX_SLUG_SUFFIX = 99


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

def list_providers() -> list[dict]:
    return get_catalog().list_providers()


def list_models(provider_id: str) -> list[dict]:
    """Models offered by *provider_id*.  Unknown providers give ``[]``."""
    return get_catalog().list_models(provider_id)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def generate_unique_slug(base_slug: str) -> str:
    """
    Return *base_slug* if free, else the first free ``<base>-NN`` with
    ``NN`` in 01..99, else ``<base>-<8 hex chars>``.
    """
    taken = set(
        ProviderConfig.objects.filter(slug__startswith=base_slug).values_list("slug", flat=True)
    )
    if base_slug not in taken:
        return base_slug
    for counter in range(1, _MAX_SLUG_SUFFIX + 1):
        candidate = f"{base_slug}-{counter:02d}"
        if candidate not in taken:
            return candidate
    return f"{base_slug}-{uuid.uuid4().hex[:8]}"


def _require_provider_id(provider_id) -> str:
    if not isinstance(provider_id, str) or not provider_id.strip():
        raise ValidationError(
            "providerId must not be empty.",
            errors=[{"field": "providerId", "message": "This field may not be blank."}],
        )
    return provider_id.strip()


def _require_mapping(config) -> dict:
    if not isinstance(config, Mapping):
        raise ValidationError(
            "Invalid provider config.",
            errors=[{"field": "config", "message": "Must be a JSON object."}],
        )
    return dict(config)


def _save(provider_config: ProviderConfig) -> ProviderConfig:
    try:
        with transaction.atomic():
            provider_config.save()
    except IntegrityError as exc:
        raise ValidationError(
            f"Provider config slug '{provider_config.slug}' is already in use.",
            errors=[{"field": "slug", "message": "A provider config with this slug already exists."}],
        ) from exc
    return provider_config


# ---------------------------------------------------------------------------
# Provider config CRUD
# ---------------------------------------------------------------------------

def list_provider_configs(*, limit: int = 100, offset: int = 0) -> list[ProviderConfig]:
    return list(ProviderConfig.objects.all()[offset:offset + limit])


def get_provider_config(provider_config_id) -> ProviderConfig:
    return get_or_not_found(ProviderConfig, provider_config_id, "Provider config")


def get_provider_config_by_provider(provider_id: str) -> ProviderConfig | None:
    return ProviderConfig.objects.filter(provider_id=provider_id).order_by("created_at").first()


def create_provider_config(
    *,
    provider_id: str,
    config,
    slug: str | None = None,
    name: str | None = None,
    enabled: bool = True,
) -> ProviderConfig:
    provider_id = _require_provider_id(provider_id)
    provider_config = _save(
        ProviderConfig(
            provider_id=provider_id,
            slug=slug or generate_unique_slug(provider_id),
            name=name,
            config=_require_mapping(config),
            enabled=enabled,
        )
    )
    logger.info(
        "provider_config_created",
        provider_config_id=str(provider_config.id),
        provider_id=provider_id,
        slug=provider_config.slug,
    )
    return provider_config


def update_provider_config(
    provider_config_id,
    *,
    slug=_UNCHANGED,
    name=_UNCHANGED,
    config=_UNCHANGED,
    enabled=_UNCHANGED,
) -> ProviderConfig:
    """Patch a provider config; only the keyword arguments passed are applied."""
    provider_config = get_provider_config(provider_config_id)
    if slug is not _UNCHANGED and slug:
        provider_config.slug = slug
    if name is not _UNCHANGED:
        provider_config.name = name
    if config is not _UNCHANGED:
        provider_config.config = _require_mapping(config)
    if enabled is not _UNCHANGED:
        provider_config.enabled = bool(enabled)
    _save(provider_config)
    logger.info("provider_config_updated", provider_config_id=str(provider_config.id))
    return provider_config


def upsert_provider_config(
    *,
    provider_id: str,
    config,
    slug: str | None = None,
    name: str | None = None,
    enabled: bool = True,
) -> ProviderConfig:
    """
    Create the config for *provider_id*, or overwrite the existing one.

    On update, a missing *slug* or *name* keeps the stored value; *config*
    and *enabled* always replace it.
    """
    provider_id = _require_provider_id(provider_id)
    existing = get_provider_config_by_provider(provider_id)
    if existing is None:
        return create_provider_config(
            provider_id=provider_id, config=config, slug=slug, name=name, enabled=enabled
        )

    existing.slug = slug or existing.slug or generate_unique_slug(provider_id)
    existing.name = name if name is not None else existing.name
    existing.config = _require_mapping(config)
    existing.enabled = enabled
    _save(existing)
    logger.info(
        "provider_config_upserted",
        provider_config_id=str(existing.id),
        provider_id=provider_id,
    )
    return existing


def delete_provider_config(provider_config_id) -> None:
    get_provider_config(provider_config_id).delete()
    logger.info("provider_config_deleted", provider_config_id=str(provider_config_id))
