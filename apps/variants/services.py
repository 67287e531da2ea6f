"""
apps.variants.services
~~~~~~~~~~~~~~~~~~~~~~
All business logic for variants, their immutable versions, and their links
to configs.

Views must call only these functions.

Version numbering
-----------------
:func:`create_version` locks the parent :class:`Variant` row
(``SELECT … FOR UPDATE``), bumps its ``version_counter`` and inserts the
new :class:`VariantVersion` in the same transaction.  Numbers start at 1,
strictly increase, and are never handed out twice.  A call that fails
validation never reaches the counter.

Creating a version does not touch any targeting rule: rules that follow
"latest" pick the new version up on their next resolution, pinned rules
stay where they are.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping

import structlog
from django.db import transaction

from apps.configs import services as config_services
from common.exceptions import NotFoundError, ValidationError
from common.lookups import get_or_not_found
from .models import ConfigVariant, Variant, VariantVersion

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def _clean_version_fields(provider, model_name, json_data) -> tuple[str, str, dict]:
    errors = []
    if not isinstance(provider, str) or not provider.strip():
        errors.append({"field": "provider", "message": "This field may not be blank."})
    if not isinstance(model_name, str) or not model_name.strip():
        errors.append({"field": "modelName", "message": "This field may not be blank."})
    if json_data is None:
        json_data = {}
    elif not isinstance(json_data, Mapping):
        errors.append({"field": "jsonData", "message": "Must be a JSON object."})

    if errors:
        raise ValidationError("Invalid variant version.", errors=errors)
    return provider.strip(), model_name.strip(), dict(json_data)


def _require_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError(
            "Variant name must not be empty.",
            errors=[{"field": "name", "message": "This field may not be blank."}],
        )
    return name


def attach_latest_versions(variants: Iterable[Variant]) -> list[Variant]:
    """Set ``variant.latest_version`` on each variant with one query."""
    variants = list(variants)
    latest: dict = {}
    versions = VariantVersion.objects.filter(variant__in=variants).order_by("variant_id", "-version")
    for version in versions:
        latest.setdefault(version.variant_id, version)
    for variant in variants:
        variant.latest_version = latest.get(variant.id)
    return variants


# ---------------------------------------------------------------------------
# Variant CRUD
# ---------------------------------------------------------------------------

def get_variant(variant_id) -> Variant:
    variant = get_or_not_found(Variant, variant_id, "Variant")
    return attach_latest_versions([variant])[0]


def list_variants(*, limit: int = 100, offset: int = 0) -> list[Variant]:
    return attach_latest_versions(Variant.objects.all()[offset:offset + limit])


def create_variant(*, name: str, provider: str, model_name: str, json_data=None) -> Variant:
    """Create a variant together with its version 1."""
    name = _require_name(name)
    provider, model_name, json_data = _clean_version_fields(provider, model_name, json_data)
    with transaction.atomic():
        variant = Variant.objects.create(name=name)
        version = _insert_version(variant, provider, model_name, json_data)
    variant.latest_version = version
    logger.info("variant_created", variant_id=str(variant.id), name=name)
    return variant


def rename_variant(variant_id, *, name: str) -> Variant:
    variant = get_variant(variant_id)
    variant.name = _require_name(name)
    variant.save(update_fields=["name", "updated_at"])
    logger.info("variant_renamed", variant_id=str(variant.id))
    return variant


def delete_variant(variant_id) -> None:
    """Delete a variant with its versions, config links and targeting rules."""
    variant = get_variant(variant_id)
    variant.delete()
    logger.info("variant_deleted", variant_id=str(variant_id))


# ---------------------------------------------------------------------------
# Versions
# ---------------------------------------------------------------------------

def _insert_version(variant: Variant, provider: str, model_name: str, json_data: dict) -> VariantVersion:
    # Caller must hold a transaction; the counter row is locked here.
    locked = Variant.objects.select_for_update().get(pk=variant.pk)
    locked.version_counter += 1
    locked.save(update_fields=["version_counter", "updated_at"])
    variant.version_counter = locked.version_counter
    return VariantVersion.objects.create(
        variant=locked,
        version=locked.version_counter,
        provider=provider,
        model_name=model_name,
        json_data=json_data,
    )


def create_version(variant_id, *, provider: str, model_name: str, json_data=None) -> VariantVersion:
    """
    Append a new immutable version to a variant.

    Raises:
        ValidationError: if *provider* or *model_name* is empty, or
            *json_data* is not a mapping.
        NotFoundError: if the variant does not exist.
    """
    provider, model_name, json_data = _clean_version_fields(provider, model_name, json_data)
    variant = get_variant(variant_id)
    with transaction.atomic():
        version = _insert_version(variant, provider, model_name, json_data)
    logger.info(
        "variant_version_created",
        variant_id=str(variant.id),
        version=version.version,
        provider=provider,
        model_name=model_name,
    )
    return version


def list_versions(variant_id, *, limit: int = 100, offset: int = 0) -> list[VariantVersion]:
    """All versions of a variant, most recent first."""
    variant = get_variant(variant_id)
    return list(variant.versions.order_by("-version")[offset:offset + limit])


def get_latest_version(variant_id) -> VariantVersion | None:
    return VariantVersion.objects.filter(variant_id=variant_id).order_by("-version").first()


def get_version(version_id) -> VariantVersion:
    return get_or_not_found(VariantVersion, version_id, "Variant version")


# ---------------------------------------------------------------------------
# Config links
# ---------------------------------------------------------------------------

def get_config_variant(config_variant_id) -> ConfigVariant:
    return get_or_not_found(
        ConfigVariant.objects.select_related("variant"), config_variant_id, "Config variant"
    )


def link_variant_to_config(config_id, variant_id) -> ConfigVariant:
    """Attach an existing variant to a config (idempotent)."""
    config = config_services.get_config(config_id)
    variant = get_variant(variant_id)
    link, created = ConfigVariant.objects.get_or_create(config=config, variant=variant)
    if created:
        logger.info("variant_linked_to_config", config_id=str(config.id), variant_id=str(variant.id))
    return link


def list_config_variants(config_id, *, limit: int = 100, offset: int = 0) -> list[ConfigVariant]:
    """Links for a config, each with ``variant.latest_version`` attached."""
    config = config_services.get_config(config_id)
    links = list(config.config_variants.select_related("variant")[offset:offset + limit])
    attach_latest_versions(link.variant for link in links)
    return links


def create_variant_for_config(
    config_id,
    *,
    name: str,
    provider: str,
    model_name: str,
    json_data=None,
) -> ConfigVariant:
    """Create a variant with its first version and link it to *config_id*."""
    config = config_services.get_config(config_id)
    with transaction.atomic():
        variant = create_variant(name=name, provider=provider, model_name=model_name, json_data=json_data)
        link = ConfigVariant.objects.create(config=config, variant=variant)
    logger.info("variant_linked_to_config", config_id=str(config.id), variant_id=str(variant.id))
    return link


def remove_variant_from_config(config_id, variant_id) -> None:
    """Unlink a variant.  Targeting rules pointing at the link are deleted."""
    deleted, _ = ConfigVariant.objects.filter(config_id=config_id, variant_id=variant_id).delete()
    if not deleted:
        raise NotFoundError("Config variant not found.")
    logger.info("variant_unlinked_from_config", config_id=str(config_id), variant_id=str(variant_id))
