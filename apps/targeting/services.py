"""
apps.targeting.services
~~~~~~~~~~~~~~~~~~~~~~~
All business logic for targeting rules and variant resolution.

Views must call only these functions.

Responsibilities
----------------
- :func:`set_targeting` - the simple path: leave exactly one full-weight
  rule for a (config, environment) pair.
- Rule CRUD for the multi-rule path (weights, priorities, conditions).
- :func:`resolve` / :func:`resolve_for_runtime` - pick the rule through
  :class:`~apps.targeting.resolver.TargetingResolver` and return the
  pinned or latest :class:`~apps.variants.models.VariantVersion`.
"""
from __future__ import annotations

import random
import uuid
from collections.abc import Mapping
from dataclasses import dataclass

import structlog
from django.db import transaction

from apps.configs import services as config_services
from apps.configs.models import Config
from apps.environments import services as environment_services
from apps.environments.models import Environment
from apps.variants import services as variant_services
from apps.variants.models import ConfigVariant, Variant, VariantVersion
from common.exceptions import NotConfiguredError, NotFoundError, UnauthorizedError, ValidationError
from common.lookups import get_or_not_found
from .models import MAX_WEIGHT, TargetingRule
from .resolver import OPERATORS, TargetingResolver

logger = structlog.get_logger(__name__)

_UNCHANGED = object()


@dataclass
class Resolution:
    """Outcome of a runtime resolution."""

    config: Config
    environment: Environment
    rule: TargetingRule
    version: VariantVersion


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def _validate_weight(weight) -> int:
    if isinstance(weight, bool) or not isinstance(weight, int) or not 0 <= weight <= MAX_WEIGHT:
        raise ValidationError(
            "Invalid weight.",
            errors=[{"field": "weight", "message": f"Must be an integer between 0 and {MAX_WEIGHT}."}],
        )
    return weight


def _validate_priority(priority) -> int:
    if isinstance(priority, bool) or not isinstance(priority, int):
        raise ValidationError(
            "Invalid priority.",
            errors=[{"field": "priority", "message": "Must be an integer."}],
        )
    return priority


def _validate_conditions(conditions) -> dict | None:
    if conditions is None:
        return None
    if not isinstance(conditions, Mapping):
        raise ValidationError(
            "Invalid conditions.",
            errors=[{"field": "conditions", "message": "Must be a JSON object or null."}],
        )
    errors = []
    for name, expected in conditions.items():
        if not isinstance(expected, Mapping):
            continue
        keys = set(expected)
        # All operator keys: operator object.  No operator keys: literal
        # object compared by equality.  Anything in between is ambiguous.
        if keys & OPERATORS and not keys <= OPERATORS:
            unknown = ", ".join(sorted(keys - OPERATORS))
            errors.append({"field": f"conditions.{name}", "message": f"Unknown operator(s): {unknown}."})
    if errors:
        raise ValidationError("Invalid conditions.", errors=errors)
    return dict(conditions) or None


def _resolve_config_variant(config: Config, config_variant_id) -> ConfigVariant:
    """
    Accept either a ConfigVariant id belonging to *config* or a Variant id.

    A bare Variant id is linked to the config on demand.
    """
    link = (
        ConfigVariant.objects.select_related("variant")
        .filter(pk=_as_uuid(config_variant_id, "configVariantId"), config=config)
        .first()
    )
    if link is not None:
        return link
    if Variant.objects.filter(pk=config_variant_id).exists():
        return variant_services.link_variant_to_config(config.id, config_variant_id)
    raise NotFoundError(f"Config variant '{config_variant_id}' not found for config '{config.id}'.")


def _resolve_pin(config_variant: ConfigVariant, variant_version_id) -> VariantVersion | None:
    if variant_version_id is None:
        return None
    version = variant_services.get_version(variant_version_id)
    if version.variant_id != config_variant.variant_id:
        raise ValidationError(
            "Pinned version belongs to a different variant.",
            errors=[{"field": "variantVersionId", "message": "Version does not belong to the selected variant."}],
        )
    return version


def _as_uuid(value, field: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(value))
    except ValueError as exc:
        raise ValidationError(
            f"Invalid {field}.",
            errors=[{"field": field, "message": "Must be a valid UUID."}],
        ) from exc


# ---------------------------------------------------------------------------
# Simple path
# ---------------------------------------------------------------------------

def set_targeting(
    environment_id,
    config_id,
    config_variant_id,
    variant_version_id=None,
) -> TargetingRule:
    """
    Point a (config, environment) pair at one variant.

    If no rule exists one is inserted (weight 10000, priority 0, enabled,
    no conditions).  Otherwise the oldest rule is rewritten to that shape
    and every other rule for the pair is deleted, so exactly one row is
    left.  Runs in a single transaction.

    Raises:
        NotFoundError: if the environment, config, variant or pinned version
            does not exist.
        ValidationError: if the pinned version belongs to another variant.
    """
    environment = environment_services.get_environment(environment_id)
    config = config_services.get_config(config_id)

    with transaction.atomic():
        config_variant = _resolve_config_variant(config, config_variant_id)
        pinned = _resolve_pin(config_variant, variant_version_id)

        rules = list(
            TargetingRule.objects.select_for_update()
            .filter(environment=environment, config=config)
            .order_by("created_at", "id")
        )
        if not rules:
            rule = TargetingRule.objects.create(
                environment=environment,
                config=config,
                config_variant=config_variant,
                variant_version=pinned,
            )
            created = True
        else:
            rule, extra = rules[0], rules[1:]
            rule.config_variant = config_variant
            rule.variant_version = pinned
            rule.weight = MAX_WEIGHT
            rule.priority = 0
            rule.enabled = True
            rule.conditions = None
            rule.save()
            if extra:
                TargetingRule.objects.filter(pk__in=[r.pk for r in extra]).delete()
            created = False

    logger.info(
        "targeting_set",
        rule_id=str(rule.id),
        config_id=str(config.id),
        environment_id=str(environment.id),
        config_variant_id=str(config_variant.id),
        pinned_version_id=str(pinned.id) if pinned else None,
        created=created,
    )
    return get_rule_details(rule.id)


# ---------------------------------------------------------------------------
# Rule CRUD
# ---------------------------------------------------------------------------

def get_rule(rule_id) -> TargetingRule:
    return get_or_not_found(
        TargetingRule.objects.select_related("environment", "config", "config_variant__variant", "variant_version"),
        rule_id,
        "Targeting rule",
    )


def get_rule_details(rule_id) -> TargetingRule:
    """A rule with ``resolved_version`` attached, as the API returns it."""
    return attach_resolved_versions([get_rule(rule_id)])[0]


def list_rules(
    *,
    environment_id=None,
    config_id=None,
    limit: int | None = 100,
    offset: int = 0,
) -> list[TargetingRule]:
    """Rules filtered by environment and/or config.  ``limit=None`` returns all."""
    qs = TargetingRule.objects.select_related(
        "environment", "config", "config_variant__variant", "variant_version"
    ).order_by("created_at")
    if environment_id is not None:
        qs = qs.filter(environment_id=environment_id)
    if config_id is not None:
        qs = qs.filter(config_id=config_id)
    if limit is not None:
        qs = qs[offset:offset + limit]
    return attach_resolved_versions(qs)


def list_targeting_rules(config_id) -> list[TargetingRule]:
    """Every rule for a config with environment, variant and resolved version details."""
    config = config_services.get_config(config_id)
    return list_rules(config_id=config.id, limit=None)


def list_rules_for_environment(environment_id) -> list[TargetingRule]:
    environment = environment_services.get_environment(environment_id)
    return list_rules(environment_id=environment.id, limit=None)


def attach_resolved_versions(rules) -> list[TargetingRule]:
    """
    Set ``rule.resolved_version`` to the version each rule currently serves:
    its pin, or the latest version of its variant.
    """
    rules = list(rules)
    variant_services.attach_latest_versions([rule.config_variant.variant for rule in rules])
    for rule in rules:
        rule.resolved_version = rule.variant_version or rule.config_variant.variant.latest_version
    return rules


def create_rule(
    *,
    environment_id,
    config_id,
    config_variant_id,
    variant_version_id=None,
    weight: int = MAX_WEIGHT,
    priority: int = 0,
    enabled: bool = True,
    conditions=None,
) -> TargetingRule:
    """Add a rule for the pair without touching the existing ones."""
    weight = _validate_weight(weight)
    priority = _validate_priority(priority)
    conditions = _validate_conditions(conditions)
    environment = environment_services.get_environment(environment_id)
    config = config_services.get_config(config_id)

    with transaction.atomic():
        config_variant = _resolve_config_variant(config, config_variant_id)
        pinned = _resolve_pin(config_variant, variant_version_id)
        rule = TargetingRule.objects.create(
            environment=environment,
            config=config,
            config_variant=config_variant,
            variant_version=pinned,
            weight=weight,
            priority=priority,
            enabled=bool(enabled),
            conditions=conditions,
        )

    logger.info(
        "targeting_rule_created",
        rule_id=str(rule.id),
        config_id=str(config.id),
        environment_id=str(environment.id),
        weight=weight,
        priority=priority,
    )
    return get_rule_details(rule.id)


def update_rule(
    rule_id,
    *,
    config_variant_id=_UNCHANGED,
    variant_version_id=_UNCHANGED,
    weight=_UNCHANGED,
    priority=_UNCHANGED,
    enabled=_UNCHANGED,
    conditions=_UNCHANGED,
) -> TargetingRule:
    """
    Patch a rule.  Only the keyword arguments actually passed are applied;
    pass ``variant_version_id=None`` to unpin.

    Changing the variant without naming a version drops any existing pin.
    """
    rule = get_rule(rule_id)

    with transaction.atomic():
        if config_variant_id is not _UNCHANGED:
            rule.config_variant = _resolve_config_variant(rule.config, config_variant_id)
            if variant_version_id is _UNCHANGED:
                rule.variant_version = None
        if variant_version_id is not _UNCHANGED:
            rule.variant_version = _resolve_pin(rule.config_variant, variant_version_id)
        if weight is not _UNCHANGED:
            rule.weight = _validate_weight(weight)
        if priority is not _UNCHANGED:
            rule.priority = _validate_priority(priority)
        if enabled is not _UNCHANGED:
            rule.enabled = bool(enabled)
        if conditions is not _UNCHANGED:
            rule.conditions = _validate_conditions(conditions)
        rule.save()

    logger.info("targeting_rule_updated", rule_id=str(rule.id))
    return get_rule_details(rule.id)


def delete_rule(rule_id) -> None:
    get_rule(rule_id).delete()
    logger.info("targeting_rule_deleted", rule_id=str(rule_id))


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def _select_rule(config_id, environment_id, attributes, rng) -> TargetingRule | None:
    rules = list(
        TargetingRule.objects.select_related("config_variant", "variant_version")
        .filter(config_id=config_id, environment_id=environment_id, enabled=True)
        .order_by("created_at", "id")
    )
    return TargetingResolver.select(rules, attributes, rng=rng)


def _version_for_rule(rule: TargetingRule) -> VariantVersion | None:
    if rule.variant_version is not None:
        return rule.variant_version
    return variant_services.get_latest_version(rule.config_variant.variant_id)


def resolve(
    config_id,
    environment_id,
    attributes: Mapping | None = None,
    rng: random.Random | None = None,
) -> VariantVersion | None:
    """
    Return the variant version serving *config_id* in *environment_id*, or
    ``None`` when no enabled rule matches.

    A pinned rule returns its pinned version; otherwise the variant's
    latest version is read at call time.
    """
    rule = _select_rule(config_id, environment_id, attributes, rng)
    if rule is None:
        return None
    return _version_for_rule(rule)


def _runtime_environment(environment_id, env_secret) -> Environment:
    if environment_id is not None:
        return environment_services.get_environment(environment_id)
    if env_secret:
        try:
            return environment_services.get_environment_by_secret(env_secret)
        except NotFoundError as exc:
            raise UnauthorizedError("Invalid environment secret.") from exc
    try:
        return environment_services.get_production_environment()
    except NotFoundError as exc:
        raise NotConfiguredError("No production environment found.") from exc


def resolve_for_runtime(
    config_ref,
    *,
    environment_id=None,
    env_secret: str | None = None,
    attributes: Mapping | None = None,
    rng: random.Random | None = None,
) -> Resolution:
    """
    Resolve for an SDK or gateway caller.

    The config may be named by UUID or slug.  The environment comes from
    *environment_id*, else from *env_secret*, else the production
    environment.

    Raises:
        NotFoundError: if the config or environment id does not exist.
        UnauthorizedError: if *env_secret* matches no environment.
        NotConfiguredError: if nothing resolves.
    """
    config = config_services.get_config_by_ref(config_ref)
    environment = _runtime_environment(environment_id, env_secret)

    rule = _select_rule(config.id, environment.id, attributes, rng)
    version = _version_for_rule(rule) if rule is not None else None
    if version is None:
        logger.info(
            "resolution_not_configured",
            config_id=str(config.id),
            environment_id=str(environment.id),
        )
        raise NotConfiguredError(
            f"No variant is configured for config '{config.slug}' in environment '{environment.slug}'."
        )

    logger.info(
        "resolution_served",
        config_id=str(config.id),
        environment_id=str(environment.id),
        rule_id=str(rule.id),
        variant_version_id=str(version.id),
        version=version.version,
    )
    return Resolution(config=config, environment=environment, rule=rule, version=version)
