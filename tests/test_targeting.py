"""
tests.test_targeting
~~~~~~~~~~~~~~~~~~~~
set_targeting, rule CRUD and resolution against the database, plus the
targeting endpoints.
"""
from __future__ import annotations

import random
import uuid

import pytest
from rest_framework import status

from apps.targeting import services as targeting_services
from apps.targeting.models import TargetingRule
from apps.variants import services as variant_services
from common.exceptions import NotConfiguredError, NotFoundError, UnauthorizedError, ValidationError


# ===========================================================================
# set_targeting / resolve  (services, DB)
# ===========================================================================

@pytest.mark.django_db
class TestSetTargeting:

    def test_resolve_without_rule_returns_none(self, production, greeting):
        assert targeting_services.resolve(greeting.id, production.id) is None

    def test_resolve_returns_latest_version(self, production, greeting, v1_link):
        targeting_services.set_targeting(production.id, greeting.id, v1_link.id)
        assert targeting_services.resolve(greeting.id, production.id).version == 1

        variant_services.create_version(v1_link.variant_id, provider="openai", model_name="gpt-4o-mini")
        resolved = targeting_services.resolve(greeting.id, production.id)
        assert resolved.version == 2
        assert resolved.model_name == "gpt-4o-mini"

    def test_second_call_overwrites_single_row(self, production, greeting, v1_link, v2_link):
        targeting_services.set_targeting(production.id, greeting.id, v1_link.id)
        targeting_services.set_targeting(production.id, greeting.id, v2_link.id)

        rules = TargetingRule.objects.filter(environment=production, config=greeting)
        assert rules.count() == 1
        assert rules.get().config_variant_id == v2_link.id
        assert targeting_services.resolve(greeting.id, production.id).provider == "anthropic"

    def test_collapses_multi_rule_setup_to_one_full_weight_rule(self, production, greeting, v1_link, v2_link):
        oldest = targeting_services.create_rule(
            environment_id=production.id,
            config_id=greeting.id,
            config_variant_id=v1_link.id,
            weight=500,
            priority=3,
            conditions={"country": "DE"},
        )
        targeting_services.create_rule(
            environment_id=production.id,
            config_id=greeting.id,
            config_variant_id=v2_link.id,
            enabled=False,
        )

        rule = targeting_services.set_targeting(production.id, greeting.id, v2_link.id)

        assert rule.id == oldest.id
        assert TargetingRule.objects.filter(environment=production, config=greeting).count() == 1
        rule.refresh_from_db()
        assert (rule.weight, rule.priority, rule.enabled, rule.conditions) == (10000, 0, True, None)

    def test_accepts_bare_variant_id_and_links_it(self, production, greeting):
        variant = variant_services.create_variant(name="loose", provider="openai", model_name="gpt-4o")
        rule = targeting_services.set_targeting(production.id, greeting.id, variant.id)
        assert rule.config_variant.variant_id == variant.id
        assert rule.config_variant.config_id == greeting.id

    def test_pinned_version_stays_pinned(self, production, greeting, v1_link):
        first = variant_services.get_latest_version(v1_link.variant_id)
        targeting_services.set_targeting(production.id, greeting.id, v1_link.id, first.id)
        variant_services.create_version(v1_link.variant_id, provider="openai", model_name="gpt-4o-mini")
        assert targeting_services.resolve(greeting.id, production.id).pk == first.pk

    def test_pin_from_other_variant_rejected(self, production, greeting, v1_link, v2_link):
        foreign = variant_services.get_latest_version(v2_link.variant_id)
        with pytest.raises(ValidationError):
            targeting_services.set_targeting(production.id, greeting.id, v1_link.id, foreign.id)

    def test_unknown_config_variant(self, production, greeting):
        with pytest.raises(NotFoundError):
            targeting_services.set_targeting(production.id, greeting.id, uuid.uuid4())

    def test_creating_version_does_not_touch_rules(self, production, greeting, v1_link):
        rule = targeting_services.set_targeting(production.id, greeting.id, v1_link.id)
        before = TargetingRule.objects.get(pk=rule.pk).updated_at
        variant_services.create_version(v1_link.variant_id, provider="openai", model_name="gpt-4o-mini")
        assert TargetingRule.objects.get(pk=rule.pk).updated_at == before


# ===========================================================================
# Multi-rule resolution  (services, DB)
# ===========================================================================

@pytest.mark.django_db
class TestMultiRuleResolution:

    def test_priority_beats_weight(self, production, greeting, v1_link, v2_link):
        for link, priority, weight in ((v1_link, 0, 10000), (v2_link, 1, 1)):
            targeting_services.create_rule(
                environment_id=production.id,
                config_id=greeting.id,
                config_variant_id=link.id,
                priority=priority,
                weight=weight,
            )
        resolved = targeting_services.resolve(greeting.id, production.id, rng=random.Random(0))
        assert resolved.variant_id == v2_link.variant_id

    def test_conditions_route_by_attributes(self, production, greeting, v1_link, v2_link):
        targeting_services.create_rule(
            environment_id=production.id,
            config_id=greeting.id,
            config_variant_id=v2_link.id,
            priority=10,
            conditions={"plan": {"in": ["pro", "team"]}},
        )
        targeting_services.create_rule(
            environment_id=production.id,
            config_id=greeting.id,
            config_variant_id=v1_link.id,
        )
        pro = targeting_services.resolve(greeting.id, production.id, {"plan": "pro"})
        free = targeting_services.resolve(greeting.id, production.id, {"plan": "free"})
        assert pro.variant_id == v2_link.variant_id
        assert free.variant_id == v1_link.variant_id

    def test_disabled_rule_ignored_but_retained(self, production, greeting, v1_link):
        rule = targeting_services.create_rule(
            environment_id=production.id,
            config_id=greeting.id,
            config_variant_id=v1_link.id,
            enabled=False,
        )
        assert targeting_services.resolve(greeting.id, production.id) is None
        assert TargetingRule.objects.filter(pk=rule.id).exists()

    def test_zero_weight_rule_never_served(self, production, greeting, v1_link, v2_link):
        targeting_services.create_rule(
            environment_id=production.id, config_id=greeting.id, config_variant_id=v1_link.id, weight=0
        )
        targeting_services.create_rule(
            environment_id=production.id, config_id=greeting.id, config_variant_id=v2_link.id, weight=10
        )
        rng = random.Random(3)
        for _ in range(25):
            assert targeting_services.resolve(greeting.id, production.id, rng=rng).variant_id == v2_link.variant_id

    def test_invalid_rule_fields_rejected(self, production, greeting, v1_link):
        common = {"environment_id": production.id, "config_id": greeting.id, "config_variant_id": v1_link.id}
        with pytest.raises(ValidationError):
            targeting_services.create_rule(**common, weight=10001)
        with pytest.raises(ValidationError):
            targeting_services.create_rule(**common, conditions={"age": {"gte": 1, "between": [1, 2]}})
        with pytest.raises(ValidationError):
            targeting_services.create_rule(**common, conditions=["not", "an", "object"])

    def test_nested_object_condition_matches_by_equality(self, production, greeting, v1_link):
        rule = targeting_services.create_rule(
            environment_id=production.id,
            config_id=greeting.id,
            config_variant_id=v1_link.id,
            conditions={"meta": {"team": "a"}},
        )
        assert rule.conditions == {"meta": {"team": "a"}}
        hit = targeting_services.resolve(greeting.id, production.id, {"meta": {"team": "a"}})
        miss = targeting_services.resolve(greeting.id, production.id, {"meta": {"team": "b"}})
        assert hit.variant_id == v1_link.variant_id
        assert miss is None

    def test_many_rules_listed_without_truncation(self, production, staging, greeting, v1_link):
        TargetingRule.objects.bulk_create(
            [
                TargetingRule(
                    environment=environment,
                    config=greeting,
                    config_variant=v1_link,
                    priority=i,
                )
                for environment in (production, staging)
                for i in range(120)
            ]
        )
        assert len(targeting_services.list_targeting_rules(greeting.id)) == 240
        assert len(targeting_services.list_rules_for_environment(staging.id)) == 120

    def test_update_rule_unpins_when_variant_changes(self, production, greeting, v1_link, v2_link):
        pin = variant_services.get_latest_version(v1_link.variant_id)
        rule = targeting_services.create_rule(
            environment_id=production.id,
            config_id=greeting.id,
            config_variant_id=v1_link.id,
            variant_version_id=pin.id,
        )
        updated = targeting_services.update_rule(rule.id, config_variant_id=v2_link.id, weight=42)
        assert updated.variant_version_id is None
        assert updated.weight == 42
        assert updated.resolved_version.variant_id == v2_link.variant_id


# ===========================================================================
# resolve_for_runtime  (services, DB)
# ===========================================================================

@pytest.mark.django_db
class TestResolveForRuntime:

    def test_by_slug_defaults_to_production(self, production, greeting, v1_link):
        targeting_services.set_targeting(production.id, greeting.id, v1_link.id)
        resolution = targeting_services.resolve_for_runtime(greeting.slug)
        assert resolution.environment.id == production.id
        assert resolution.version.version == 1

    def test_by_env_secret(self, staging, greeting, v1_link):
        targeting_services.set_targeting(staging.id, greeting.id, v1_link.id)
        secret = staging.secrets.get().key_value
        resolution = targeting_services.resolve_for_runtime(str(greeting.id), env_secret=secret)
        assert resolution.environment.id == staging.id

    def test_unknown_secret_is_unauthorized(self, greeting):
        with pytest.raises(UnauthorizedError):
            targeting_services.resolve_for_runtime(greeting.slug, env_secret="sec_nope_x")

    def test_not_configured(self, production, greeting):
        with pytest.raises(NotConfiguredError):
            targeting_services.resolve_for_runtime(greeting.slug)

    def test_no_production_environment(self, greeting):
        with pytest.raises(NotConfiguredError):
            targeting_services.resolve_for_runtime(greeting.slug)

    def test_unknown_config(self, production):
        with pytest.raises(NotFoundError):
            targeting_services.resolve_for_runtime("doesnotexist")


# ===========================================================================
# Targeting API  (integration, DB)
# ===========================================================================

SET_URL = "/v1/targeting/set/"
RESOLVE_URL = "/v1/targeting/resolve/"
RULES_URL = "/v1/targeting/"


@pytest.mark.django_db
class TestTargetingAPI:

    def test_greeting_scenario(self, api_client):
        """config → variant v1@1 → set targeting → resolve → new version → resolve."""
        config = api_client.post("/v1/configs/", data={"name": "greeting"}, format="json").json()["data"]
        env = api_client.post(
            "/v1/environments/", data={"name": "Env", "slug": "e1"}, format="json"
        ).json()["data"]
        variant = api_client.post(
            "/v1/variants/", data={"name": "v1", "provider": "openai", "modelName": "gpt-4o"}, format="json"
        ).json()["data"]

        resp = api_client.post(
            SET_URL,
            data={"environmentId": env["id"], "configId": config["id"], "configVariantId": variant["id"]},
            format="json",
        )
        assert resp.status_code == status.HTTP_200_OK

        body = {"configId": config["id"], "environmentId": env["id"]}
        first = api_client.post(RESOLVE_URL, data=body, format="json").json()["data"]
        assert (first["variantId"], first["version"], first["modelName"]) == (variant["id"], 1, "gpt-4o")

        api_client.post(
            f"/v1/variants/{variant['id']}/versions/",
            data={"provider": "openai", "modelName": "gpt-4o-mini"},
            format="json",
        )
        second = api_client.post(RESOLVE_URL, data=body, format="json").json()["data"]
        assert (second["version"], second["modelName"]) == (2, "gpt-4o-mini")

    def test_rules_for_config_include_details(self, api_client, production, greeting, v1_link):
        targeting_services.set_targeting(production.id, greeting.id, v1_link.id)
        data = api_client.get(f"/v1/targeting/config/{greeting.id}/").json()["data"]
        assert len(data) == 1
        rule = data[0]
        assert rule["environmentSlug"] == "production"
        assert rule["variantName"] == "v1"
        assert (rule["provider"], rule["modelName"], rule["version"]) == ("openai", "gpt-4o", 1)
        assert rule["pinned"] is False

    def test_rules_for_environment(self, api_client, production, staging, greeting, v1_link):
        targeting_services.set_targeting(production.id, greeting.id, v1_link.id)
        targeting_services.set_targeting(staging.id, greeting.id, v1_link.id)
        data = api_client.get(f"/v1/targeting/environment/{staging.id}/").json()["data"]
        assert [r["environmentId"] for r in data] == [str(staging.id)]

    def test_rule_crud(self, api_client, production, greeting, v1_link):
        resp = api_client.post(
            RULES_URL,
            data={
                "environmentId": str(production.id),
                "configId": str(greeting.id),
                "configVariantId": str(v1_link.id),
                "weight": 2500,
                "priority": 2,
                "conditions": {"country": ["DE", "AT"]},
            },
            format="json",
        )
        assert resp.status_code == status.HTTP_200_OK
        rule = resp.json()["data"]
        assert rule["weight"] == 2500
        assert rule["conditions"] == {"country": ["DE", "AT"]}

        url = f"{RULES_URL}{rule['id']}/"
        patched = api_client.patch(url, data={"enabled": False, "conditions": None}, format="json").json()["data"]
        assert patched["enabled"] is False
        assert patched["conditions"] is None
        assert patched["weight"] == 2500

        listing = api_client.get(RULES_URL, {"configId": str(greeting.id)}).json()["data"]
        assert [r["id"] for r in listing] == [rule["id"]]

        assert api_client.delete(url).status_code == status.HTTP_200_OK
        assert api_client.get(url).status_code == status.HTTP_404_NOT_FOUND

    def test_rule_weight_out_of_range_400(self, api_client, production, greeting, v1_link):
        resp = api_client.post(
            RULES_URL,
            data={
                "environmentId": str(production.id),
                "configId": str(greeting.id),
                "configVariantId": str(v1_link.id),
                "weight": 20000,
            },
            format="json",
        )
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert resp.json()["errors"][0]["field"] == "weight"

    def test_list_filter_rejects_bad_uuid(self, api_client):
        resp = api_client.get(RULES_URL, {"environmentId": "nope"})
        assert resp.status_code == status.HTTP_400_BAD_REQUEST

    def test_resolve_with_env_secret_header_needs_no_login(self, anon_client, staging, greeting, v1_link):
        targeting_services.set_targeting(staging.id, greeting.id, v1_link.id)
        secret = staging.secrets.get().key_value
        resp = anon_client.post(
            RESOLVE_URL,
            data={"configId": greeting.slug},
            format="json",
            HTTP_X_LLMOPS_ENV_SECRET=secret,
        )
        assert resp.status_code == status.HTTP_200_OK
        assert resp.json()["data"]["environmentSlug"] == "staging"

    def test_resolve_with_bad_secret_401(self, anon_client, greeting):
        resp = anon_client.post(
            RESOLVE_URL,
            data={"configId": greeting.slug},
            format="json",
            HTTP_X_LLMOPS_ENV_SECRET="sec_bad_000",
        )
        assert resp.status_code == status.HTTP_401_UNAUTHORIZED

    def test_resolve_without_credentials_401(self, anon_client, greeting):
        resp = anon_client.post(RESOLVE_URL, data={"configId": greeting.slug}, format="json")
        assert resp.status_code == status.HTTP_401_UNAUTHORIZED

    def test_resolve_not_configured_404(self, api_client, production, greeting):
        resp = api_client.post(RESOLVE_URL, data={"configId": str(greeting.id)}, format="json")
        assert resp.status_code == status.HTTP_404_NOT_FOUND
        body = resp.json()
        assert body["success"] is False
        assert body["code"] == 404
