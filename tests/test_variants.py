"""
tests.test_variants
~~~~~~~~~~~~~~~~~~~
Variant version numbering, variant CRUD and config links.
"""
from __future__ import annotations

import uuid

import pytest
from rest_framework import status

from apps.variants import services as variant_services
from apps.variants.models import VariantVersion
from common.exceptions import NotFoundError, ValidationError


# ===========================================================================
# Version numbering  (services, DB)
# ===========================================================================

@pytest.mark.django_db
class TestVersionNumbering:

    def test_create_variant_starts_at_version_one(self):
        variant = variant_services.create_variant(name="v1", provider="openai", model_name="gpt-4o")
        assert variant.latest_version.version == 1
        assert variant.version_counter == 1

    def test_successive_versions_strictly_increase(self):
        variant = variant_services.create_variant(name="v1", provider="openai", model_name="gpt-4o")
        numbers = [
            variant_services.create_version(variant.id, provider="openai", model_name=f"gpt-4o-{i}").version
            for i in range(4)
        ]
        assert numbers == [2, 3, 4, 5]

    def test_failed_attempt_does_not_consume_a_number(self):
        variant = variant_services.create_variant(name="v1", provider="openai", model_name="gpt-4o")
        with pytest.raises(ValidationError):
            variant_services.create_version(variant.id, provider="", model_name="gpt-4o")
        with pytest.raises(ValidationError):
            variant_services.create_version(variant.id, provider="openai", model_name="gpt-4o", json_data=[1, 2])
        assert variant_services.create_version(variant.id, provider="openai", model_name="x").version == 2

    def test_numbers_not_reused_after_delete(self):
        variant = variant_services.create_variant(name="v1", provider="openai", model_name="gpt-4o")
        second = variant_services.create_version(variant.id, provider="openai", model_name="gpt-4o-mini")
        VariantVersion.objects.filter(pk=second.pk).delete()
        third = variant_services.create_version(variant.id, provider="openai", model_name="gpt-4.1")
        assert third.version == 3
        assert variant_services.get_latest_version(variant.id).pk == third.pk

    def test_create_version_for_missing_variant(self):
        with pytest.raises(NotFoundError):
            variant_services.create_version(uuid.uuid4(), provider="openai", model_name="gpt-4o")

    def test_list_versions_most_recent_first(self):
        variant = variant_services.create_variant(name="v1", provider="openai", model_name="gpt-4o")
        variant_services.create_version(variant.id, provider="openai", model_name="gpt-4o-mini")
        versions = variant_services.list_versions(variant.id)
        assert [v.version for v in versions] == [2, 1]

    def test_json_data_defaults_to_empty_object(self):
        variant = variant_services.create_variant(name="v1", provider="openai", model_name="gpt-4o")
        assert variant.latest_version.json_data == {}


# ===========================================================================
# Variants API  (integration, DB)
# ===========================================================================

VARIANTS_URL = "/v1/variants/"


def versions_url(variant_id):
    return f"/v1/variants/{variant_id}/versions/"


@pytest.mark.django_db
class TestVariantsAPI:

    def test_create_variant_returns_latest_version(self, api_client):
        resp = api_client.post(
            VARIANTS_URL,
            data={"name": "v1", "provider": "openai", "modelName": "gpt-4o", "jsonData": {"temperature": 0}},
            format="json",
        )
        assert resp.status_code == status.HTTP_200_OK
        body = resp.json()
        assert body["success"] is True
        assert body["code"] == 200
        latest = body["data"]["latestVersion"]
        assert latest["version"] == 1
        assert latest["modelName"] == "gpt-4o"
        assert latest["jsonData"] == {"temperature": 0}

    def test_create_version_and_list(self, api_client):
        variant = variant_services.create_variant(name="v1", provider="openai", model_name="gpt-4o")
        resp = api_client.post(
            versions_url(variant.id),
            data={"provider": "openai", "modelName": "gpt-4o-mini"},
            format="json",
        )
        assert resp.status_code == status.HTTP_200_OK
        assert resp.json()["data"]["version"] == 2

        listing = api_client.get(versions_url(variant.id)).json()["data"]
        assert [v["version"] for v in listing] == [2, 1]

    def test_create_version_blank_model_name_400(self, api_client):
        variant = variant_services.create_variant(name="v1", provider="openai", model_name="gpt-4o")
        resp = api_client.post(
            versions_url(variant.id),
            data={"provider": "openai", "modelName": ""},
            format="json",
        )
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        body = resp.json()
        assert body["success"] is False
        assert any(err["field"] == "modelName" for err in body["errors"])

    def test_create_version_unknown_variant_404(self, api_client):
        resp = api_client.post(
            versions_url(uuid.uuid4()),
            data={"provider": "openai", "modelName": "gpt-4o"},
            format="json",
        )
        assert resp.status_code == status.HTTP_404_NOT_FOUND
        assert resp.json()["success"] is False

    def test_rename_and_delete_variant(self, api_client):
        variant = variant_services.create_variant(name="v1", provider="openai", model_name="gpt-4o")
        resp = api_client.patch(f"{VARIANTS_URL}{variant.id}/", data={"name": "renamed"}, format="json")
        assert resp.json()["data"]["name"] == "renamed"

        resp = api_client.delete(f"{VARIANTS_URL}{variant.id}/")
        assert resp.status_code == status.HTTP_200_OK
        assert resp.json()["data"]["id"] == str(variant.id)
        assert api_client.get(f"{VARIANTS_URL}{variant.id}/").status_code == status.HTTP_404_NOT_FOUND


# ===========================================================================
# Config ↔ variant links  (integration, DB)
# ===========================================================================

@pytest.mark.django_db
class TestConfigVariantsAPI:

    def test_create_and_list_config_variants(self, api_client, greeting):
        url = f"/v1/configs/{greeting.id}/variants/"
        resp = api_client.post(
            url,
            data={"name": "v1", "provider": "openai", "modelName": "gpt-4o"},
            format="json",
        )
        assert resp.status_code == status.HTTP_200_OK
        created = resp.json()["data"]
        assert created["configId"] == str(greeting.id)
        assert created["provider"] == "openai"

        listing = api_client.get(url).json()["data"]
        assert len(listing) == 1
        assert listing[0]["name"] == "v1"
        assert listing[0]["latestVersion"]["version"] == 1

    def test_list_reflects_newest_version(self, api_client, greeting, v1_link):
        variant_services.create_version(v1_link.variant_id, provider="openai", model_name="gpt-4o-mini")
        listing = api_client.get(f"/v1/configs/{greeting.id}/variants/").json()["data"]
        assert listing[0]["modelName"] == "gpt-4o-mini"
        assert listing[0]["latestVersion"]["version"] == 2

    def test_unlink_variant(self, api_client, greeting, v1_link):
        url = f"/v1/configs/{greeting.id}/variants/{v1_link.variant_id}/"
        assert api_client.delete(url).status_code == status.HTTP_200_OK
        assert api_client.delete(url).status_code == status.HTTP_404_NOT_FOUND
        assert api_client.get(f"/v1/configs/{greeting.id}/variants/").json()["data"] == []
