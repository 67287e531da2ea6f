"""
tests.test_playgrounds
~~~~~~~~~~~~~~~~~~~~~~
Playground CRUD: services and endpoints.
"""
from __future__ import annotations

import uuid

import pytest
from rest_framework import status

from apps.playgrounds import services as playground_services
from common.exceptions import NotFoundError, ValidationError

PLAYGROUNDS_URL = "/v1/playgrounds/"


# ===========================================================================
# Services  (DB)
# ===========================================================================

@pytest.mark.django_db
class TestPlaygroundServices:

    def test_create_defaults(self):
        playground = playground_services.create_playground(name="  scratch  ")
        assert playground.name == "scratch"
        assert playground.description is None
        assert playground.state == {}

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            playground_services.create_playground(name="   ")

    def test_state_must_be_object(self):
        with pytest.raises(ValidationError):
            playground_services.create_playground(name="scratch", state=["not", "an", "object"])

    def test_update_only_touches_given_fields(self):
        playground = playground_services.create_playground(
            name="scratch", description="notes", state={"prompt": "hi"}
        )
        updated = playground_services.update_playground(playground.id, state={"prompt": "hello"})
        assert updated.name == "scratch"
        assert updated.description == "notes"
        assert updated.state == {"prompt": "hello"}
        assert updated.updated_at >= playground.updated_at

    def test_delete_then_missing(self):
        playground = playground_services.create_playground(name="scratch")
        playground_services.delete_playground(playground.id)
        with pytest.raises(NotFoundError):
            playground_services.get_playground(playground.id)

    def test_list_pages(self):
        for i in range(3):
            playground_services.create_playground(name=f"p{i}")
        assert len(playground_services.list_playgrounds()) == 3
        assert len(playground_services.list_playgrounds(limit=2, offset=2)) == 1


# ===========================================================================
# API  (integration, DB)
# ===========================================================================

@pytest.mark.django_db
class TestPlaygroundsAPI:

    def test_crud_round(self, api_client):
        created = api_client.post(
            PLAYGROUNDS_URL,
            data={"name": "scratch", "description": "try things", "state": {"messages": []}},
            format="json",
        )
        assert created.status_code == status.HTTP_200_OK
        data = created.json()["data"]
        assert data["state"] == {"messages": []}
        url = f"{PLAYGROUNDS_URL}{data['id']}/"

        assert api_client.get(url).json()["data"]["description"] == "try things"

        patched = api_client.patch(url, data={"name": "renamed"}, format="json").json()["data"]
        assert patched["name"] == "renamed"
        assert patched["state"] == {"messages": []}

        listed = api_client.get(PLAYGROUNDS_URL).json()["data"]
        assert [p["id"] for p in listed] == [data["id"]]

        deleted = api_client.delete(url)
        assert deleted.json()["data"]["id"] == data["id"]
        assert api_client.get(url).status_code == status.HTTP_404_NOT_FOUND

    def test_invalid_state_400(self, api_client):
        resp = api_client.post(PLAYGROUNDS_URL, data={"name": "x", "state": [1, 2]}, format="json")
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert resp.json()["errors"][0]["field"] == "state"

    def test_unknown_id_404(self, api_client):
        resp = api_client.get(f"{PLAYGROUNDS_URL}{uuid.uuid4()}/")
        assert resp.status_code == status.HTTP_404_NOT_FOUND

    def test_requires_super_admin(self, anon_client, admin_user):
        assert anon_client.get(PLAYGROUNDS_URL).status_code == status.HTTP_401_UNAUTHORIZED
