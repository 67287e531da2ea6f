"""
Shared pytest-django fixtures.
"""
from __future__ import annotations

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from apps.configs import services as config_services
from apps.environments import services as environment_services
from apps.variants import services as variant_services
from apps.workspace import services as workspace_services
from apps.workspace.state import super_admin_cache


@pytest.fixture(autouse=True)
def fresh_super_admin_cache():
    """The cache is process-wide; never let one test see another's admin."""
    super_admin_cache.invalidate()
    yield
    super_admin_cache.invalidate()


@pytest.fixture
def admin_user(db):
    """A user recorded as the workspace super admin."""
    user = get_user_model().objects.create_user(username="owner", password="owner-pass-123")
    workspace_services.set_super_admin_id(user.pk)
    return user


@pytest.fixture
def api_client(admin_user) -> APIClient:
    """APIClient authenticated as the super admin."""
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def anon_client() -> APIClient:
    """Return an unauthenticated DRF APIClient."""
    return APIClient()


@pytest.fixture
def production(db):
    return environment_services.create_environment(name="Production", slug="production", is_prod=True)


@pytest.fixture
def staging(db):
    return environment_services.create_environment(name="Staging", slug="staging")


@pytest.fixture
def greeting(db):
    """Config named "greeting"."""
    return config_services.create_config(name="greeting")


@pytest.fixture
def v1_link(greeting):
    """Variant "v1" (openai/gpt-4o, version 1) linked to the greeting config."""
    return variant_services.create_variant_for_config(
        greeting.id,
        name="v1",
        provider="openai",
        model_name="gpt-4o",
        json_data={"temperature": 0.2},
    )


@pytest.fixture
def v2_link(greeting):
    """Variant "v2" (anthropic/claude-3-5-haiku-latest) linked to the greeting config."""
    return variant_services.create_variant_for_config(
        greeting.id,
        name="v2",
        provider="anthropic",
        model_name="claude-3-5-haiku-latest",
    )
