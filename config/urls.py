"""
Root URL configuration for llmops.
"""
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from common.health import health_check

urlpatterns = [
    # Admin
    path("admin/", admin.site.urls),

    # Health check
    path("health/", health_check, name="health-check"),

    # OpenAPI schema & Swagger UI
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path(
        "api/docs/",
        SpectacularSwaggerView.as_view(url_name="schema"),
        name="swagger-ui",
    ),

    # Application API routes
    path("v1/", include("apps.workspace.urls")),
    path("v1/", include("apps.configs.urls")),
    path("v1/", include("apps.environments.urls")),
    path("v1/", include("apps.variants.urls")),
    path("v1/", include("apps.targeting.urls")),
    path("v1/", include("apps.providers.urls")),
    path("v1/", include("apps.playgrounds.urls")),
    path("v1/", include("apps.requests.urls")),
    path("v1/", include("apps.gateway.urls")),
]
