"""
apps.providers.apps
"""
from django.apps import AppConfig


class ProvidersConfig(AppConfig):
    name = "apps.providers"
    label = "providers"
    verbose_name = "Providers"

    def ready(self) -> None:
        from .catalog import ProviderCatalog  # noqa: PLC0415

        self.catalog = ProviderCatalog()
