"""
apps.providers.catalog
~~~~~~~~~~~~~~~~~~~~~~
Static catalog of the LLM providers and models the dashboard offers.

The catalog is built once, when the ``providers`` app becomes ready
(:meth:`apps.providers.apps.ProvidersConfig.ready`), and reached through the
app registry with :func:`get_catalog`.  Nothing here touches the database.

Provider ids
------------
The catalog is keyed by the gateway's internal provider ids.  Model
listings coming from models.dev use different ids for two providers;
:func:`to_internal_provider_id` / :func:`to_models_dev_provider_id` translate
between the two, and :meth:`ProviderCatalog.list_models` accepts either.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field

# models.dev id → internal gateway id
MODELS_DEV_TO_INTERNAL = {
    "azure-cognitive-services": "azure-ai",
    "azure": "azure-openai",
}
INTERNAL_TO_MODELS_DEV = {internal: external for external, internal in MODELS_DEV_TO_INTERNAL.items()}


def to_internal_provider_id(provider_id: str) -> str:
    return MODELS_DEV_TO_INTERNAL.get(provider_id, provider_id)


def to_models_dev_provider_id(provider_id: str) -> str:
    return INTERNAL_TO_MODELS_DEV.get(provider_id, provider_id)


@dataclass(frozen=True)
class ModelInfo:
    id: str
    name: str


@dataclass(frozen=True)
class ProviderInfo:
    id: str
    name: str
    models: tuple[ModelInfo, ...] = field(default_factory=tuple)

    @property
    def logo_url(self) -> str:
        return f"https://models.dev/logos/{to_models_dev_provider_id(self.id)}.svg"


def _provider(provider_id: str, name: str, *model_ids: str) -> ProviderInfo:
    return ProviderInfo(
        id=provider_id,
        name=name,
        models=tuple(ModelInfo(id=model_id, name=model_id) for model_id in model_ids),
    )


DEFAULT_PROVIDERS: tuple[ProviderInfo, ...] = (
    _provider("openai", "OpenAI", "gpt-4.1", "gpt-4.1-mini", "gpt-4o", "gpt-4o-mini", "o3-mini"),
    _provider(
        "anthropic",
        "Anthropic",
        "claude-3-7-sonnet-latest",
        "claude-3-5-sonnet-latest",
        "claude-3-5-haiku-latest",
    ),
    _provider("google", "Google", "gemini-2.0-flash", "gemini-1.5-pro", "gemini-1.5-flash"),
    _provider("azure-openai", "Azure OpenAI", "gpt-4o", "gpt-4o-mini"),
    _provider("azure-ai", "Azure AI Services", "Phi-4", "Mistral-Large-2411"),
    _provider("mistral-ai", "Mistral AI", "mistral-large-latest", "mistral-small-latest", "codestral-latest"),
    _provider("groq", "Groq", "llama-3.3-70b-versatile", "llama-3.1-8b-instant"),
    _provider("deepseek", "DeepSeek", "deepseek-chat", "deepseek-reasoner"),
    _provider("cohere", "Cohere", "command-r-plus", "command-r"),
    _provider("fireworks-ai", "Fireworks AI", "accounts/fireworks/models/llama-v3p1-70b-instruct"),
    _provider("cerebras", "Cerebras", "llama3.1-8b", "llama-3.3-70b"),
    _provider("perplexity-ai", "Perplexity", "sonar", "sonar-pro"),
    _provider("openrouter", "OpenRouter", "openrouter/auto"),
)


class ProviderCatalog:
    """
    Read-only lookup over a fixed set of :class:`ProviderInfo` entries.

    Example::

        catalog = ProviderCatalog(DEFAULT_PROVIDERS)
        catalog.list_models("azure")        # same as "azure-openai"
        catalog.list_models("no-such-one")  # → []
    """

    def __init__(self, providers=DEFAULT_PROVIDERS) -> None:
        self._providers: dict[str, ProviderInfo] = {p.id: p for p in providers}

    def __contains__(self, provider_id: str) -> bool:
        return to_internal_provider_id(provider_id) in self._providers

    def get(self, provider_id: str) -> ProviderInfo | None:
        return self._providers.get(to_internal_provider_id(provider_id))

    def list_providers(self) -> list[dict]:
        return [
            {"id": p.id, "name": p.name, "logoUrl": p.logo_url, "modelCount": len(p.models)}
            for p in self._providers.values()
        ]

    def list_models(self, provider_id: str) -> list[dict]:
        """Models for *provider_id*; an unknown provider yields ``[]``."""
        provider = self.get(provider_id)
        if provider is None:
            return []
        return [
            {**asdict(model), "provider": {"id": provider.id, "name": provider.name}}
            for model in provider.models
        ]


def get_catalog() -> ProviderCatalog:
    """The catalog built by the ``providers`` app at startup."""
    from django.apps import apps  # noqa: PLC0415

    return apps.get_app_config("providers").catalog
