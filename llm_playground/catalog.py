from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from llm_playground.errors import ConfigurationError
from llm_playground.types import Provider


@dataclass(frozen=True)
class ProviderInfo:
    """
    Immutable description of a selectable provider.
    models is the closed list of model ids the configuration layer accepts.
    credential_prefix, when set, is the expected key prefix ("sk-", "sk-ant-").
    """
    provider: Provider
    display_name: str
    models: tuple[str, ...]
    credential_prefix: Optional[str] = None


class ProviderCatalog:
    """Read-only provider/model table, built once at startup."""

    def __init__(self, entries: Iterable[ProviderInfo]):
        table: dict[Provider, ProviderInfo] = {}
        for info in entries:
            if info.provider in table:
                raise ValueError(f"Duplicate catalog entry for {info.provider.value}")
            if not info.models:
                raise ValueError(f"Catalog entry for {info.provider.value} has no models")
            table[info.provider] = info
        self._table: Mapping[Provider, ProviderInfo] = MappingProxyType(table)

    def __contains__(self, provider: object) -> bool:
        return provider in self._table

    def __iter__(self):
        return iter(self._table.values())

    @property
    def providers(self) -> tuple[Provider, ...]:
        return tuple(self._table)

    def get(self, provider: Provider | str) -> ProviderInfo:
        try:
            return self._table[Provider(provider)]
        except (KeyError, ValueError):
            raise ConfigurationError(f"Unknown provider: {provider!r}") from None

    def models_for(self, provider: Provider | str) -> tuple[str, ...]:
        return self.get(provider).models

    def default_model(self, provider: Provider | str) -> str:
        return self.get(provider).models[0]

    def is_legal_model(self, provider: Provider | str, model: str) -> bool:
        return model in self.models_for(provider)

    def check_credential_format(self, provider: Provider | str, credential: str) -> None:
        info = self.get(provider)
        if info.credential_prefix and not credential.startswith(info.credential_prefix):
            raise ConfigurationError(f"Invalid API key format for {info.display_name}")


DEFAULT_CATALOG = ProviderCatalog(
    [
        ProviderInfo(
            provider=Provider.openai,
            display_name="OpenAI",
            models=(
                "gpt-4o",
                "gpt-3.5-turbo",
                "gpt-4o-2024-11-20",
                "gpt-4o-mini",
                "o1-preview-2024-09-12",
                "o1-mini-2024-09-12",
            ),
            credential_prefix="sk-",
        ),
        ProviderInfo(
            provider=Provider.anthropic,
            display_name="Anthropic",
            models=(
                "claude-3-opus-20240229",
                "claude-3-5-sonnet-20241022",
                "claude-3-5-haiku-20241022",
            ),
            credential_prefix="sk-ant-",
        ),
        ProviderInfo(
            provider=Provider.gemini,
            display_name="Google Gemini",
            models=("gemini-pro", "gemini-1.5-pro", "gemini-1.5-flash"),
        ),
    ]
)
