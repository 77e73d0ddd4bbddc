import logging
from types import MappingProxyType

from llm_playground import settings
from llm_playground.app import Playground, RoundCallbacks
from llm_playground.catalog import DEFAULT_CATALOG, ProviderCatalog
from llm_playground.clients.anthropic import AnthropicMessagesAdapter
from llm_playground.clients.gemini import GeminiAdapter
from llm_playground.clients.openai_compat import OpenAIChatAdapter
from llm_playground.dispatcher import Dispatcher
from llm_playground.errors import ConfigurationError
from llm_playground.store import TargetStore
from llm_playground.types import Provider

logger = logging.getLogger(__name__)


def build_adapters(*, timeout_s: float | None = None):
    adapters = [
        OpenAIChatAdapter(timeout_s=timeout_s),
        AnthropicMessagesAdapter(timeout_s=timeout_s),
        GeminiAdapter(timeout_s=timeout_s),
    ]
    return MappingProxyType({a.provider: a for a in adapters})


def env_credentials():
    """Provider -> (api key, model or None) for every key present in the environment."""
    found = {}
    if settings.OPENAI_API_KEY:
        found[Provider.openai] = (settings.OPENAI_API_KEY, settings.OPENAI_MODEL)
    if settings.ANTHROPIC_API_KEY:
        found[Provider.anthropic] = (settings.ANTHROPIC_API_KEY, settings.ANTHROPIC_MODEL)
    if settings.GEMINI_API_KEY:
        found[Provider.gemini] = (settings.GEMINI_API_KEY, settings.GEMINI_MODEL)
    return found


def targets_from_env(store: TargetStore):
    """
    Add one target per provider that has a key configured, up to the store's capacity.
    An entry the store rejects (unknown model, bad key format) is logged and skipped.
    """
    added = []
    for provider, (api_key, model) in env_credentials().items():
        if store.is_full:
            break
        model = model or store.catalog.default_model(provider)
        try:
            added.append(store.add(provider, model, api_key))
        except ConfigurationError as e:
            logger.warning("skipping %s from environment: %s", provider.value, e)
    return added


def build_playground(
    *,
    catalog: ProviderCatalog = DEFAULT_CATALOG,
    timeout_s: float | None = None,
    callbacks: RoundCallbacks | None = None,
) -> Playground:
    timeout_s = settings.REQUEST_TIMEOUT_S if timeout_s is None else timeout_s
    return Playground(
        catalog=catalog,
        store=TargetStore(catalog),
        dispatcher=Dispatcher(build_adapters(timeout_s=timeout_s), timeout_s=timeout_s),
        callbacks=callbacks,
    )


async def ask_all(user_prompt: str):
    playground = build_playground()
    targets_from_env(playground.store)
    return await playground.start_round(user_prompt)
