import pytest
import respx
from unittest.mock import patch

from llm_playground.catalog import DEFAULT_CATALOG
from llm_playground.runner import ask_all, build_adapters, targets_from_env
from llm_playground.store import TargetStore
from llm_playground.types import Provider


@pytest.mark.asyncio
@respx.mock
async def test_runner_does_not_crash_without_keys():
    # Mock the settings to have no API keys
    with patch("llm_playground.runner.settings") as mock_settings:
        mock_settings.OPENAI_API_KEY = None
        mock_settings.ANTHROPIC_API_KEY = None
        mock_settings.GEMINI_API_KEY = None
        mock_settings.REQUEST_TIMEOUT_S = 5.0

        rnd = await ask_all("hi")
        assert len(rnd) == 0


def test_targets_from_env_uses_default_model():
    with patch("llm_playground.runner.settings") as mock_settings:
        mock_settings.OPENAI_API_KEY = "sk-env"
        mock_settings.OPENAI_MODEL = None
        mock_settings.ANTHROPIC_API_KEY = None
        mock_settings.GEMINI_API_KEY = "AIza-env"
        mock_settings.GEMINI_MODEL = "gemini-1.5-flash"

        store = TargetStore(DEFAULT_CATALOG)
        added = targets_from_env(store)

    assert [(t.provider, t.model) for t in added] == [
        (Provider.openai, "gpt-4o"),
        (Provider.gemini, "gemini-1.5-flash"),
    ]


def test_build_adapters_covers_every_provider():
    adapters = build_adapters(timeout_s=3)
    assert set(adapters) == set(Provider)
    for provider, adapter in adapters.items():
        assert adapter.provider is provider
        assert adapter.timeout_s == 3


def test_targets_from_env_skips_rejected_entries():
    with patch("llm_playground.runner.settings") as mock_settings:
        mock_settings.OPENAI_API_KEY = "sk-env"
        mock_settings.OPENAI_MODEL = "not-a-model"
        mock_settings.ANTHROPIC_API_KEY = "wrong-prefix"
        mock_settings.ANTHROPIC_MODEL = None
        mock_settings.GEMINI_API_KEY = "AIza-env"
        mock_settings.GEMINI_MODEL = None

        store = TargetStore(DEFAULT_CATALOG)
        added = targets_from_env(store)

    assert [(t.provider, t.model) for t in added] == [(Provider.gemini, "gemini-pro")]
    assert len(store) == 1
