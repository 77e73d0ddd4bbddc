from llm_playground import settings
from llm_playground.clients.base import ProviderAdapter, dig
from llm_playground.types import Provider, RawPayload


class OpenAIChatAdapter(ProviderAdapter):
    """Chat-completions endpoint; bearer-token auth."""
    provider = Provider.openai

    def __init__(self, *, base_url: str | None = None, timeout_s: float | None = None):
        super().__init__(timeout_s=timeout_s)
        self.base_url = (base_url or settings.OPENAI_BASE_URL).rstrip("/")

    async def invoke(self, prompt: str, model: str, credential: str) -> RawPayload:
        headers = {
            "Authorization": f"Bearer {credential}",
            "Content-Type": "application/json",
        }
        payload: dict = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
        }

        data = await self._post_json(f"{self.base_url}/chat/completions", headers=headers, payload=payload)
        return {"output": dig(data, "choices", 0, "message", "content")}
