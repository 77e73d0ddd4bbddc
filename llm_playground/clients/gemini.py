from llm_playground import settings
from llm_playground.clients.base import ProviderAdapter, dig
from llm_playground.types import Provider, RawPayload


class GeminiAdapter(ProviderAdapter):
    provider = Provider.gemini

    def __init__(self, *, base_url: str | None = None, timeout_s: float | None = None):
        super().__init__(timeout_s=timeout_s)
        self.base_url = (base_url or settings.GEMINI_BASE_URL).rstrip("/")

    async def invoke(self, prompt: str, model: str, credential: str) -> RawPayload:
        url = f"{self.base_url}/v1beta/models/{model}:generateContent"
        # Gemini takes the key as a query parameter, not a header.
        params = {"key": credential}
        headers = {"Content-Type": "application/json"}

        payload: dict = {
            "contents": [{"parts": [{"text": prompt}]}],
        }

        data = await self._post_json(url, headers=headers, params=params, payload=payload)
        return {"output": dig(data, "candidates", 0, "content", "parts")}
