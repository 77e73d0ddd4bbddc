from llm_playground import settings
from llm_playground.clients.base import ProviderAdapter, dig
from llm_playground.types import Provider, RawPayload


class AnthropicMessagesAdapter(ProviderAdapter):
    provider = Provider.anthropic

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout_s: float | None = None,
        max_tokens: int = settings.ANTHROPIC_MAX_TOKENS,
        anthropic_version: str = settings.ANTHROPIC_VERSION,
        system_prompt: str | None = settings.ANTHROPIC_SYSTEM_PROMPT,
    ):
        super().__init__(timeout_s=timeout_s)
        self.base_url = (base_url or settings.ANTHROPIC_BASE_URL).rstrip("/")
        self.max_tokens = max_tokens
        self.anthropic_version = anthropic_version
        self.system_prompt = system_prompt

    async def invoke(self, prompt: str, model: str, credential: str) -> RawPayload:
        headers = {
            "x-api-key": credential,
            "anthropic-version": self.anthropic_version,
            "content-type": "application/json",
        }

        payload: dict = {
            "model": model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if self.system_prompt:
            payload["system"] = self.system_prompt

        data = await self._post_json(f"{self.base_url}/v1/messages", headers=headers, payload=payload)
        # list of content blocks: [{"type": "text", "text": ...}, ...]
        return {"output": dig(data, "content")}
