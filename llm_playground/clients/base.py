from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from llm_playground import settings
from llm_playground.errors import (
    NormalizationError,
    TransportError,
    parse_error_envelope,
    vendor_error_from_body,
)
from llm_playground.types import Provider, RawPayload

logger = logging.getLogger(__name__)


class ProviderAdapter(ABC):
    """
    One vendor's wire format. invoke() issues exactly one HTTP call and returns
    {"output": ...} for the normalizer, or raises TransportError / VendorError.
    The model string is forwarded as-is.
    """
    provider: Provider

    def __init__(self, *, timeout_s: float | None = None):
        self.timeout_s = settings.REQUEST_TIMEOUT_S if timeout_s is None else timeout_s

    @abstractmethod
    async def invoke(self, prompt: str, model: str, credential: str) -> RawPayload:
        ...

    @property
    def vendor(self) -> str:
        return self.provider.value

    async def _post_json(
        self,
        url: str,
        *,
        headers: dict[str, str],
        payload: dict,
        params: dict[str, str] | None = None,
    ) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s) as client:
                r = await client.post(url, headers=headers, params=params, json=payload)
        except httpx.TimeoutException as e:
            raise TransportError(f"{self.vendor} request timed out after {self.timeout_s:g}s") from e
        except httpx.HTTPError as e:
            raise TransportError(str(e) or f"{self.vendor} request failed: {type(e).__name__}") from e

        try:
            data = r.json()
        except ValueError:
            data = None

        if not r.is_success:
            logger.debug("%s returned HTTP %s", self.vendor, r.status_code)
            raise vendor_error_from_body(self.vendor, data, status_code=r.status_code)

        if data is None:
            raise NormalizationError(f"{self.vendor} returned a non-JSON response")

        if parse_error_envelope(data) is not None:
            raise vendor_error_from_body(self.vendor, data, status_code=r.status_code)

        return data


def dig(data: Any, *path: Any) -> Any:
    """Walk dict keys / list indexes; None as soon as a step is missing."""
    cur = data
    for step in path:
        if isinstance(step, int):
            if not isinstance(cur, list) or not -len(cur) <= step < len(cur):
                return None
            cur = cur[step]
        else:
            if not isinstance(cur, dict):
                return None
            cur = cur.get(step)
        if cur is None:
            return None
    return cur
