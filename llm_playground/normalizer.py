from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from llm_playground.errors import NormalizationError
from llm_playground.types import RawPayload

# Field preference inside a segment or nested object.
TEXT_FIELDS = ("text", "content")


def _non_empty(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _from_fields(obj: Mapping) -> str | None:
    for name in TEXT_FIELDS:
        text = _non_empty(obj.get(name))
        if text is not None:
            return text
    return None


def _from_segment(segment: Any) -> str | None:
    if isinstance(segment, str):
        return _non_empty(segment)
    if isinstance(segment, Mapping):
        return _from_fields(segment)
    return None


def extract_text(output: Any) -> str | None:
    """
    Ordered match over the known output shapes:
      1. bare string
      2. array of segments -> first segment carrying text ("text" before "content")
      3. nested object exposing "text" or "content"
    Anything else has no text.
    """
    if isinstance(output, str):
        return _non_empty(output)

    if isinstance(output, Sequence) and not isinstance(output, (bytes, bytearray)):
        for segment in output:
            text = _from_segment(segment)
            if text is not None:
                return text
        return None

    if isinstance(output, Mapping):
        return _from_fields(output)

    return None


def _unwrap(payload: RawPayload) -> Any:
    if isinstance(payload, Mapping) and "output" in payload:
        return payload["output"]
    return payload


def normalize(provider: Any, payload: RawPayload) -> str:
    """
    Plain-text answer for one payload. Leading/trailing whitespace is trimmed,
    the same way the vendor clients' extractors always have; inner text is untouched.
    """
    text = extract_text(_unwrap(payload))
    if text is None:
        label = getattr(provider, "value", provider) or "provider"
        raise NormalizationError(f"{label} returned an empty or unrecognized response")
    return text.strip()
