from __future__ import annotations

from llm_playground.errors import VendorError

FALLBACK_MESSAGE = "Failed to get response"


def _clean(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def error_message(exc: BaseException | None) -> str:
    """
    Reduce any failure to one user-facing message. Total; never returns "".

    Priority:
      1. vendor structured message (error.message)
      2. vendor plain error string
      3. the failure's own message (transport / status summary / normalization)
      4. FALLBACK_MESSAGE
    """
    if isinstance(exc, VendorError):
        for candidate in (exc.structured_message, exc.plain_message):
            msg = _clean(candidate)
            if msg:
                return msg

    if exc is not None:
        msg = _clean(getattr(exc, "message", None)) or _clean(str(exc))
        if msg:
            return msg

    return FALLBACK_MESSAGE
