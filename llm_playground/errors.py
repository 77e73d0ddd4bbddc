from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationError


class GatewayError(Exception):
    """Base class for every failure the gateway knows how to report."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ConfigurationIncomplete(GatewayError):
    def __init__(self, missing: list[str] | None = None):
        super().__init__("Configuration incomplete")
        self.missing = list(missing or [])


class TransportError(GatewayError):
    pass


class VendorError(GatewayError):
    """
    The call completed but the vendor reported a failure.
    structured_message: error.message from an error envelope
    plain_message:      error when the vendor sent it as a bare string
    """

    def __init__(
        self,
        message: str = "",
        *,
        status_code: int | None = None,
        structured_message: str | None = None,
        plain_message: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.structured_message = structured_message
        self.plain_message = plain_message


class NormalizationError(GatewayError):
    pass


class ConfigurationError(GatewayError, ValueError):
    """Rejected store input. Raised to the caller, never part of a round."""



# Vendor error envelopes


class ErrorDetail(BaseModel):
    model_config = ConfigDict(extra="allow")

    message: Optional[str] = None
    type: Optional[str] = None
    code: Optional[Any] = None
    status: Optional[str] = None


class ErrorEnvelope(BaseModel):
    model_config = ConfigDict(extra="allow")

    error: ErrorDetail | str


def parse_error_envelope(body: Any) -> ErrorEnvelope | None:
    """
    Recognize {"error": {...}} or {"error": "..."} bodies. Never raises.
    Returns None when the body carries no error envelope.
    """
    if not isinstance(body, dict) or body.get("error") in (None, "", {}):
        return None
    try:
        return ErrorEnvelope.model_validate(body)
    except ValidationError:
        return None


def vendor_error_from_body(vendor: str, body: Any, *, status_code: int | None = None) -> VendorError:
    envelope = parse_error_envelope(body)
    structured = plain = None
    if envelope is not None:
        if isinstance(envelope.error, ErrorDetail):
            structured = (envelope.error.message or "").strip() or None
        else:
            plain = envelope.error.strip() or None

    if status_code is not None and not 200 <= status_code < 300:
        summary = f"{vendor} request failed with status code {status_code}"
    else:
        summary = f"{vendor} reported an error"
    return VendorError(summary, status_code=status_code, structured_message=structured, plain_message=plain)
