from llm_playground.classifier import FALLBACK_MESSAGE, error_message
from llm_playground.errors import (
    ConfigurationIncomplete,
    NormalizationError,
    TransportError,
    VendorError,
    vendor_error_from_body,
)


def test_structured_message_wins():
    e = VendorError(
        "anthropic request failed with status code 401",
        status_code=401,
        structured_message="invalid credential",
        plain_message="also here",
    )
    assert error_message(e) == "invalid credential"


def test_plain_message_beats_summary():
    e = VendorError("openai request failed with status code 500", status_code=500, plain_message="boom")
    assert error_message(e) == "boom"


def test_vendor_without_body_falls_back_to_summary():
    e = vendor_error_from_body("gemini", None, status_code=502)
    assert error_message(e) == "gemini request failed with status code 502"


def test_transport_message():
    assert error_message(TransportError("openai request timed out after 60s")) == "openai request timed out after 60s"


def test_other_kinds_use_their_message():
    assert error_message(ConfigurationIncomplete(["credential"])) == "Configuration incomplete"
    assert error_message(NormalizationError("gemini returned an empty or unrecognized response")).startswith("gemini")


def test_fallback():
    assert error_message(None) == FALLBACK_MESSAGE
    assert error_message(TransportError("")) == FALLBACK_MESSAGE
    assert error_message(RuntimeError()) == FALLBACK_MESSAGE
    assert error_message(VendorError("", structured_message="  ")) == FALLBACK_MESSAGE


def test_unknown_exception_uses_str():
    assert error_message(KeyError("choices")) == "'choices'"


def test_vendor_error_from_body_envelopes():
    e = vendor_error_from_body("anthropic", {"error": {"message": "invalid credential"}}, status_code=401)
    assert e.structured_message == "invalid credential"
    assert e.plain_message is None

    e = vendor_error_from_body("openai", {"error": "Unsupported provider"}, status_code=400)
    assert e.plain_message == "Unsupported provider"

    e = vendor_error_from_body("openai", {"error": ["weird"]}, status_code=400)
    assert e.structured_message is None and e.plain_message is None
    assert error_message(e) == "openai request failed with status code 400"
