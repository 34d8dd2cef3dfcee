"""Error Taxonomy — verifies client error variants and server error types.

Tests:
    - Concrete variants carry fixed status codes (400, 404)
    - status_code is read-only on instances
    - ClientError itself cannot be raised (abstract)
    - Structured messages serialize canonically (sorted, compact)
    - New 4xx variants can be declared; non-4xx statuses are rejected
    - UpstreamParseError is a ServerError, not a ClientError
"""

import pytest

from geogate.core.errors import (
    BadRequestError,
    ClientError,
    HandlerContractError,
    NotFoundError,
    ServerError,
    UpstreamParseError,
    serialize_message,
)


def test_bad_request_has_status_400():
    """BadRequestError carries 400 and its message."""
    err = BadRequestError("Missing q parameter")
    assert err.status_code == 400
    assert err.message == "Missing q parameter"
    assert str(err) == "Missing q parameter"


def test_not_found_has_status_404():
    """NotFoundError carries 404."""
    assert NotFoundError("Method not found.").status_code == 404


def test_status_code_cannot_be_reassigned():
    """status_code has no setter."""
    err = BadRequestError("bad")
    with pytest.raises(AttributeError):
        err.status_code = 500
    assert err.status_code == 400


def test_message_cannot_be_reassigned():
    """message has no setter."""
    err = NotFoundError("gone")
    with pytest.raises(AttributeError):
        err.message = "other"


def test_client_error_base_is_abstract():
    """The ClientError base cannot be raised directly."""
    with pytest.raises(TypeError):
        ClientError("no status")


def test_structured_message_is_canonical_json():
    """Dict messages are stored as compact sorted JSON."""
    err = BadRequestError({"field": "q", "reason": "empty"})
    assert err.message == '{"field":"q","reason":"empty"}'


def test_structured_message_key_order_does_not_matter():
    """Key order does not change the stored message."""
    a = BadRequestError({"b": 1, "a": 2})
    b = BadRequestError({"a": 2, "b": 1})
    assert a.message == b.message == '{"a":2,"b":1}'


def test_list_message_is_serialized():
    """List messages are serialised too."""
    assert serialize_message(["q", "limit"]) == '["q","limit"]'


def test_string_message_passes_through():
    """Plain strings are stored unchanged."""
    assert serialize_message("plain text") == "plain text"


def test_new_client_variant_can_be_declared():
    """New 4xx variants plug into the taxonomy."""
    class ConflictError(ClientError):
        _status_code = 409
        code = "CONFLICT"

    err = ConflictError("already exists")
    assert err.status_code == 409
    assert isinstance(err, ClientError)


def test_non_client_status_rejected_at_class_definition():
    """A non-4xx status is refused when the class is defined."""
    with pytest.raises(TypeError):
        class BrokenError(ClientError):
            _status_code = 500


def test_upstream_parse_error_is_server_error():
    """UpstreamParseError is a ServerError with no status of its own."""
    err = UpstreamParseError("Expecting value", "<html>")
    assert isinstance(err, ServerError)
    assert not isinstance(err, ClientError)
    assert err.code == "UPSTREAM_PARSE_ERROR"
    assert err.body_preview == "<html>"
    assert not hasattr(err, "status_code")


def test_handler_contract_error_names_handler():
    """The contract error names the offending handler."""
    err = HandlerContractError("lazy_handler")
    assert "lazy_handler" in err.message
    assert isinstance(err, ServerError)
