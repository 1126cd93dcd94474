"""Tests for schemarpc.errors — error hierarchy and wire payloads."""

import pytest

from schemarpc.errors import (
    ConfigurationError,
    HTTPError,
    InputMissing,
    InputValidationError,
    InvalidArgument,
    MetadataError,
    MethodNotAllowed,
    NotFound,
    OutputValidationError,
    PayloadDecodeError,
    SchemaRPCError,
    TransformError,
    TransportError,
)
from schemarpc.validation import Issue


class TestHierarchy:
    @pytest.mark.parametrize(
        "cls",
        [ConfigurationError, InvalidArgument, TransformError, TransportError, HTTPError],
    )
    def test_rooted_at_schemarpc_error(self, cls: type) -> None:
        assert issubclass(cls, SchemaRPCError)

    def test_value_errors(self) -> None:
        assert issubclass(InvalidArgument, ValueError)
        assert issubclass(TransformError, ValueError)


class TestTransportError:
    def test_message(self) -> None:
        exc = TransportError("GET", "/users", 400, '{"error":"No __body provided"}')
        assert str(exc) == (
            "Fetch at GET /users failed, status 400, "
            "description: '{\"error\":\"No __body provided\"}'"
        )

    def test_fields(self) -> None:
        exc = TransportError("POST", "/a/b", 500, "Internal Server Error")
        assert exc.method == "POST"
        assert exc.path == "/a/b"
        assert exc.status == 500
        assert exc.description == "Internal Server Error"


class TestHTTPErrors:
    def test_payload_defaults_to_status(self) -> None:
        assert HTTPError(status=418).payload == {"error": "Error 418"}

    def test_payload_uses_detail(self) -> None:
        assert HTTPError(status=409, detail="Taken").payload == {"error": "Taken"}

    def test_not_found(self) -> None:
        assert NotFound().status == 404

    def test_method_not_allowed_sets_allow(self) -> None:
        exc = MethodNotAllowed(frozenset({"POST", "GET"}))
        assert exc.status == 405
        assert exc.headers == (("Allow", "GET, POST"),)

    def test_protocol_messages(self) -> None:
        assert MetadataError().payload == {"error": "Metadata cannot be parsed."}
        assert InputMissing().payload == {"error": "No body provided"}
        assert InputMissing("No __body provided").payload == {"error": "No __body provided"}
        assert PayloadDecodeError().payload == {"error": "Payload cannot be deserialized."}
        assert MetadataError().status == InputMissing().status == PayloadDecodeError().status == 400

    def test_input_validation_payload_lists_issues(self) -> None:
        exc = InputValidationError([Issue(path=("email",), message="Required"), Issue(path=(), message="Bad")])
        assert exc.status == 400
        assert exc.payload == [
            {"path": ["email"], "message": "Required"},
            {"path": [], "message": "Bad"},
        ]

    def test_output_validation_payload_is_detail(self) -> None:
        detail = [{"type": "int_parsing", "loc": ["id"], "msg": "bad"}]
        exc = OutputValidationError(detail)
        assert exc.status == 500
        assert exc.payload == detail

    def test_raisable(self) -> None:
        with pytest.raises(HTTPError) as exc_info:
            raise MetadataError
        assert exc_info.value.status == 400
