"""Tests for error classification and the exception hierarchy."""

from __future__ import annotations

import httpx
import pytest

from ns1.rest import (
    BuildError,
    BuildErrorReason,
    DecodeError,
    NS1Error,
    RestError,
    TransportError,
    check_response,
    classify_response,
)

_REQUEST = httpx.Request("PUT", "https://api.nsone.net/v1/zones/example.com")


def _response(status_code: int, content: bytes = b"") -> httpx.Response:
    return httpx.Response(status_code, content=content, request=_REQUEST)


class TestClassifyResponse:
    @pytest.mark.parametrize("status", [200, 202, 204, 299])
    def test_success_is_none(self, status):
        assert classify_response(_response(status), b'{"message": "ignored"}') is None

    def test_empty_body(self):
        err = classify_response(_response(500), b"")
        assert isinstance(err, RestError)
        assert err.message == ""
        assert str(err) == "PUT https://api.nsone.net/v1/zones/example.com: 500 "

    def test_message_body(self):
        err = classify_response(_response(400), b'{"message": "zone already exists"}')
        assert err.message == "zone already exists"
        assert err.method == "PUT"
        assert str(err.url) == "https://api.nsone.net/v1/zones/example.com"

    def test_body_without_message(self):
        err = classify_response(_response(403), b'{"error": "forbidden"}')
        assert err.message == ""

    def test_null_body(self):
        err = classify_response(_response(404), b"null")
        assert isinstance(err, RestError)
        assert err.message == ""

    @pytest.mark.parametrize("key", ["Message", "MESSAGE"])
    def test_message_key_case_insensitive(self, key):
        body = f'{{"{key}": "zone not found"}}'.encode()
        assert classify_response(_response(404), body).message == "zone not found"

    def test_exact_message_key_preferred(self):
        err = classify_response(_response(404), b'{"Message": "a", "message": "b"}')
        assert err.message == "b"

    @pytest.mark.parametrize("body", [b"Service Unavailable", b'["a"]', b'{"message": 5}'])
    def test_uninterpretable_body(self, body):
        with pytest.raises(DecodeError) as exc_info:
            classify_response(_response(503, body), body)
        assert exc_info.value.response.status_code == 503


class TestCheckResponse:
    def test_success_returns_none(self):
        assert check_response(_response(200, b"anything")) is None

    def test_reads_body_and_raises(self):
        with pytest.raises(RestError) as exc_info:
            check_response(_response(404, b'{"message": "record not found"}'))
        assert str(exc_info.value) == (
            "PUT https://api.nsone.net/v1/zones/example.com: 404 record not found"
        )


class TestHierarchy:
    @pytest.mark.parametrize(
        "exc",
        [
            BuildError(BuildErrorReason.INVALID_PATH),
            TransportError(_REQUEST, "refused"),
            RestError(_response(500)),
            DecodeError(_response(200), "bad"),
        ],
    )
    def test_all_are_ns1_errors(self, exc):
        assert isinstance(exc, NS1Error)

    def test_build_error_message(self):
        err = BuildError(BuildErrorReason.ENCODING_FAILED, "cannot encode object")
        assert str(err) == "encoding_failed: cannot encode object"

    def test_transport_error_message(self):
        assert str(TransportError(_REQUEST, "refused")) == (
            "PUT https://api.nsone.net/v1/zones/example.com: refused"
        )
