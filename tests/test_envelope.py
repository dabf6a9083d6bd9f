"""
Unit tests for status triage and envelope decoding.
"""

import json
from typing import Any, Dict, List

import pytest

from postal_client.envelope import (
    _payload_adapter,
    check_status,
    decode_response,
    decode_send_response,
    parse_envelope,
)
from postal_client.errors import (
    ExpectedAlternativeUrlError,
    InternalServerError,
    MalformedResponseError,
    ServiceError,
    ServiceUnavailableError,
)
from postal_client.models import SendResult

SEND_SUCCESS = json.dumps(
    {
        "status": "success",
        "time": 1.0,
        "flags": {},
        "data": {
            "message_id": "m1",
            "messages": {"a@example.com": {"id": 7, "token": "t"}},
        },
    }
)

SERVICE_ERROR = json.dumps(
    {
        "status": "error",
        "time": 1.0,
        "flags": {},
        "data": {"code": "InvalidRecipients", "message": "bad to"},
    }
)


class TestStatusTriage:
    """HTTP status codes are checked before the body is looked at."""

    def test_ok_passes(self):
        check_status(200)

    @pytest.mark.parametrize("body", [SEND_SUCCESS, SERVICE_ERROR, "not json", b""])
    def test_503_is_service_unavailable_regardless_of_body(self, body):
        with pytest.raises(ServiceUnavailableError):
            decode_send_response(503, body)

    @pytest.mark.parametrize("body", [SEND_SUCCESS, SERVICE_ERROR, "not json", b""])
    def test_500_is_internal_server_error_regardless_of_body(self, body):
        with pytest.raises(InternalServerError):
            decode_send_response(500, body)

    @pytest.mark.parametrize("status_code", [301, 308])
    def test_redirects_ask_for_alternative_url(self, status_code):
        with pytest.raises(ExpectedAlternativeUrlError) as exc_info:
            decode_response(status_code, SEND_SUCCESS)

        assert exc_info.value.status_code == status_code

    @pytest.mark.parametrize("status_code", [201, 302, 400, 404, 502])
    def test_undocumented_status_is_malformed(self, status_code):
        with pytest.raises(MalformedResponseError):
            decode_response(status_code, SEND_SUCCESS)


class TestEnvelopeDecoding:
    """The tagged union of success, error and parameter-error envelopes."""

    def test_send_success_flattens_recipients(self):
        assert decode_send_response(200, SEND_SUCCESS) == [SendResult(to="a@example.com", id=7)]

    def test_send_success_with_several_recipients(self):
        body = {
            "status": "success",
            "time": 0.2,
            "flags": {},
            "data": {
                "message_id": "m2",
                "messages": {
                    "a@example.com": {"id": 1, "token": "x"},
                    "b@example.com": {"id": 2, "token": "y"},
                },
            },
        }

        results = decode_send_response(200, json.dumps(body).encode())

        assert sorted(results, key=lambda r: r.id) == [
            SendResult("a@example.com", 1),
            SendResult("b@example.com", 2),
        ]

    def test_error_envelope_raises_service_error(self):
        with pytest.raises(ServiceError) as exc_info:
            decode_send_response(200, SERVICE_ERROR)

        assert exc_info.value.code == "InvalidRecipients"
        assert exc_info.value.message == "bad to"

    @pytest.mark.parametrize("status", ["parameter-error", "parameterError"])
    def test_parameter_error_is_malformed(self, status):
        with pytest.raises(MalformedResponseError):
            decode_response(200, json.dumps({"status": status}))

    def test_unknown_status_tag_is_malformed(self):
        with pytest.raises(MalformedResponseError):
            parse_envelope({"status": "pending", "time": 1.0, "flags": {}, "data": {}})

    def test_non_json_body_is_malformed(self):
        with pytest.raises(MalformedResponseError):
            decode_response(200, b"<html>gateway</html>")

    def test_payload_shape_mismatch_is_malformed(self):
        body = {"status": "success", "time": 1.0, "flags": {}, "data": {"message_id": "m1"}}

        with pytest.raises(MalformedResponseError):
            decode_send_response(200, json.dumps(body))

    def test_untyped_payloads_pass_through(self):
        body = {
            "status": "success",
            "time": 1.0,
            "flags": {},
            "data": [{"id": 3, "status": "Sent", "details": {"nested": [1, 2]}}],
        }

        data = decode_response(200, body, List[Dict[str, Any]])

        assert data == body["data"]


def test_payload_adapters_are_reused():
    assert _payload_adapter(Dict[str, Any]) is _payload_adapter(Dict[str, Any])
