"""Tests for CLI-daemon protocol encoding/decoding."""

import json

import pytest
from pydantic import ValidationError

from termtile.ipc.protocol import (
    ApplyLayoutPayload,
    CommandType,
    ProtocolError,
    Request,
    Response,
    Status,
    decode_request,
    decode_response,
    encode_request,
    encode_response,
)


class TestResponseBuilders:
    """Response.success() and Response.fail() static methods."""

    def test_success_no_data(self):
        """Success response with no data."""
        resp = Response.success()
        assert resp.ok is True
        assert resp.status == Status.OK
        assert resp.data is None

    def test_success_with_data(self):
        """Success response carries data."""
        resp = Response.success({"layouts": ["grid"]})
        assert resp.ok is True
        assert resp.data == {"layouts": ["grid"]}

    def test_fail(self):
        """Error response has status ERROR and a message."""
        resp = Response.fail("layout_name is required")
        assert resp.ok is False
        assert resp.status == Status.ERROR
        assert resp.error == "layout_name is required"


class TestRequestEncoding:
    """encode_request / decode_request round-trip."""

    @pytest.mark.parametrize(
        "req",
        [
            Request(command=CommandType.RELOAD),
            Request(command=CommandType.PREVIEW_LAYOUT, payload={"layout_name": "grid", "duration_seconds": 10}),
            Request(
                command=CommandType.APPLY_LAYOUT,
                payload={"layout_name": "columns", "tile_now": True, "window_order": [0x3A00007, 0xFFFFFFFF]},
            ),
            Request(command=CommandType.SET_DEFAULT_LAYOUT, payload={"layout_name": "line\nbreak"}),
        ],
    )
    def test_round_trip(self, req):
        """Encode → decode yields an equal request."""
        assert decode_request(encode_request(req)) == req

    def test_empty_payload_omitted(self):
        """Request with no payload has no payload key on the wire."""
        obj = json.loads(encode_request(Request(command=CommandType.UNDO)))
        assert obj == {"command": "UNDO"}

    def test_single_line(self):
        """Encoded bytes are one newline-terminated line, even with newlines in payload strings."""
        encoded = encode_request(Request(command=CommandType.APPLY_LAYOUT, payload={"layout_name": "a\nb"}))
        assert encoded.endswith(b"\n")
        assert encoded.count(b"\n") == 1

    def test_unknown_command_survives_decoding(self):
        """Unknown commands decode so the dispatcher can reject them."""
        req = decode_request(b'{"command": "FLY"}\n')
        assert req.command == "FLY"

    def test_unencodable_payload(self):
        """A payload that is not JSON-serializable raises ProtocolError."""
        with pytest.raises(ProtocolError):
            encode_request(Request(command=CommandType.RELOAD, payload={"x": object()}))


class TestResponseEncoding:
    """encode_response / decode_response round-trip."""

    def test_success_round_trip(self):
        """Success response round-trips correctly."""
        resp = Response.success({"active_layout": "grid", "terminal_count": 2})
        assert decode_response(encode_response(resp)) == resp

    def test_error_round_trip(self):
        """Error response round-trips correctly."""
        resp = Response.fail("Unknown layout: nope")
        assert decode_response(encode_response(resp)) == resp

    def test_success_json_excludes_error(self):
        """Success response JSON has no error key, and no data key when there is no data."""
        obj = json.loads(encode_response(Response.success()))
        assert obj == {"status": "OK"}

    def test_error_json_shape(self):
        """Error response JSON carries status and error only."""
        obj = json.loads(encode_response(Response.fail("layout_name is required")))
        assert obj == {"status": "ERROR", "error": "layout_name is required"}

    def test_newline_terminated(self):
        """Encoded bytes end with newline."""
        assert encode_response(Response.success()).endswith(b"\n")


class TestDecodeEdgeCases:
    """Malformed input raises ProtocolError and nothing else."""

    def test_decode_request_missing_payload(self):
        """Missing or null payload defaults to empty dict."""
        assert decode_request(b'{"command": "UNDO"}').payload == {}
        assert decode_request(b'{"command": "UNDO", "payload": null}').payload == {}

    @pytest.mark.parametrize(
        "data",
        [
            b"",
            b"not json",
            b"\xff\xfe",
            b"[1, 2]",
            b'{"payload": {}}',
            b'{"command": 7}',
            b'{"command": "UNDO", "payload": [1]}',
        ],
    )
    def test_decode_request_malformed(self, data):
        """Malformed requests raise ProtocolError."""
        with pytest.raises(ProtocolError):
            decode_request(data)

    @pytest.mark.parametrize(
        "data",
        [
            b"{",
            b'"OK"',
            b'{"status": "MAYBE"}',
            b'{"data": {}}',
            b'{"status": "OK", "data": "x"}',
            b'{"status": "ERROR", "error": 5}',
        ],
    )
    def test_decode_response_malformed(self, data):
        """Malformed responses raise ProtocolError."""
        with pytest.raises(ProtocolError):
            decode_response(data)

    def test_parse_failure_is_chained(self):
        """The underlying JSON error is kept as the cause."""
        with pytest.raises(ProtocolError) as exc_info:
            decode_request(b"{oops")
        assert isinstance(exc_info.value.__cause__, ValueError)


class TestPayloads:
    """Payload model validation."""

    def test_apply_defaults(self):
        """Empty APPLY_LAYOUT payload validates with defaults."""
        payload = ApplyLayoutPayload.model_validate({})
        assert payload.layout_name == ""
        assert payload.tile_now is False
        assert payload.window_order == []

    @pytest.mark.parametrize("window_id", [-1, 0x1_0000_0000])
    def test_window_order_out_of_range(self, window_id):
        """Window ids must fit in 32 unsigned bits."""
        with pytest.raises(ValidationError):
            ApplyLayoutPayload.model_validate({"layout_name": "grid", "window_order": [window_id]})
