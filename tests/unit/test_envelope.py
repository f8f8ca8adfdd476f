# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json

import pytest

from idpack.envelope import error_envelope, extract_insert_id, map_response
from idpack.http.models import HttpResponse
from idpack.version import __version__


def _decode(exchange):
    return json.loads(exchange.envelope)


def test_error_envelope_shape_and_key_order():
    raw = error_envelope("Response is empty!", 640, action="get_record", authorization="basic")
    body = json.loads(raw)
    assert list(body) == ["status", "message", "code", "api_action", "api"]
    assert body == {
        "status": "error",
        "message": "idc-python: Response is empty!",
        "code": 640,
        "api_action": "get_record",
        "api": {"api_authorization": "basic", "idc_php_version": __version__},
    }


def test_error_envelope_omits_empty_fields():
    body = json.loads(error_envelope())
    assert body == {"status": "error", "api": {"api_authorization": "", "idc_php_version": __version__}}


def test_success_body_returned_verbatim():
    text = '{"status":"success", "data": {"first_name":"\\u00c9lise"}}'
    response = HttpResponse(ok=True, status_code=200, text=text, content=text.encode(), remote_ip="203.0.113.9")
    exchange = map_response(response, action="get_record", authorization="basic")
    assert exchange.ok is True
    assert exchange.envelope == text
    assert exchange.status_code == 200
    assert exchange.remote_ip == "203.0.113.9"
    assert exchange.insert_id is None


@pytest.mark.parametrize(
    ("status", "message"),
    [
        (401, "idc-python: HTTP/1.0 401 Unauthorized."),
        (500, "idc-python: HTTP/1.0 500 IDC API - Server Error."),
        (404, "idc-python: Unexpected 404 HTTP code."),
        (302, "idc-python: Unexpected 302 HTTP code."),
    ],
)
def test_remote_status_codes_are_propagated(status, message):
    response = HttpResponse(ok=True, status_code=status, text="ignored", remote_ip="198.51.100.1")
    exchange = map_response(response, action="update_record", authorization="")
    body = _decode(exchange)
    assert exchange.ok is False
    assert body["code"] == status
    assert body["message"] == message
    assert body["api_action"] == "update_record"
    assert exchange.status_code == status
    assert exchange.remote_ip == "198.51.100.1"


def test_empty_200_body_is_an_error():
    exchange = map_response(HttpResponse(ok=True, status_code=200), action="get_all_records", authorization="basic")
    assert _decode(exchange)["code"] == 640
    assert exchange.status_code == 640


def test_transport_failure_maps_to_630():
    response = HttpResponse(
        ok=False,
        error_message="[Errno 111] Connection refused",
        error_type="ConnectError",
        meta={"error_category": "CONNECTION_ERROR"},
    )
    exchange = map_response(response, action="get_record", authorization="basic", payload_json='{"api":{}}')
    body = _decode(exchange)
    assert body["code"] == 630
    assert body["message"] == "idc-python: HTTP transport error: [Errno 111] Connection refused ConnectError CONNECTION_ERROR"
    assert exchange.remote_ip == ""
    assert exchange.payload_json == '{"api":{}}'


def test_transport_failure_without_category():
    response = HttpResponse(ok=False, error_message="timed out", error_type="ReadTimeout")
    body = _decode(map_response(response, action="get_record", authorization="basic"))
    assert body["message"] == "idc-python: HTTP transport error: timed out ReadTimeout"


def test_insert_id_extracted_only_for_insert_record():
    text = json.dumps({"status": "success", "data": {"idc_id_number": 123}})
    response = HttpResponse(ok=True, status_code=200, text=text, content=text.encode())
    assert map_response(response, action="insert_record", authorization="basic").insert_id == "123"
    assert map_response(response, action="update_record", authorization="basic").insert_id is None


@pytest.mark.parametrize("text", ["not json", "[]", '{"data": "x"}', '{"data": {}}', "<xml/>"])
def test_extract_insert_id_tolerates_other_bodies(text):
    assert extract_insert_id(text) is None
