"""Tests for the Flask /api/print endpoint."""

import json

import pytest

from app import create_app
from printing.errors import TransportError
from services import print_service


@pytest.fixture
def client():
    app = create_app({"allowed": ("network", "usb", "serial")})
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture
def sent(monkeypatch):
    calls = []
    monkeypatch.setattr(print_service, "deliver", lambda target, payload, **kw: calls.append(payload))
    return calls


def _assert_cors(resp):
    assert resp.headers["Access-Control-Allow-Origin"] == "*"
    assert "POST" in resp.headers["Access-Control-Allow-Methods"]
    assert resp.headers["Access-Control-Allow-Headers"] == "Content-Type"


def test_print_success(client, sent, tea_bun_request):
    resp = client.post("/api/print", json=tea_bun_request)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["orderNo"] == "101"
    assert body["timestamp"]
    assert len(sent) == 1
    _assert_cors(resp)


def test_preflight(client):
    resp = client.options("/api/print")
    assert resp.status_code == 200
    assert resp.data == b""
    _assert_cors(resp)


def test_wrong_method(client):
    resp = client.get("/api/print")
    assert resp.status_code == 405
    assert resp.get_json() == {"success": False, "error": "Only POST method allowed"}
    _assert_cors(resp)


def test_malformed_json(client, sent):
    resp = client.post("/api/print", data="{not json", content_type="application/json")
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False
    assert sent == []


def test_missing_items(client, sent):
    resp = client.post("/api/print", json={"orderNo": "101", "items": []})
    assert resp.status_code == 400
    assert resp.get_json()["kind"] == "validation"


def test_unsupported_connection(client, sent, tea_bun_request):
    tea_bun_request["connectionType"] = "bluetooth"
    resp = client.post("/api/print", json=tea_bun_request)
    assert resp.status_code == 500
    assert resp.get_json()["kind"] == "unsupported_connection"


def test_printer_failure(client, monkeypatch, tea_bun_request):
    def boom(*args, **kwargs):
        raise TransportError("Printer connection failed (192.168.1.100:9100): refused")

    monkeypatch.setattr(print_service, "deliver", boom)
    resp = client.post("/api/print", json=tea_bun_request)
    assert resp.status_code == 500
    body = resp.get_json()
    assert body["success"] is False
    assert "refused" in body["error"]


def test_health(client):
    assert client.get("/health").get_json() == {"status": "ok"}


def test_json_body_sent_as_text_plain(client, sent, tea_bun_request):
    resp = client.post("/api/print", data=json.dumps(tea_bun_request), content_type="text/plain")
    assert resp.status_code == 200
    assert resp.get_json()["success"] is True
    assert len(sent) == 1


def test_unexpected_failure_is_json_500(client, monkeypatch, tea_bun_request):
    def broken(*args, **kwargs):
        raise RuntimeError("driver exploded")

    monkeypatch.setattr(print_service, "deliver", broken)
    resp = client.post("/api/print", json=tea_bun_request)
    assert resp.status_code == 500
    assert resp.get_json()["kind"] == "internal"


def test_huge_price_is_json_400(client, sent):
    resp = client.post("/api/print", json={"orderNo": "1", "items": [{"name": "x", "qty": 1, "price": 1e26}]})
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False
    assert sent == []
