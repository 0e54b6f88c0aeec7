import base64
import inspect

import pytest
from fastapi.testclient import TestClient

from protopeek import config
from protopeek import server
from protopeek.resolver import resolve
from protopeek.server import app


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_decode_hex(client):
    resp = client.post("/decode", json={"data": "089601", "encoding": "hex"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["field_count"] == 1
    assert body["lines"] == ["1: 150"]
    assert body["tree"][0]["value"] == 150


def test_decode_base64(client):
    data = base64.b64encode(b"\x12\x03abc").decode()
    resp = client.post("/decode", json={"data": data})
    assert resp.status_code == 200
    assert resp.json()["lines"] == ["2: abc"]


def test_decode_groups(client):
    resp = client.post("/decode", json={"data": "0b08010c", "encoding": "hex", "groups": "nest"})
    assert resp.json()["lines"] == ["1: {", "  1: 1", "}"]


def test_decode_bad_encoding_data(client):
    resp = client.post("/decode", json={"data": "zz", "encoding": "hex"})
    assert resp.status_code == 400
    resp = client.post("/decode", json={"data": "not base64!"})
    assert resp.status_code == 400


def test_decode_unknown_encoding(client):
    resp = client.post("/decode", json={"data": "00", "encoding": "rot13"})
    assert resp.status_code == 422


def test_decode_failure(client):
    resp = client.post("/decode", json={"data": "0896", "encoding": "hex"})
    assert resp.status_code == 422
    assert "trailing" in resp.json()["detail"]


def test_decode_too_large(client, monkeypatch):
    monkeypatch.setattr(config, "MAX_UPLOAD", 2)
    resp = client.post("/decode", json={"data": "089601", "encoding": "hex"})
    assert resp.status_code == 413


def test_decode_file(client, tmp_path):
    path = tmp_path / "msg.bin"
    path.write_bytes(b"\x0a\x02\x08\x05")
    resp = client.post("/decode/file", json={"path": str(path)})
    assert resp.status_code == 200
    assert resp.json()["lines"] == ["1: {", "  1: 5", "}"]


def test_decode_file_missing(client, tmp_path):
    resp = client.post("/decode/file", json={"path": str(tmp_path / "nope.bin")})
    assert resp.status_code == 404


def test_decode_handlers_run_in_threadpool():
    assert not inspect.iscoroutinefunction(server.decode_payload)
    assert not inspect.iscoroutinefunction(server.decode_file)


def test_decode_resolves_once(client, monkeypatch):
    calls = []

    def counting_resolve(*args, **kwargs):
        calls.append(args)
        return resolve(*args, **kwargs)

    monkeypatch.setattr(server, "resolve", counting_resolve)
    resp = client.post("/decode", json={"data": "0a020805", "encoding": "hex"})
    assert resp.status_code == 200
    assert resp.json()["lines"] == ["1: {", "  1: 5", "}"]
    assert len(calls) == 1


def test_decode_file_too_large_is_not_read(client, tmp_path, monkeypatch):
    path = tmp_path / "big.bin"
    path.write_bytes(b"\x08\x96\x01")
    monkeypatch.setattr(config, "MAX_UPLOAD", 2)

    def no_open(*args, **kwargs):
        raise AssertionError("file opened")

    monkeypatch.setattr(server, "open", no_open, raising=False)
    resp = client.post("/decode/file", json={"path": str(path)})
    assert resp.status_code == 413
