"""End-to-end requests against a server on an ephemeral localhost port."""

import json
import threading
import urllib.request

import pytest

from hypibole import http_server
from hypibole.http_server import create_server


@pytest.fixture
def serve(monkeypatch, make_registry):
    monkeypatch.delenv("LISTEN_PID", raising=False)
    monkeypatch.delenv("LISTEN_FDS", raising=False)
    servers = []

    def _serve(**whitelists):
        server = create_server(make_registry(**whitelists), "127.0.0.1", 0)
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        servers.append((server, thread))
        host, port = server.server_address[:2]
        return f"http://{host}:{port}"

    yield _serve
    for server, thread in servers:
        server.shutdown()
        server.server_close()
        thread.join(timeout=2.0)


def fetch(url):
    with urllib.request.urlopen(url, timeout=5) as resp:
        assert resp.status == 200
        assert resp.headers["Content-Type"] == "application/json"
        return json.loads(resp.read().decode("utf-8"))


def test_set_then_get(serve):
    base = serve(gets="1,2", sets="2")
    assert fetch(f"{base}/?pin=1&op=get")["level"] == "low"
    assert fetch(f"{base}/?pin=2&op=set&level=high") == {"operation": "set", "pin": "2", "status": "success"}
    assert fetch(f"{base}/?pin=2&op=get") == {"level": "high", "operation": "get", "pin": "2", "status": "success"}


def test_errors_are_200_with_error_body(serve):
    base = serve(gets="1,2", sets="2")
    assert fetch(f"{base}/") == {"error": "No arguments in URL."}
    assert "set whitelist" in fetch(f"{base}/?pin=1&op=set&level=high")["error"]


def test_simulated_pins_over_http(serve):
    base = serve(simgets="10", simsets="10")
    fetch(f"{base}/?pin=10&op=set&level=high")
    assert fetch(f"{base}/?pin=10&op=get")["level"] == "high"


def test_unexpected_errors_still_answer(serve, monkeypatch):
    base = serve(simgets="1")

    def boom(uri, registry):
        raise RuntimeError("kaboom")

    monkeypatch.setattr(http_server, "handle_uri", boom)
    assert fetch(f"{base}/?pin=1&op=get") == {"error": "Internal error: kaboom"}


def test_systemd_socket_ignored_for_other_pid(monkeypatch):
    monkeypatch.setenv("LISTEN_PID", "1")
    monkeypatch.setenv("LISTEN_FDS", "1")
    assert http_server.systemd_listen_socket() is None
