"""HTTP server exposing pin operations as query-string GET requests."""

from __future__ import annotations

import logging
import os
import socket
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Optional, Tuple

from .executor import handle_uri
from .registry import PinRegistry
from .response import Failed, encode

LOGGER = logging.getLogger(__name__)


class PinRequestHandler(BaseHTTPRequestHandler):
    """Answer every GET with a JSON body and status 200."""

    server: "PinHTTPServer"

    def do_GET(self) -> None:
        try:
            body = handle_uri(self.path, self.server.registry)
        except Exception as exc:
            LOGGER.exception("Request %s failed", self.path)
            body = encode(Failed(f"Internal error: {exc}"))
        self._respond(200, body)

    def _respond(self, status: int, body: str) -> None:
        payload = body.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format, *args) -> None:
        LOGGER.debug("%s %s", self.address_string(), format % args)


class PinHTTPServer(ThreadingHTTPServer):
    """Threaded HTTP server sharing one PinRegistry across requests."""

    daemon_threads = True

    def __init__(
        self,
        server_address: Tuple[str, int],
        registry: PinRegistry,
        bind_and_activate: bool = True,
    ) -> None:
        self.registry = registry
        if ":" in server_address[0]:
            self.address_family = socket.AF_INET6
        super().__init__(server_address, PinRequestHandler, bind_and_activate=bind_and_activate)


def create_server(registry: PinRegistry, address: str, port: int) -> PinHTTPServer:
    """Bind a server, or adopt a systemd-activated socket when one is passed in."""
    sock = systemd_listen_socket()
    if sock is None:
        server = PinHTTPServer((address, port), registry)
        LOGGER.info("HTTP listening on %s:%s", *server.server_address[:2])
        return server

    server = PinHTTPServer(sock.getsockname()[:2], registry, bind_and_activate=False)
    server.socket.close()
    server.socket = sock
    server.server_address = sock.getsockname()
    LOGGER.info("HTTP listening on systemd socket %s", server.server_address)
    return server


def systemd_listen_socket() -> Optional[socket.socket]:
    """Return a socket from systemd activation if present, else None."""
    listen_pid = os.environ.get("LISTEN_PID")
    listen_fds = int(os.environ.get("LISTEN_FDS", "0"))
    if not listen_pid or int(listen_pid) != os.getpid() or listen_fds < 1:
        return None
    return socket.socket(fileno=3)
