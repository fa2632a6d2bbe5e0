"""HTTP server wiring the user handlers to their routes."""

from __future__ import annotations

import logging
import signal
import socket
import threading
from typing import Any

from flask import Flask, Response
from werkzeug.exceptions import InternalServerError
from werkzeug.serving import make_server

from .config import Config
from .handlers import Handler

_SHUTDOWN_TIMEOUT = 5.0


def _split_address(address: str) -> tuple[str, int]:
    host, sep, port_text = address.rpartition(":")
    if not sep:
        raise ValueError(f"address {address}: missing port in address")
    host = host.strip("[]") or "0.0.0.0"
    if not port_text:
        return host, 80
    if port_text.isdigit():
        return host, int(port_text)
    return host, socket.getservbyname(port_text, "tcp")


class Server:
    """The user API application and the means to serve it."""

    def __init__(self, user_service: Any, log: logging.Logger | None = None) -> None:
        self.log = log or logging.getLogger(__name__)
        self.handlers = Handler(user_service, self.log)
        self.app = Flask(__name__)
        self._setup_routes()

    def _setup_routes(self) -> None:
        app = self.app
        h = self.handlers
        app.add_url_rule("/", "index", self._index, methods=["GET"])
        app.add_url_rule("/users", "save_user", h.save_user, methods=["POST"])
        app.add_url_rule("/users/search", "get_user", h.get_user, methods=["GET"])
        app.add_url_rule("/users/list", "list_users", h.list_users, methods=["GET"])
        app.add_url_rule("/users/<user_id>", "delete_user", h.delete_user, methods=["DELETE"])
        app.add_url_rule(
            "/users/<user_id>/soft", "soft_delete_user", h.soft_delete_user, methods=["DELETE"]
        )
        app.add_url_rule(
            "/users/<user_id>/update", "update_user", h.update_user, methods=["PATCH"]
        )
        app.register_error_handler(InternalServerError, self._internal_error)

    @staticmethod
    def _index() -> Response:
        return Response("server is running", content_type="text/plain; charset=utf-8")

    def _internal_error(self, exc: InternalServerError) -> Response:
        cause = exc.original_exception or exc
        self.log.error(
            "unhandled error while serving request",
            extra={"fields": {"op": "Middleware", "error": str(cause)}},
        )
        return Response(status=500)

    def run(self, cfg: Config) -> None:
        """Serve on the configured address until interrupted, then shut down."""
        op = "Server.Run"
        self.log.info("server is starting")
        try:
            host, port = _split_address(cfg.http_server.address)
            httpd = make_server(host, port, self.app, threaded=True)
        except (OSError, ValueError) as exc:
            self.log.critical(
                "error with starting server", extra={"fields": {"op": op, "error": str(exc)}}
            )
            raise

        stop = threading.Event()
        previous = signal.signal(signal.SIGINT, lambda *_: stop.set())
        worker = threading.Thread(target=httpd.serve_forever, daemon=True)
        self.log.info("waiting request")
        worker.start()
        try:
            while not stop.wait(0.5):
                pass
        finally:
            signal.signal(signal.SIGINT, previous)
            closer = threading.Thread(target=httpd.shutdown, daemon=True)
            closer.start()
            closer.join(_SHUTDOWN_TIMEOUT)
            if closer.is_alive():
                self.log.error(
                    "error with shutdown server",
                    extra={"fields": {"op": op, "error": "shutdown timed out"}},
                )
            httpd.server_close()