"""HTTP front end: a Flask app served by a threaded werkzeug server."""

from __future__ import annotations

import logging
import socket
import threading

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException
from werkzeug.serving import BaseWSGIServer, make_server, select_address_family

from ppba_alpaca.core.errors import ServerStartError
from ppba_alpaca.core.router import Router

_METHODS = ["GET", "PUT", "POST", "DELETE", "PATCH", "OPTIONS"]
LOGGER = logging.getLogger(__name__)


def create_app(router: Router) -> Flask:
    app = Flask(__name__)
    app.url_map.merge_slashes = False
    app.json.sort_keys = False

    def respond():
        result = router.route(request.path, request.args)
        return jsonify(result.body), result.status_code

    @app.route("/", defaults={"path": ""}, methods=_METHODS)
    @app.route("/<path:path>", methods=_METHODS)
    def dispatch(path: str):
        return respond()

    # Paths the URL map cannot match (e.g. a leading "//") still get a JSON answer.
    @app.errorhandler(HTTPException)
    def unmatched(exc: HTTPException):
        if exc.code is None or exc.code < 400:
            return exc
        if exc.code in (404, 405):
            return respond()
        return jsonify({"Error": exc.description}), exc.code

    return app


class AlpacaServer:
    """Serves the router on ``host:port`` from a background thread.

    Each request is handled on its own thread. ``stop()`` stops accepting,
    waits for in-flight requests, and releases the listening socket.
    """

    def __init__(self, host: str, port: int, router: Router) -> None:
        self.host = host
        self._requested_port = port
        self.app = create_app(router)
        self._server: BaseWSGIServer | None = None
        self._thread: threading.Thread | None = None
        self._port: int | None = None

    @property
    def is_running(self) -> bool:
        return self._server is not None

    @property
    def port(self) -> int:
        return self._port if self._port is not None else self._requested_port

    def start(self) -> None:
        if self._server is not None:
            return

        listener = self._bind()
        try:
            server = make_server(self.host, self.port, self.app, threaded=True, fd=listener.fileno())
        finally:
            listener.close()
        server.daemon_threads = False

        self._server = server
        self._thread = threading.Thread(
            target=server.serve_forever,
            name=f"alpaca-http-{self.port}",
            daemon=True,
        )
        self._thread.start()
        LOGGER.info("Alpaca HTTP listener started on %s:%d", self.host, self.port)

    def stop(self) -> None:
        server, thread = self._server, self._thread
        if server is None:
            return

        server.shutdown()
        server.server_close()
        if thread is not None:
            thread.join()
        self._server = None
        self._thread = None
        LOGGER.info("Alpaca HTTP listener stopped")

    def _bind(self) -> socket.socket:
        family = select_address_family(self.host, self._requested_port)
        listener = socket.socket(family, socket.SOCK_STREAM)
        try:
            listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            listener.bind((self.host, self._requested_port))
            listener.listen(128)
        except OSError as exc:
            listener.close()
            raise ServerStartError(f"Could not bind {self.host}:{self._requested_port}: {exc}") from exc
        self._port = listener.getsockname()[1]
        return listener
