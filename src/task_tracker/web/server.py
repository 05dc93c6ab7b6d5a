# src/task_tracker/web/server.py

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from flask import Flask
from werkzeug.serving import BaseWSGIServer, make_server

logger = logging.getLogger(__name__)


@dataclass
class ServerBackgroundRunner:
    thread: threading.Thread
    server: BaseWSGIServer

    @property
    def port(self) -> int:
        return int(self.server.server_port)

    def stop(self) -> None:
        try:
            self.server.shutdown()
        except Exception:
            logger.debug("Failed to signal HTTP server stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def run_server_in_background(app: Flask, host: str, port: int) -> ServerBackgroundRunner:
    """
    Start the REST API in a background thread (so the console REPL can run in the
    foreground). The server is threaded: one handler thread per request.

    Bind errors (port in use, ...) propagate to the caller.
    """
    server = make_server(host, port, app, threaded=True)

    t = threading.Thread(target=server.serve_forever, name="http-server", daemon=True)
    t.start()

    logger.info("REST API listening on http://%s:%s", host, server.server_port)
    return ServerBackgroundRunner(thread=t, server=server)
