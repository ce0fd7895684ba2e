"""HTTP endpoint exposing printer gauges to Prometheus."""

import logging
import socket
from collections.abc import Callable, Iterable
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from prometheus_client.exposition import CONTENT_TYPE_LATEST, ThreadingWSGIServer

from brother_exporter.collector import render, scrape
from brother_exporter.config import parse_listen
from brother_exporter.errors import DuplicateMetricError, MissingTargetError
from brother_exporter.fetcher import PrinterClient
from brother_exporter.targets import TargetResolver

logger = logging.getLogger(__name__)


METRICS_PATH = "/metrics"
TEXT_PLAIN = "text/plain; charset=utf-8"

LANDING_PAGE = b"""<html>
<head><title>Brother Exporter</title></head>
<body>
<h1>Brother Exporter</h1>
<p><a href="/metrics">Metrics</a></p>
</body>
</html>
"""


class ExporterApp:
    """WSGI application serving one fresh registry per scrape request."""

    def __init__(
        self,
        resolver: TargetResolver,
        client_factory: Callable[[], PrinterClient] = PrinterClient,
    ):
        """Initialize the application.

        Args:
            resolver: Decides which printers each request polls
            client_factory: Builds the printer client owned by one request
        """
        self.resolver = resolver
        self.client_factory = client_factory

    def __call__(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        method = environ.get("REQUEST_METHOD", "GET").upper()
        body = self._route(method, environ, start_response)
        # HEAD keeps the headers, Content-Length included, but sends no body
        return [] if method == "HEAD" else body

    def _route(self, method: str, environ: dict, start_response: Callable) -> list[bytes]:
        path = environ.get("PATH_INFO", "/")

        if method not in ("GET", "HEAD"):
            return self._respond(start_response, "405 Method Not Allowed", b"method not allowed\n")
        if path == METRICS_PATH:
            return self._metrics(environ, start_response)
        if path == "/health":
            return self._respond(start_response, "200 OK", b"ok\n")
        if path == "/":
            return self._respond(
                start_response, "200 OK", LANDING_PAGE, "text/html; charset=utf-8"
            )
        return self._respond(start_response, "404 Not Found", b"not found\n")

    def _metrics(self, environ: dict, start_response: Callable) -> list[bytes]:
        try:
            targets = self.resolver.resolve(environ.get("QUERY_STRING", ""))
        except MissingTargetError as e:
            return self._respond(start_response, "400 Bad Request", f"{e}\n".encode())

        try:
            with self.client_factory() as client:
                registry = scrape(targets, client)
        except DuplicateMetricError as e:
            logger.error(f"Scrape of {', '.join(targets)} failed: {e}")
            return self._respond(
                start_response, "500 Internal Server Error", f"scrape failed: {e}\n".encode()
            )

        return self._respond(start_response, "200 OK", render(registry), CONTENT_TYPE_LATEST)

    @staticmethod
    def _respond(
        start_response: Callable,
        status: str,
        body: bytes,
        content_type: str = TEXT_PLAIN,
    ) -> list[bytes]:
        start_response(
            status,
            [("Content-Type", content_type), ("Content-Length", str(len(body)))],
        )
        return [body]


class ThreadingWSGIServerV6(ThreadingWSGIServer):
    address_family = socket.AF_INET6


class QuietRequestHandler(WSGIRequestHandler):
    """Request handler logging through the exporter logger."""

    def log_message(self, format: str, *args) -> None:
        logger.debug(f"{self.address_string()} {format % args}")


def create_server(app: ExporterApp, listen: str) -> WSGIServer:
    """Bind a threaded WSGI server for the application.

    Args:
        app: WSGI application
        listen: Listen address like ":9055"

    Raises:
        OSError: If the address cannot be bound
    """
    host, port = parse_listen(listen)
    server_class = ThreadingWSGIServerV6 if ":" in host else ThreadingWSGIServer
    return make_server(
        host, port, app, server_class=server_class, handler_class=QuietRequestHandler
    )
