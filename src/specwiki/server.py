"""Serving mode: convert documents posted over HTTP.

``POST /convert`` takes the raw JSON or YAML document as the request body
and answers with the rendered Jira markup as ``text/plain``. Requests are
handled one at a time and each builds its own model, so no state carries
over from one request to the next.

Status codes:

* ``200`` -- converted.
* ``400`` -- the body is not UTF-8, or the document is malformed or has the
  wrong shape. The response body is the error message.
* ``404`` -- any path other than ``/convert``.
* ``405`` -- any method other than POST on ``/convert``.
* ``500`` -- an unexpected failure while converting; the details go to the
  log, not the response.
"""

from __future__ import annotations

import logging
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any
from urllib.parse import urlparse

from specwiki.converter import convert_text
from specwiki.exceptions import DocumentError

logger = logging.getLogger(__name__)

CONVERT_PATH = "/convert"


class ConvertHandler(BaseHTTPRequestHandler):
    """Request handler for the ``/convert`` endpoint."""

    server_version = "specwiki"

    def do_POST(self) -> None:
        if urlparse(self.path).path != CONVERT_PATH:
            self._reply(404, f"Not found: {self.path}")
            return

        length = int(self.headers.get("Content-Length") or 0)
        raw = self.rfile.read(length) if length > 0 else b""
        try:
            content = raw.decode("utf-8")
        except UnicodeDecodeError:
            self._reply(400, "Request body must be UTF-8 text")
            return

        try:
            markup = convert_text(content, hint=_format_hint(self.headers.get("Content-Type", "")))
        except DocumentError as exc:
            logger.debug("Rejected document: %s", exc)
            self._reply(400, str(exc))
            return
        except Exception:
            logger.exception("Conversion failed")
            self._reply(500, "Internal server error")
            return

        self._reply(200, markup)

    def do_GET(self) -> None:
        self._reject_method()

    def do_PUT(self) -> None:
        self._reject_method()

    def do_DELETE(self) -> None:
        self._reject_method()

    def _reject_method(self) -> None:
        if urlparse(self.path).path != CONVERT_PATH:
            self._reply(404, f"Not found: {self.path}")
        else:
            self._reply(405, "Method not allowed", allow="POST")

    def _reply(self, status: int, body: str, allow: str | None = None) -> None:
        payload = body.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(payload)))
        if allow:
            self.send_header("Allow", allow)
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format: str, *args: Any) -> None:
        logger.info("%s - %s", self.address_string(), format % args)


def _format_hint(content_type: str) -> str:
    if "json" in content_type:
        return "json"
    if "yaml" in content_type or "yml" in content_type:
        return "yaml"
    return ""


def make_server(host: str, port: int) -> HTTPServer:
    """Create (and bind) the conversion server without starting it.

    Args:
        host: Interface to bind, e.g. ``"0.0.0.0"``.
        port: TCP port; ``0`` picks a free port.
    """
    return HTTPServer((host, port), ConvertHandler)


def serve(host: str, port: int) -> None:
    """Run the conversion server until interrupted.

    Args:
        host: Interface to bind.
        port: TCP port to listen on.
    """
    server = make_server(host, port)
    logger.info("Serving on http://%s:%d%s", host, server.server_address[1], CONVERT_PATH)
    try:
        server.serve_forever()
    finally:
        server.server_close()
