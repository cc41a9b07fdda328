"""A small HTTP server that runs in a background thread and hands each request to a callable."""

import logging
import threading
from dataclasses import dataclass, field
from email.message import Message
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs, urlsplit

_log = logging.getLogger(__name__)


@dataclass
class Request:
    """An incoming request as seen by a callback handler."""

    method: str
    path: str
    query: dict
    headers: Message
    body: bytes = b""

    def query_value(self, name):
        """Return the first value of query parameter ``name``, or "" when absent."""
        values = self.query.get(name)
        return values[0] if values else ""


@dataclass
class Response:
    """What a callback handler answers with; the default is an empty 200."""

    status: int = 200
    body: bytes = b""
    headers: dict = field(default_factory=dict)

    def encoded_body(self):
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return bytes(self.body)


class _RequestHandler(BaseHTTPRequestHandler):
    def _dispatch(self):
        split = urlsplit(self.path)
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length) if length else b""
        request = Request(
            method=self.command,
            path=split.path,
            query=parse_qs(split.query, keep_blank_values=True),
            headers=self.headers,
            body=body,
        )
        try:
            response = self.server.callback(request) or Response()
        except Exception as error:  # a failing handler must not kill the server
            self.server.errors.append(error)
            response = Response(status=500)

        payload = response.encoded_body()
        self.send_response(response.status)
        for name, value in response.headers.items():
            self.send_header(name, value)
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(payload)

    do_GET = do_POST = do_PUT = do_DELETE = do_PATCH = do_HEAD = _dispatch

    def log_message(self, format, *args):
        """Send access lines to the module logger instead of stderr."""
        _log.debug("%s - " + format, self.address_string(), *args)


class _Server(ThreadingHTTPServer):
    daemon_threads = True


class CallbackServer:
    """Serve HTTP on ``listen_host`` at a free port, passing each request to ``handler``.

    ``handler`` receives a :class:`Request` and returns a :class:`Response` or
    None for an empty 200. Exceptions it raises are collected in ``errors`` and
    answered with status 500. The server starts at once.
    """

    def __init__(self, listen_host, handler):
        self.errors = []
        self._httpd = _Server((listen_host, 0), _RequestHandler)
        self._httpd.callback = handler
        self._httpd.errors = self.errors
        host, port = self._httpd.server_address[:2]
        self.address = f"{host}:{port}"
        self._closed = False
        self._thread = threading.Thread(target=self._httpd.serve_forever, daemon=True)
        self._thread.start()

    @property
    def url(self):
        return f"http://{self.address}"

    def close(self):
        """Stop serving and release the listening socket."""
        if self._closed:
            return
        self._closed = True
        self._httpd.shutdown()
        self._httpd.server_close()
        self._thread.join()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()