"""The HTTP application deployed into containers by the integration tests."""

import argparse
import logging
import os
import queue
import ssl
import subprocess
import sys
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs, urlsplit

logger = logging.getLogger(__name__)


def _read(path):
    with open(path, "rb") as handle:
        return handle.read()


class FixtureHandler(BaseHTTPRequestHandler):
    """Answers the fixture application's endpoints using the server's ``environ``."""

    def _reply(self, status=200, body=b""):
        body = body.encode("utf-8") if isinstance(body, str) else body
        self.send_response(status)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(body)

    def _reply_file(self, path):
        try:
            self._reply(200, _read(path))
        except FileNotFoundError:
            self._reply(404 if self._cat_request else 500)
        except OSError:
            self._reply(500)

    def _route(self, env):
        path = urlsplit(self.path).path
        self._cat_request = path == "/cat"
        if path == "/env":
            return self._reply(200, "".join(f"{k}={v}\n" for k, v in env.items()))
        if path == "/write":
            target = env.get("MOUNT_POINT_DIR", "") + "/test.txt"
            try:
                with open(target, "wb") as handle:
                    handle.write(b"Hello Persistant World!\n")
                return self._reply(200, _read(target))
            except OSError as error:
                return self._reply(500, str(error))
        if path == "/curl":
            try:
                result = subprocess.run(
                    ["curl", "--connect-timeout", "5", "http://www.example.com"],
                    capture_output=True,
                )
            except OSError:
                return self._reply(200, "Unknown Exit Code\n")
            return self._reply(200, str(max(result.returncode, -1)))
        if path == "/yo":
            return self._reply(200, "sup dawg")
        if path == "/privileged":
            try:
                subprocess.run(["touch", "/proc/sysrq-trigger"], check=True, capture_output=True)
            except subprocess.CalledProcessError as error:
                return self._reply(500, f"Failed to touch file: exit status {error.returncode}\n")
            except OSError as error:
                return self._reply(500, f"Failed to touch file: {error}\n")
            return self._reply(200, "Success\n")
        if path == "/cf-instance-cert":
            return self._reply_file(env.get("CF_INSTANCE_CERT", ""))
        if path == "/cf-instance-key":
            return self._reply_file(env.get("CF_INSTANCE_KEY", ""))
        if path == "/cat":
            files = parse_qs(urlsplit(self.path).query, keep_blank_values=True).get("file")
            if not files:
                return self._reply(400, "missing file parameter\n")
            return self._reply_file(files[0])
        return self._reply(200, env.get("INSTANCE_INDEX", ""))

    def _dispatch(self):
        self._route(self.server.environ)

    do_GET = do_POST = do_PUT = do_DELETE = do_PATCH = do_HEAD = _dispatch

    def log_message(self, format, *args):
        logger.debug(format, *args)


class _FixtureServer(ThreadingHTTPServer):
    daemon_threads = True


def build_server(address, environ=None):
    """Bind the fixture application to ``address`` ("host:port") without serving yet."""
    host, _, port = address.rpartition(":")
    server = _FixtureServer((host, int(port) if port else 0), FixtureHandler)
    server.environ = os.environ if environ is None else environ
    return server


def _serve(address, environ, results, tls_files=None):
    try:
        server = build_server(address, environ)
        if tls_files is not None:
            context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
            context.load_cert_chain(*tls_files)
            server.socket = context.wrap_socket(server.socket, server_side=True)
        server.serve_forever()
    except Exception as error:
        results.put(error)
    else:
        results.put(None)


def main(argv=None):
    """Serve on every port in PORT, and with TLS on HTTPS_PORT, until one fails."""
    parser = argparse.ArgumentParser(prog="go-server")
    parser.add_argument(
        "-allocate-memory-b", "--allocate-memory-b", dest="allocate_memory_mb", type=int,
        default=0, help="allocate this much memory (in mb) on the heap and do not release it",
    )
    args = parser.parse_args(argv)
    if args.allocate_memory_mb < 0:
        parser.error("--allocate-memory-b must not be negative")
    garbage = bytearray(args.allocate_memory_mb * 1024 * 1024)
    print("listening...", flush=True)

    environ = os.environ
    results = queue.Queue()
    host = environ.get("CF_INSTANCE_INTERNAL_IP", "") if environ.get("SKIP_LOCALHOST_LISTEN") else ""
    jobs = []
    for port in environ.get("PORT", "").split(" "):
        print(f"{host}:{port}", file=sys.stderr, flush=True)
        jobs.append((f"{host}:{port}", environ, results))
    https_port = environ.get("HTTPS_PORT", "")
    if https_port:
        tls_files = (environ.get("CF_INSTANCE_CERT", ""), environ.get("CF_INSTANCE_KEY", ""))
        jobs.append((f":{https_port}", environ, results, tls_files))
    for job in jobs:
        threading.Thread(target=_serve, args=job, daemon=True).start()

    outcome = results.get()
    del garbage
    if outcome is not None:
        raise outcome
    return 0


if __name__ == "__main__":
    sys.exit(main())