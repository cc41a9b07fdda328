"""Requests through the router to applications identified by their Host header."""

import http.client
import re
from urllib.parse import quote

_TIMEOUT = 30
_POLL_ATTEMPTS = 20
_ROUTE_MISSING = re.compile(r"Requested route \('.*'\) does not exist")
_ENDPOINT_FAILED = "Registered endpoint failed to handle the request"


class RouterResponseError(AssertionError):
    """A 404 or 502 came back that the router did not produce."""


def _request(router_addr, host, path_elements):
    path = quote("/" + "/".join(path_elements), safe="/")
    connection = http.client.HTTPConnection(router_addr, timeout=_TIMEOUT)
    try:
        connection.request("GET", path, headers={"Host": host})
        response = connection.getresponse()
        body = response.read()
        return body, response.status
    finally:
        connection.close()


def response_body_and_status_code_from_host(router_addr, host, *path_elements):
    """GET ``/path/elements`` from ``router_addr`` with Host ``host``.

    Returns (body bytes, status code); connection failures raise OSError.
    """
    return _request(router_addr, host, path_elements)


def response_code_from_host_poller(router_addr, host, *path_elements):
    """Return a callable that makes the request and returns its status code."""

    def poll():
        return _request(router_addr, host, path_elements)[1]

    return poll


def hello_world_instance_poller(router_addr, host):
    """Return a callable that asks the route many times and returns the sorted
    set of distinct bodies, i.e. the instance indices that answered.

    Failed connections and router-generated 404 and 502 answers are skipped;
    a 404 or 502 that the router did not produce raises RouterResponseError.
    """

    def poll():
        responding = set()
        for _ in range(_POLL_ATTEMPTS):
            try:
                body, status = _request(router_addr, host, ())
            except OSError:
                continue
            text = body.decode("utf-8", "replace")
            if status == 404:
                if not _ROUTE_MISSING.search(text):
                    raise RouterResponseError("Got a 404, but it wasn't from the router!")
                continue
            if status == 502:
                if _ENDPOINT_FAILED not in text:
                    raise RouterResponseError("Got a 502, but it wasn't from the router!")
                continue
            responding.add(text)
        return sorted(responding)

    return poll