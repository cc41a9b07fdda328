import http.client

import pytest

from inigo.callback_server import CallbackServer, Response


def _get(address, path):
    connection = http.client.HTTPConnection(address, timeout=5)
    try:
        connection.request("GET", path)
        response = connection.getresponse()
        return response.status, response.read()
    finally:
        connection.close()


def test_handler_response_is_served():
    with CallbackServer("127.0.0.1", lambda request: Response(body=b"hello")) as server:
        assert _get(server.address, "/") == (200, b"hello")


def test_none_means_empty_ok():
    with CallbackServer("127.0.0.1", lambda request: None) as server:
        assert _get(server.address, "/anything") == (200, b"")


def test_request_fields_reach_handler():
    seen = []

    def handler(request):
        seen.append(request)
        return Response(body=request.query_value("name"))

    with CallbackServer("127.0.0.1", handler) as server:
        status, body = _get(server.address, "/some/path?name=abc&name=def")
    assert body == b"abc"
    assert seen[0].path == "/some/path"
    assert seen[0].method == "GET"
    assert seen[0].query["name"] == ["abc", "def"]
    assert seen[0].query_value("missing") == ""


def test_custom_status():
    with CallbackServer("127.0.0.1", lambda request: Response(status=404)) as server:
        status, _ = _get(server.address, "/")
    assert status == 404


def test_handler_exception_recorded_as_500():
    def handler(request):
        raise RuntimeError("boom")

    with CallbackServer("127.0.0.1", handler) as server:
        status, _ = _get(server.address, "/")
        assert status == 500
        assert [str(error) for error in server.errors] == ["boom"]


def test_address_uses_listen_host_and_a_real_port():
    with CallbackServer("127.0.0.1", lambda request: None) as server:
        host, port = server.address.rsplit(":", 1)
        assert host == "127.0.0.1"
        assert int(port) > 0


def test_closed_server_refuses_connections():
    server = CallbackServer("127.0.0.1", lambda request: Response(body=b"up"))
    address = server.address
    assert _get(address, "/") == (200, b"up")
    server.close()
    server.close()
    with pytest.raises(OSError):
        _get(address, "/")