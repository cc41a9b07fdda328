"""An HTTP server that records announcements made by processes under test."""

import json
import threading
import urllib.request

from inigo.callback_server import CallbackServer, Response

_TIMEOUT = 30


class AnnouncementServer:
    """Collects strings sent to ``/announce`` and lists them at ``/announcements``."""

    def __init__(self, external_address):
        self._lock = threading.Lock()
        self._registered = []
        self._server = CallbackServer(external_address, self._handle)
        self.address = self._server.address

    def _handle(self, request):
        if request.path == "/announce":
            with self._lock:
                self._registered.append(request.query_value("announcement"))
            return None
        if request.path == "/announcements":
            with self._lock:
                payload = json.dumps(self._registered)
            return Response(body=payload, headers={"Content-Type": "application/json"})
        return Response(status=404)

    def stop(self):
        """Shut the server down."""
        self._server.close()

    def announce_url(self, announcement):
        """Return the URL that records ``announcement`` when fetched."""
        return f"http://{self.address}/announce?announcement={announcement}"

    def announcements(self):
        """Fetch the announcements recorded so far, oldest first."""
        url = f"http://{self.address}/announcements"
        with urllib.request.urlopen(url, timeout=_TIMEOUT) as response:
            return json.loads(response.read())

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.stop()