# inigo

Building blocks for integration tests that drive a container scheduling
cluster: the things a test suite needs around the components it starts.

## Installation

```
pip install .
pip install ".[test]"   # with pytest, to run the test suite
```

## Modules

| Module | Purpose |
| --- | --- |
| `inigo.portauthority` | `PortAllocator` hands out consecutive ports from a fixed, inclusive range. |
| `inigo.checksum` | `hex_value_for_bytes` returns a double-quoted lower-case hex digest (`md5`, `sha1`, `sha256`). |
| `inigo.guids` | `generate_guid` returns a new random version-4 UUID string. |
| `inigo.timeouts` | `parse_duration`, the `Timeouts` dataclass and `default_timeouts`, which reads overrides from the environment. |
| `inigo.certauthority` | `CertAuthority` creates a CA in a depot directory and issues host or intermediate certificates signed by it. |
| `inigo.callback_server` | `CallbackServer` serves HTTP on a free port in a background thread and passes each `Request` to a callable. |
| `inigo.announcement_server` | `AnnouncementServer` records strings that processes under test announce over HTTP. |
| `inigo.route_helpers` | Requests and pollers that query a router by `Host` header. |
| `inigo.garden_cleanup` | `cleanup_garden` destroys every container a client reports, retrying each up to three times. |
| `inigo.fsutil` | `copy_path` copies a file or directory tree, keeping symlinks and file metadata. |
| `inigo.processes` | `stop_processes` terminates started processes and raises `StopProcessError` for any that hang. |
| `inigo.go_server` | The HTTP fixture application (`FixtureHandler`, `build_server`, `main`). |

## Examples

Allocating ports:

```python
from inigo.portauthority import PortAllocator

allocator = PortAllocator(30, 65355)
first = allocator.claim_ports(4)       # 30; ports 30..33 are yours
following = allocator.claim_ports(1)   # 34
```

An end port above 65535 raises `ValueError`; a claim that does not fit in
what is left of the range raises `RuntimeError("insufficient ports available")`
and claims nothing.

A certificate authority and a certificate signed by it:

```python
from inigo.certauthority import CertAuthority

authority = CertAuthority("/tmp/cert-depot", "ca")
ca_key_path, ca_cert_path = authority.ca_and_key()
key_path, cert_path = authority.generate_self_signed_cert_and_key(
    "some-component", ["some-component"], False
)
```

The CA files are written as `<common name>.key` and `<common name>.crt` in the
depot directory; issued keys and certificates go to new temporary files there.
Issued certificates carry the given names and `127.0.0.1` as subject
alternative names.

Checksums:

```python
from inigo.checksum import hex_value_for_bytes

value = hex_value_for_bytes("sha256", b"archive contents")   # '"<hex>"'
```

Any other algorithm name raises `ValueError`.

Timeouts:

```python
from inigo.timeouts import default_timeouts, parse_duration

parse_duration("1m30s")   # 90.0
timeouts = default_timeouts({"DEFAULT_EVENTUALLY_TIMEOUT": "2m"})
timeouts.eventually_timeout       # 120.0
timeouts.consistently_duration    # 5.0
```

Without an argument, `default_timeouts` reads `os.environ`.

Collecting announcements:

```python
from inigo.announcement_server import AnnouncementServer

with AnnouncementServer("127.0.0.1") as server:
    url = server.announce_url("task-guid")   # have the process fetch this URL
    print(server.announcements())
```

Polling a router:

```python
from inigo.route_helpers import hello_world_instance_poller

poll = hello_world_instance_poller("127.0.0.1:18001", "lrp-route")
indices = poll()   # sorted distinct response bodies, e.g. ["0", "1"]
```

The poller makes twenty requests, skipping failed connections and the 404 and
502 answers the router itself produces; any other 404 or 502 raises
`RouterResponseError`.

Cleaning up: `cleanup_garden(client)` expects an object with `containers()`
and `destroy(handle)`, treats "unknown handle" and "container already being
destroyed" as done, and returns the errors of containers it could not destroy.
`stop_processes(*processes)` takes `subprocess.Popen`-like objects, skips
`None`, sends SIGTERM and waits 20 seconds, then SIGQUIT and 10 more.

## The fixture server

```
inigo-go-server
inigo-go-server --allocate-memory-b 64
```

It listens on every port in the space-separated `PORT` variable (on
`CF_INSTANCE_INTERNAL_IP` when `SKIP_LOCALHOST_LISTEN` is set) and, when
`HTTPS_PORT` is set, serves TLS there with `CF_INSTANCE_CERT` and
`CF_INSTANCE_KEY`. `--allocate-memory-b` holds that many megabytes while it
runs. Routes:

- `/` — the value of `INSTANCE_INDEX`
- `/env` — the environment, one `NAME=value` per line
- `/write` — writes and reads back `$MOUNT_POINT_DIR/test.txt`
- `/curl` — the exit code of `curl` against `http://www.example.com`
- `/yo` — `sup dawg`
- `/privileged` — tries to touch `/proc/sysrq-trigger`
- `/cf-instance-cert`, `/cf-instance-key` — the files those variables name
- `/cat?file=PATH` — the file's contents, 404 if it does not exist

`build_server(address, environ)` binds the same application to `"host:port"`
without serving, for use inside a test.

## What this package does not do

It does not build, start or configure the cluster components themselves, and
has no clients for their APIs and no builders for task or process requests.
It provides only the surrounding helpers listed above.

## Running the tests

```
pip install ".[test]"
pytest
```