from types import SimpleNamespace

from inigo.garden_cleanup import cleanup_garden


class FakeContainer:
    def __init__(self, handle):
        self.handle = handle

    def info(self):
        return SimpleNamespace(container_path="/containers/" + self.handle)


class FakeGarden:
    def __init__(self, handles, failures=None):
        self._containers = [FakeContainer(handle) for handle in handles]
        self._failures = {key: list(value) for key, value in (failures or {}).items()}
        self.destroyed = []

    def containers(self):
        return self._containers

    def destroy(self, handle):
        self.destroyed.append(handle)
        pending = self._failures.get(handle)
        if pending:
            raise pending.pop(0)


def _no_sleep(pauses):
    return pauses.append


def test_no_containers():
    pauses = []
    assert cleanup_garden(FakeGarden([]), _no_sleep(pauses)) == []
    assert pauses == []


def test_each_container_destroyed_once():
    garden = FakeGarden(["a", "b"])
    assert cleanup_garden(garden, _no_sleep([])) == []
    assert garden.destroyed == ["a", "b"]


def test_unknown_handle_counts_as_gone():
    garden = FakeGarden(["a"], {"a": [RuntimeError("unknown handle: a")]})
    pauses = []
    assert cleanup_garden(garden, _no_sleep(pauses)) == []
    assert garden.destroyed == ["a"]
    assert pauses == []


def test_already_being_destroyed_counts_as_gone():
    garden = FakeGarden(["a"], {"a": [RuntimeError("container already being destroyed")]})
    assert cleanup_garden(garden, _no_sleep([])) == []
    assert garden.destroyed == ["a"]


def test_retries_then_succeeds():
    garden = FakeGarden(["a"], {"a": [RuntimeError("x"), RuntimeError("y")]})
    pauses = []
    assert cleanup_garden(garden, _no_sleep(pauses)) == []
    assert garden.destroyed == ["a", "a", "a"]
    assert pauses == [0.05, 0.05]


def test_three_failures_are_reported_and_cleanup_continues():
    final = RuntimeError("third")
    garden = FakeGarden(
        ["a", "b"], {"a": [RuntimeError("first"), RuntimeError("second"), final]}
    )
    errors = cleanup_garden(garden, _no_sleep([]))
    assert errors == [final]
    assert garden.destroyed == ["a", "a", "a", "b"]