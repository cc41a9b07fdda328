import signal
import subprocess
import sys

import pytest

from inigo.processes import (
    QUIT_SIGNAL,
    QUIT_TIMEOUT,
    STOP_TIMEOUT,
    StopProcessError,
    stop_processes,
)

STOP_SIGNAL = signal.SIGTERM


class FakeProcess:
    def __init__(self, exits_on=(STOP_SIGNAL,)):
        self.exits_on = exits_on
        self.signals = []
        self.timeouts = []
        self.exited = False

    def send_signal(self, sig):
        self.signals.append(sig)
        if sig in self.exits_on:
            self.exited = True

    def wait(self, timeout=None):
        self.timeouts.append(timeout)
        if self.exited:
            return 0
        raise subprocess.TimeoutExpired("fake", timeout)


def test_clean_process_gets_only_the_stop_signal():
    process = FakeProcess()
    stop_processes(process)
    assert process.signals == [STOP_SIGNAL]
    assert process.timeouts == [STOP_TIMEOUT]


def test_none_entries_are_skipped():
    process = FakeProcess()
    stop_processes(None, process, None)
    assert process.signals == [STOP_SIGNAL]


def test_stubborn_process_is_sent_quit_and_reported():
    process = FakeProcess(exits_on=(QUIT_SIGNAL,))
    with pytest.raises(StopProcessError) as excinfo:
        stop_processes(process)
    assert process.signals == [STOP_SIGNAL, QUIT_SIGNAL]
    assert process.timeouts == [STOP_TIMEOUT, QUIT_TIMEOUT]
    assert excinfo.value.failures == ["process did not shut down cleanly; SIGQUIT sent"]


def test_process_that_never_exits_records_two_failures():
    process = FakeProcess(exits_on=())
    with pytest.raises(StopProcessError) as excinfo:
        stop_processes(process)
    assert len(excinfo.value.failures) == 2
    assert excinfo.value.failures[-1] == "process did not shut down cleanly; SIGQUIT sent"


def test_later_processes_are_stopped_after_a_failure():
    stubborn = FakeProcess(exits_on=())
    clean = FakeProcess()
    with pytest.raises(StopProcessError):
        stop_processes(stubborn, clean)
    assert clean.signals == [STOP_SIGNAL]
    assert clean.exited is True


def test_failure_message_mentions_clean_shutdown():
    with pytest.raises(StopProcessError, match="failed to shut down cleanly"):
        stop_processes(FakeProcess(exits_on=()))


def test_real_subprocess_is_terminated():
    process = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(60)"])
    stop_processes(process)
    assert process.poll() == -signal.SIGTERM