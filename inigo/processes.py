"""Shutting down the processes started for a test."""

import logging
import signal
import subprocess

logger = logging.getLogger(__name__)

STOP_TIMEOUT = 20.0
QUIT_TIMEOUT = 10.0
QUIT_SIGNAL = getattr(signal, "SIGQUIT", signal.SIGTERM)


class StopProcessError(AssertionError):
    """At least one process did not exit after being asked to stop."""

    def __init__(self, failures):
        self.failures = list(failures)
        super().__init__(
            "at least one process failed to shut down cleanly: " + "; ".join(self.failures)
        )


def _signal_and_wait(process, sig, timeout):
    try:
        process.send_signal(sig)
    except ProcessLookupError:
        pass
    try:
        process.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        return False
    return True


def stop_processes(*processes):
    """SIGTERM each process and wait; one that hangs gets SIGQUIT and counts as a failure.

    ``None`` entries are skipped. StopProcessError is raised after all are handled.
    """
    failures = []
    for process in processes:
        if process is None or _signal_and_wait(process, signal.SIGTERM, STOP_TIMEOUT):
            continue
        logger.warning("!!!!!!!!!!!!!!!! STOP TIMEOUT !!!!!!!!!!!!!!!!")
        if not _signal_and_wait(process, QUIT_SIGNAL, QUIT_TIMEOUT):
            failures.append(
                f"process {process!r} did not exit within {QUIT_TIMEOUT} seconds of SIGQUIT"
            )
        failures.append("process did not shut down cleanly; SIGQUIT sent")
    if failures:
        raise StopProcessError(failures)