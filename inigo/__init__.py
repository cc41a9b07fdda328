"""Helpers for integration tests of container scheduling clusters."""

__version__ = "0.1.0"

__all__ = [
    "announcement_server",
    "callback_server",
    "certauthority",
    "checksum",
    "fsutil",
    "garden_cleanup",
    "go_server",
    "guids",
    "portauthority",
    "processes",
    "route_helpers",
    "timeouts",
]