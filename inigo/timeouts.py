"""Default polling timeouts, overridable through the environment."""

import os
import re
from dataclasses import dataclass
from fractions import Fraction

_UNITS = {
    "ns": Fraction(1, 10**9),
    "us": Fraction(1, 10**6),
    "µs": Fraction(1, 10**6),
    "μs": Fraction(1, 10**6),
    "ms": Fraction(1, 1000),
    "s": Fraction(1),
    "m": Fraction(60),
    "h": Fraction(3600),
}
_PART = r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)"
_DURATION = re.compile(rf"([+-]?)((?:{_PART})+|0)")


def parse_duration(text):
    """Parse a duration such as ``"1m30s"`` or ``"-1.5h"`` into seconds."""
    match = _DURATION.fullmatch(text)
    if match is None:
        raise ValueError(f'time: invalid duration "{text}"')
    sign, body = match.group(1), match.group(2)
    total = sum((Fraction(n) * _UNITS[u] for n, u in re.findall(_PART, body)), Fraction(0))
    return float(-total if sign == "-" else total)


@dataclass(frozen=True)
class Timeouts:
    """Polling timeouts and intervals, all in seconds."""

    eventually_timeout: float = 60.0
    consistently_duration: float = 5.0
    consistently_polling_interval: float = 0.1
    eventually_polling_interval: float = 0.5


def default_timeouts(environ=None):
    """Default timeouts, honouring DEFAULT_EVENTUALLY_TIMEOUT and
    DEFAULT_CONSISTENTLY_DURATION when they are set and non-empty."""
    env = os.environ if environ is None else environ
    eventually = env.get("DEFAULT_EVENTUALLY_TIMEOUT", "")
    consistently = env.get("DEFAULT_CONSISTENTLY_DURATION", "")
    defaults = Timeouts()
    return Timeouts(
        eventually_timeout=parse_duration(eventually) if eventually else defaults.eventually_timeout,
        consistently_duration=(
            parse_duration(consistently) if consistently else defaults.consistently_duration
        ),
    )