"""
Duration parsing and formatting.

Handles:
- Go-style duration strings (90s, 1m, 1h30m, 1.5h, 1500ms, -2m)
- Bare integer seconds ("3600")
"""

import re
from fractions import Fraction
from typing import Optional, Union

import structlog

logger = structlog.get_logger(__name__)


UNIT_SECONDS = {
    "ns": Fraction(1, 10**9),
    "us": Fraction(1, 10**6),
    "µs": Fraction(1, 10**6),  # micro sign
    "μs": Fraction(1, 10**6),  # greek mu
    "ms": Fraction(1, 1000),
    "s": Fraction(1),
    "m": Fraction(60),
    "h": Fraction(3600),
}

# Longer units first so "ms" is not read as "m" followed by "s"
COMPONENT_PATTERN = re.compile(r"([0-9]+(?:\.[0-9]*)?|\.[0-9]+)(ns|us|µs|μs|ms|h|m|s)")
DURATION_PATTERN = re.compile(r"([-+]?)((?:(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:ns|us|µs|μs|ms|h|m|s))+)")


def parse_duration(value: Union[str, int, None]) -> Optional[int]:
    """
    Parse a duration into whole seconds.

    Supported formats:
    - Go duration strings: a signed sequence of decimal numbers, each with
      an optional fraction and a unit (ns, us, µs, ms, s, m, h), in any
      order, e.g. "1h30m", "72h", "1.5h", "2m30.5s", "1500ms"
    - "3600" or 3600 (plain seconds)

    Fractional results are truncated toward zero, so anything under one
    second parses as 0.

    Args:
        value: Duration text or integer seconds

    Returns:
        Number of seconds, or None if value is empty

    Raises:
        ValueError: If the text is not a valid duration
    """
    if value is None:
        return None

    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")

    if isinstance(value, int):
        return value

    text = str(value).strip().lower()
    if not text:
        return None

    if re.fullmatch(r"-?\d+", text, re.ASCII):
        return int(text)

    match = DURATION_PATTERN.fullmatch(text)
    if not match:
        logger.debug("invalid_duration", text=value)
        raise ValueError(f"Invalid duration: {value!r}")

    sign, body = match.groups()
    total = sum(
        Fraction(number) * UNIT_SECONDS[unit]
        for number, unit in COMPONENT_PATTERN.findall(body)
    )
    seconds = int(total)
    return -seconds if sign == "-" else seconds


def format_duration(seconds: int) -> str:
    """Render seconds as e.g. '72h0m0s'."""
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{minutes}m{secs}s"
    return f"{secs}s"
