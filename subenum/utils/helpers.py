"""Utility functions for SUBENUM.

Helpers for rendering and parsing elapsed time in the compact ``1h2m3.5s``
notation used in API responses.
"""

from __future__ import annotations

import re

_NS_PER_US = 1_000
_NS_PER_MS = 1_000_000
_NS_PER_S = 1_000_000_000
_NS_PER_MIN = 60 * _NS_PER_S
_NS_PER_HOUR = 60 * _NS_PER_MIN

_UNIT_NS = {
    "ns": 1,
    "us": _NS_PER_US,
    "µs": _NS_PER_US,
    "ms": _NS_PER_MS,
    "s": _NS_PER_S,
    "m": _NS_PER_MIN,
    "h": _NS_PER_HOUR,
}
# "ms" must be tried before "m"
_DURATION_TOKEN_RE = re.compile(r"(\d+(?:\.\d*)?)(ns|us|µs|ms|s|m|h)")


def _fixed(value: int, unit: int) -> str:
    """Render ``value / unit`` as a decimal string without trailing zeros."""
    whole, frac = divmod(value, unit)
    if not frac:
        return str(whole)
    width = len(str(unit)) - 1
    return f"{whole}.{str(frac).rjust(width, '0').rstrip('0')}"


def format_duration(seconds: float) -> str:
    """Format an elapsed time as a compact human-readable string.

    Sub-second values use the largest fitting unit (``ns``, ``µs``, ``ms``);
    longer values are split into hours, minutes and fractional seconds,
    e.g. ``"850ms"``, ``"1.5s"``, ``"2m0s"``, ``"1h0m3.25s"``.

    Args:
        seconds: Elapsed time in seconds. Negative values are clamped to 0.

    Returns:
        Formatted duration string.
    """
    ns = max(0, int(round(seconds * _NS_PER_S)))
    if ns == 0:
        return "0s"
    if ns < _NS_PER_US:
        return f"{ns}ns"
    if ns < _NS_PER_MS:
        return _fixed(ns, _NS_PER_US) + "µs"
    if ns < _NS_PER_S:
        return _fixed(ns, _NS_PER_MS) + "ms"

    hours, rem = divmod(ns, _NS_PER_HOUR)
    minutes, rem = divmod(rem, _NS_PER_MIN)
    text = ""
    if hours:
        text += f"{hours}h"
    if hours or minutes:
        text += f"{minutes}m"
    return text + _fixed(rem, _NS_PER_S) + "s"


def parse_duration(text: str) -> float:
    """Parse a string produced by :func:`format_duration` back into seconds.

    Args:
        text: Duration string such as ``"1m30.5s"`` or ``"850ms"``.

    Returns:
        Elapsed time in seconds.

    Raises:
        ValueError: When *text* is not a well-formed duration.
    """
    stripped = text.strip()
    if stripped == "0":
        return 0.0
    total = 0.0
    pos = 0
    for match in _DURATION_TOKEN_RE.finditer(stripped):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _UNIT_NS[match.group(2)]
        pos = match.end()
    if not stripped or pos != len(stripped):
        raise ValueError(f"Invalid duration {text!r}")
    return total / _NS_PER_S
