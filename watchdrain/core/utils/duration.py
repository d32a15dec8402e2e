"""Duration parsing and formatting in the ``1h2m3.5s`` notation.

The CLI accepts and echoes deadlines in this notation, so ``--timer 50ms``
reports ``timer ended after 50ms`` and the five minute default reports
``5m0s``.
"""

import re

_UNIT_NANOS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_PLAIN_NUMBER = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def parse_duration(text: str) -> float:
    """Parse a duration string into seconds.

    Accepts unit-suffixed components (``50ms``, ``1m``, ``1h30m``, ``2.5s``)
    or a plain number of seconds (``30``, ``0.5``).

    Args:
        text: Duration to parse

    Returns:
        Duration in seconds

    Raises:
        ValueError: If the text is not a valid non-negative duration
    """
    value = text.strip()
    if not value:
        raise ValueError("empty duration")

    if _PLAIN_NUMBER.fullmatch(value):
        return float(value)

    total_ns = 0.0
    pos = 0
    for match in _COMPONENT.finditer(value):
        if match.start() != pos:
            break
        total_ns += float(match.group(1)) * _UNIT_NANOS[match.group(2)]
        pos = match.end()

    if pos != len(value):
        raise ValueError(f"invalid duration '{text}'")

    return total_ns / 1_000_000_000


def _with_fraction(value: int, unit: int) -> str:
    whole, frac = divmod(value, unit)
    if not frac:
        return str(whole)
    digits = str(frac).rjust(len(str(unit)) - 1, "0").rstrip("0")
    return f"{whole}.{digits}"


def format_duration(seconds: float) -> str:
    """Render seconds as a compact duration string.

    Sub-second values use the largest fitting unit (``50ms``, ``1.5µs``);
    longer values are split into hours, minutes and seconds (``5m0s``).
    """
    nanos = round(seconds * 1_000_000_000)
    if nanos == 0:
        return "0s"

    sign = "-" if nanos < 0 else ""
    nanos = abs(nanos)

    if nanos < _UNIT_NANOS["us"]:
        return f"{sign}{nanos}ns"
    if nanos < _UNIT_NANOS["ms"]:
        return f"{sign}{_with_fraction(nanos, _UNIT_NANOS['us'])}µs"
    if nanos < _UNIT_NANOS["s"]:
        return f"{sign}{_with_fraction(nanos, _UNIT_NANOS['ms'])}ms"

    hours, rest = divmod(nanos, _UNIT_NANOS["h"])
    minutes, rest = divmod(rest, _UNIT_NANOS["m"])
    secs = _with_fraction(rest, _UNIT_NANOS["s"])

    if hours:
        return f"{sign}{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{sign}{minutes}m{secs}s"
    return f"{sign}{secs}s"
