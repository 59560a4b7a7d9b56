"""
Number and duration parsing for operator-authored values.

Chain-rule thresholds are written by hand, in decimal or 0x-prefixed hex,
and may exceed any fixed-width integer. Durations follow the
"<number> <unit>" convention of hierarchical config files, with a bare
number meaning milliseconds.
"""

import re
from datetime import timedelta
from decimal import Decimal, InvalidOperation
from typing import Union

from chainconf.errors import MalformedNumber

_DEC_RE = re.compile(r"[+-]?[0-9]+")
_HEX_RE = re.compile(r"[0-9a-fA-F]+")
_DURATION_RE = re.compile(r"\s*([+-]?[0-9]+(?:\.[0-9]+)?)\s*([a-zA-Z]*)\s*")

# Unit name -> length in microseconds
_DURATION_UNITS = {
    "ns": Decimal("0.001"), "nano": Decimal("0.001"), "nanos": Decimal("0.001"),
    "nanosecond": Decimal("0.001"), "nanoseconds": Decimal("0.001"),
    "us": Decimal(1), "micro": Decimal(1), "micros": Decimal(1),
    "microsecond": Decimal(1), "microseconds": Decimal(1),
    "": Decimal(1_000), "ms": Decimal(1_000), "milli": Decimal(1_000),
    "millis": Decimal(1_000), "millisecond": Decimal(1_000),
    "milliseconds": Decimal(1_000),
    "s": Decimal(1_000_000), "second": Decimal(1_000_000),
    "seconds": Decimal(1_000_000),
    "m": Decimal(60_000_000), "minute": Decimal(60_000_000),
    "minutes": Decimal(60_000_000),
    "h": Decimal(3_600_000_000), "hour": Decimal(3_600_000_000),
    "hours": Decimal(3_600_000_000),
    "d": Decimal(86_400_000_000), "day": Decimal(86_400_000_000),
    "days": Decimal(86_400_000_000),
}


def parse_big_int(value: str) -> int:
    """
    Parse a signed decimal integer of any size.

    Unlike int(), whitespace and digit separators are rejected.
    """
    if not isinstance(value, str) or not _DEC_RE.fullmatch(value):
        raise MalformedNumber(f"not a decimal number: {value!r}")
    return int(value, 10)


def parse_hex_or_dec(value: str) -> int:
    """
    Parse a string as 0x-prefixed hexadecimal or plain decimal.

    Args:
        value: e.g. "0x3d" or "61"

    Returns:
        Unbounded integer

    Raises:
        MalformedNumber: on an empty hex body or non-digit content
    """
    if not isinstance(value, str):
        raise MalformedNumber(f"not a number string: {value!r}")
    if value[:2] in ("0x", "0X"):
        body = value[2:]
        if not _HEX_RE.fullmatch(body):
            raise MalformedNumber(f"not a hexadecimal number: {value!r}")
        return int(body, 16)
    return parse_big_int(value)


def parse_duration(value: Union[int, str]) -> timedelta:
    """
    Parse a duration.

    Args:
        value: milliseconds as an int, or a string such as "5 seconds",
            "500ms", "1.5 h"

    Returns:
        timedelta (sub-microsecond precision is truncated)
    """
    if isinstance(value, bool):
        raise MalformedNumber(f"not a duration: {value!r}")
    if isinstance(value, int):
        try:
            return timedelta(milliseconds=value)
        except OverflowError as e:
            raise MalformedNumber(f"duration out of range: {value!r}") from e
    if not isinstance(value, str):
        raise MalformedNumber(f"not a duration: {value!r}")

    match = _DURATION_RE.fullmatch(value)
    if not match:
        raise MalformedNumber(f"not a duration: {value!r}")
    amount, unit = match.groups()
    scale = _DURATION_UNITS.get(unit.lower())
    if scale is None:
        raise MalformedNumber(f"unknown duration unit {unit!r} in {value!r}")

    try:
        return timedelta(microseconds=int(Decimal(amount) * scale))
    except InvalidOperation as e:
        raise MalformedNumber(f"not a duration: {value!r}") from e
    except OverflowError as e:
        raise MalformedNumber(f"duration out of range: {value!r}") from e
