# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Format converters.

String to date/time and number conversions used by the validator and the
caster whenever a schema carries a ``format`` (or a scalar needs coercing).
None of these consult the schema tree.

Timestamps follow a UTC-normalization rule: a timestamp without an offset is
read as UTC, never as local time, and every result is shifted to UTC.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from jsonschema import FormatChecker

from .exceptions import InvalidFormatError
from .models.schema import DATE_FORMAT, DATE_TIME_FORMAT


# ---- lexical forms ----------------------------------------------------------

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DATE_TIME_RE = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})[Tt ]"
    r"(?P<time>\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?)"
    r"(?P<offset>[Zz]|[+-]\d{2}:?\d{2})?$"
)
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")

_TRUE_LITERALS = {"true"}
_FALSE_LITERALS = {"false"}

INTEGER_FORMAT_RANGES = {
    "int32": (-(2 ** 31), 2 ** 31 - 1),
    "int64": (-(2 ** 63), 2 ** 63 - 1),
}

_FORMAT_CHECKER = FormatChecker()


# ---- string -> value --------------------------------------------------------


def parse_datetime(text: Any) -> datetime:
    """Parse an ISO-8601 timestamp such as ``2018-04-01T12:34:56Z``.

    Returns:
        An aware :class:`datetime` in UTC.

    Raises:
        InvalidFormatError: If *text* is not a string holding a timestamp.
    """
    if not isinstance(text, str):
        raise InvalidFormatError(f"Expected a date-time string, got {type(text).__name__}")

    m = _DATE_TIME_RE.match(text.strip())
    if m is None:
        raise InvalidFormatError(f"Invalid date-time: '{text}'")

    clock = m.group("time")
    # Pad fractional seconds to microseconds; fromisoformat is strict about width
    # before Python 3.11.
    if "." in clock:
        whole, fraction = clock.split(".", 1)
        clock = f"{whole}.{(fraction + '000000')[:6]}"

    offset = m.group("offset")
    if offset is None or offset in ("Z", "z"):
        offset = "+00:00"
    elif ":" not in offset:
        offset = f"{offset[:3]}:{offset[3:]}"

    try:
        parsed = datetime.fromisoformat(f"{m.group('date')}T{clock}{offset}")
    except ValueError as exc:
        raise InvalidFormatError(f"Invalid date-time: '{text}'") from exc
    return parsed.astimezone(timezone.utc)


def parse_date(text: Any) -> date:
    """Parse a calendar date ``YYYY-MM-DD``.

    Raises:
        InvalidFormatError: If *text* is not a valid calendar date.
    """
    if not isinstance(text, str) or _DATE_RE.match(text.strip()) is None:
        raise InvalidFormatError(f"Invalid date: '{text}'")
    try:
        return date.fromisoformat(text.strip())
    except ValueError as exc:
        raise InvalidFormatError(f"Invalid date: '{text}'") from exc


def _parse_decimal(text: Any) -> Decimal:
    if not isinstance(text, str):
        raise InvalidFormatError(f"Expected a numeric string, got {type(text).__name__}")
    stripped = text.strip()
    if _NUMBER_RE.match(stripped) is None:
        raise InvalidFormatError(f"Invalid numeric value '{text}'")
    try:
        return Decimal(stripped)
    except InvalidOperation as exc:
        raise InvalidFormatError(f"Invalid numeric value '{text}'") from exc


def parse_number(text: Any) -> float:
    """Parse an integer or float literal to a ``float``.

    Raises:
        InvalidFormatError: On non-numeric text (``NaN``/``Infinity`` included).
    """
    return float(_parse_decimal(text))


def parse_integer(text: Any) -> int:
    """Parse a numeric literal with an integral value (``"12"``, ``"1.0e2"``).

    Raises:
        InvalidFormatError: On non-numeric or non-integral text.
    """
    dec = _parse_decimal(text)
    if dec != dec.to_integral_value():
        raise InvalidFormatError(f"Non-integral value '{text}'")
    return int(dec)


def parse_boolean(text: Any) -> bool:
    if isinstance(text, str):
        lowered = text.strip().lower()
        if lowered in _TRUE_LITERALS:
            return True
        if lowered in _FALSE_LITERALS:
            return False
    raise InvalidFormatError(f"Invalid boolean value '{text}'")


# ---- value -> string --------------------------------------------------------


def format_datetime(value: datetime) -> str:
    """Render *value* as ISO-8601; naive values are taken as UTC, UTC uses ``Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.isoformat()
    if value.utcoffset() is not None and not value.utcoffset():
        text = text[: -len("+00:00")] + "Z"
    return text


def format_date(value: date) -> str:
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


# ---- format conformance -----------------------------------------------------


def check_format(value: Any, fmt: Optional[str]) -> Optional[str]:
    """Check *value* against *fmt*.

    Returns:
        ``None`` when the value conforms (or the format is unknown), otherwise
        a human readable reason.
    """
    if not fmt:
        return None

    if fmt == DATE_TIME_FORMAT:
        if isinstance(value, str):
            try:
                parse_datetime(value)
            except InvalidFormatError as exc:
                return str(exc)
        return None

    if fmt == DATE_FORMAT:
        if isinstance(value, str):
            try:
                parse_date(value)
            except InvalidFormatError as exc:
                return str(exc)
        return None

    if fmt in INTEGER_FORMAT_RANGES:
        if isinstance(value, int) and not isinstance(value, bool):
            low, high = INTEGER_FORMAT_RANGES[fmt]
            if not low <= value <= high:
                return f"Value {value} out of range for format '{fmt}'"
        return None

    if not _FORMAT_CHECKER.conforms(value, fmt):
        return f"Value '{value}' is not a valid '{fmt}'"
    return None
