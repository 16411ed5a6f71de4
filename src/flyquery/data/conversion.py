# Copyright 2026 Firefly Software Solutions Inc.
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
"""Value conversion for filter clauses.

Clause operands travel as text and are converted to the property's semantic
type once, when the clause is compiled.  Live entity values go through the
same normalisation before every comparison, so that a ``Float32`` column is
compared at single precision and string-typed rows (dict rows, CSV-backed
stores) still compare numerically.
"""

from __future__ import annotations

import datetime
import decimal
import re
import struct
from collections.abc import Callable, Sequence
from typing import Any

from flyquery.data.exceptions import ValueConversionError
from flyquery.data.types import SemanticType

_INTEGER_RE = re.compile(r"^[+-]?\d+$")

INTEGER_RANGES: dict[SemanticType, tuple[int, int]] = {
    SemanticType.INT16: (-(2**15), 2**15 - 1),
    SemanticType.INT32: (-(2**31), 2**31 - 1),
    SemanticType.INT64: (-(2**63), 2**63 - 1),
    SemanticType.UINT16: (0, 2**16 - 1),
    SemanticType.UINT32: (0, 2**32 - 1),
    SemanticType.UINT64: (0, 2**64 - 1),
    SemanticType.BYTE: (0, 255),
}


def _fail(name: str, raw: Any, semantic_type: SemanticType, reason: str = "") -> ValueConversionError:
    return ValueConversionError(name, raw, semantic_type.value, reason)


def _to_integer(raw: str, semantic_type: SemanticType, name: str) -> int:
    text = raw.strip()
    if not _INTEGER_RE.match(text):
        raise _fail(name, raw, semantic_type, "not an integer")
    value = int(text)
    low, high = INTEGER_RANGES[semantic_type]
    if not low <= value <= high:
        raise _fail(name, raw, semantic_type, f"outside [{low}, {high}]")
    return value


def to_single(value: float) -> float:
    """Round *value* to IEEE-754 single precision."""
    return struct.unpack("f", struct.pack("f", value))[0]


def _to_float(raw: str, semantic_type: SemanticType, name: str) -> float:
    try:
        value = float(raw.strip())
    except ValueError as exc:
        raise _fail(name, raw, semantic_type, "not a number") from exc
    if semantic_type is SemanticType.FLOAT32:
        try:
            return to_single(value)
        except OverflowError as exc:
            raise _fail(name, raw, semantic_type, "outside single-precision range") from exc
    return value


def _to_decimal(raw: str, semantic_type: SemanticType, name: str) -> decimal.Decimal:
    try:
        value = decimal.Decimal(raw.strip())
    except decimal.InvalidOperation as exc:
        raise _fail(name, raw, semantic_type, "not a decimal") from exc
    if not value.is_finite():
        raise _fail(name, raw, semantic_type, "not finite")
    return value


def _to_bool(raw: str, semantic_type: SemanticType, name: str) -> bool:
    text = raw.strip().lower()
    if text == "true":
        return True
    if text == "false":
        return False
    raise _fail(name, raw, semantic_type, "expected 'true' or 'false'")


def _to_char(raw: str, semantic_type: SemanticType, name: str) -> str:
    if len(raw) != 1:
        raise _fail(name, raw, semantic_type, "expected exactly one character")
    return raw


def _to_datetime(
    raw: str, semantic_type: SemanticType, name: str, formats: Sequence[str] = ()
) -> datetime.datetime:
    text = raw.strip()
    try:
        return datetime.datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in formats:
        try:
            return datetime.datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise _fail(name, raw, semantic_type, "unrecognised date/time")


def _to_date(raw: str, semantic_type: SemanticType, name: str, formats: Sequence[str] = ()) -> datetime.date:
    try:
        return datetime.date.fromisoformat(raw.strip())
    except ValueError:
        return _to_datetime(raw, semantic_type, name, formats).date()


_Converter = Callable[[str, SemanticType, str], Any]

_CONVERTERS: dict[SemanticType, _Converter] = {
    SemanticType.STRING: lambda raw, _t, _n: raw,
    **{t: _to_integer for t in INTEGER_RANGES},
    SemanticType.FLOAT32: _to_float,
    SemanticType.FLOAT64: _to_float,
    SemanticType.DECIMAL: _to_decimal,
    SemanticType.BOOLEAN: _to_bool,
    SemanticType.CHAR: _to_char,
}


def convert_operand(
    raw: str,
    semantic_type: SemanticType,
    name: str,
    *,
    datetime_formats: Sequence[str] = (),
) -> Any:
    """Convert a clause's textual value to *semantic_type*.

    Raises:
        ValueConversionError: naming the clause property and raw value.
    """
    if semantic_type is SemanticType.DATETIME:
        return _to_datetime(raw, semantic_type, name, datetime_formats)
    if semantic_type is SemanticType.DATE:
        return _to_date(raw, semantic_type, name, datetime_formats)
    return _CONVERTERS[semantic_type](raw, semantic_type, name)


def normalize_live(
    value: Any,
    semantic_type: SemanticType,
    name: str,
    *,
    datetime_formats: Sequence[str] = (),
) -> Any:
    """Bring a live (non-None) property value into the comparison domain."""
    if isinstance(value, str) and semantic_type not in (SemanticType.STRING, SemanticType.CHAR):
        return convert_operand(value, semantic_type, name, datetime_formats=datetime_formats)

    if semantic_type is SemanticType.FLOAT32:
        return to_single(float(value))
    if semantic_type is SemanticType.DECIMAL and not isinstance(value, decimal.Decimal):
        return decimal.Decimal(str(value))
    if semantic_type is SemanticType.DATE and isinstance(value, datetime.datetime):
        return value.date()
    if semantic_type in (SemanticType.STRING, SemanticType.CHAR):
        return str(value)
    return value


def align_datetimes(left: Any, right: Any) -> tuple[Any, Any]:
    """Make a naive/aware datetime pair comparable by reading naive as UTC."""
    if isinstance(left, datetime.datetime) and isinstance(right, datetime.datetime):
        left_aware = left.utcoffset() is not None
        right_aware = right.utcoffset() is not None
        if left_aware and not right_aware:
            right = right.replace(tzinfo=datetime.timezone.utc)
        elif right_aware and not left_aware:
            left = left.replace(tzinfo=datetime.timezone.utc)
    return left, right
