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
"""Semantic property types, filter operators, and the operator-support table.

Entity properties are classified once, when their metadata is built, into
one member of the closed :class:`SemanticType` enum.  Python only has a
single ``int`` and ``float``; fixed-width columns are declared with the
``Annotated`` markers exported here::

    @dataclass
    class Reading:
        sensor: str
        channel: Byte
        sample: Int16
        value: Float32
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated


class SemanticType(str, Enum):
    """Closed set of property types a filter clause can compare against."""

    STRING = "string"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    BYTE = "byte"
    CHAR = "char"
    DATETIME = "datetime"
    DATE = "date"


class FilterOperator(str, Enum):
    """Comparison operator of a single filter clause.

    Declaration order is significant: the ordinal of each member is its
    integer wire encoding.
    """

    EQUALS = "Equals"
    NOT_EQUALS = "NotEquals"
    STARTS_WITH = "StartsWith"
    ENDS_WITH = "EndsWith"
    CONTAINS = "Contains"
    LESS_THAN = "LessThan"
    GREATER_THAN = "GreaterThan"
    LESS_THAN_OR_EQUAL = "LessThanOrEqual"
    GREATER_THAN_OR_EQUAL = "GreaterThanOrEqual"

    @classmethod
    def parse(cls, raw: object) -> FilterOperator:
        """Resolve an operator from its member, name, value, or ordinal."""
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, int) and not isinstance(raw, bool):
            members = list(cls)
            if 0 <= raw < len(members):
                return members[raw]
        elif isinstance(raw, str):
            key = raw.strip().replace("_", "").lower()
            for member in cls:
                if member.value.lower() == key:
                    return member
        raise ValueError(f"Unknown filter operator: {raw!r}")


Int16 = Annotated[int, SemanticType.INT16]
Int32 = Annotated[int, SemanticType.INT32]
Int64 = Annotated[int, SemanticType.INT64]
UInt16 = Annotated[int, SemanticType.UINT16]
UInt32 = Annotated[int, SemanticType.UINT32]
UInt64 = Annotated[int, SemanticType.UINT64]
Byte = Annotated[int, SemanticType.BYTE]
Float32 = Annotated[float, SemanticType.FLOAT32]
Char = Annotated[str, SemanticType.CHAR]

EQUALITY_OPERATORS = frozenset({FilterOperator.EQUALS, FilterOperator.NOT_EQUALS})
TEXT_OPERATORS = frozenset({FilterOperator.STARTS_WITH, FilterOperator.ENDS_WITH, FilterOperator.CONTAINS})
RELATIONAL_OPERATORS = frozenset(
    {
        FilterOperator.LESS_THAN,
        FilterOperator.GREATER_THAN,
        FilterOperator.LESS_THAN_OR_EQUAL,
        FilterOperator.GREATER_THAN_OR_EQUAL,
    }
)

_ORDERED = EQUALITY_OPERATORS | RELATIONAL_OPERATORS

SUPPORTED_OPERATORS: dict[SemanticType, frozenset[FilterOperator]] = {
    SemanticType.STRING: EQUALITY_OPERATORS | TEXT_OPERATORS,
    SemanticType.BOOLEAN: EQUALITY_OPERATORS,
    **{
        t: _ORDERED
        for t in SemanticType
        if t not in (SemanticType.STRING, SemanticType.BOOLEAN)
    },
}


def supports(semantic_type: SemanticType | None, operator: FilterOperator) -> bool:
    """Return True when *operator* is valid for properties of *semantic_type*."""
    if semantic_type is None:
        return False
    return operator in SUPPORTED_OPERATORS[semantic_type]
