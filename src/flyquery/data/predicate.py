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
"""Predicate compiler: turns filter clauses into per-entity boolean tests.

Compilation resolves everything that does not depend on a particular
entity up front: the property accessor, the semantic type, the comparison
function, and the converted operand.  The returned predicate only reads
the live value, normalises it, and compares.

Example::

    metadata = entity_metadata(Person)
    test = compile_clauses(
        [
            FilterProperty(name="Age", operator=FilterOperator.GREATER_THAN, value="21"),
            FilterProperty(name="Name", operator=FilterOperator.STARTS_WITH, value="a"),
        ],
        metadata,
    )
    adults_named_a = [p for p in people if test(p)]
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from flyquery.data.conversion import align_datetimes, convert_operand, normalize_live
from flyquery.data.entity import EntityMetadata
from flyquery.data.exceptions import UnsupportedOperatorError
from flyquery.data.types import FilterOperator, SemanticType, supports

if TYPE_CHECKING:
    from flyquery.data.filter import FilterProperty

Predicate = Callable[[Any], bool]

_COMPARATORS: dict[FilterOperator, Callable[[Any, Any], bool]] = {
    FilterOperator.EQUALS: operator.eq,
    FilterOperator.NOT_EQUALS: operator.ne,
    FilterOperator.STARTS_WITH: lambda live, operand: live.startswith(operand),
    FilterOperator.ENDS_WITH: lambda live, operand: live.endswith(operand),
    FilterOperator.CONTAINS: operator.contains,
    FilterOperator.LESS_THAN: operator.lt,
    FilterOperator.GREATER_THAN: operator.gt,
    FilterOperator.LESS_THAN_OR_EQUAL: operator.le,
    FilterOperator.GREATER_THAN_OR_EQUAL: operator.ge,
}


def compile_clause(
    clause: FilterProperty,
    metadata: EntityMetadata,
    *,
    datetime_formats: Sequence[str] = (),
) -> Predicate:
    """Compile one clause into a single-argument predicate.

    Raises:
        UnknownPropertyError: The clause names a property the entity lacks.
        UnsupportedOperatorError: The operator is invalid for the property type.
        ValueConversionError: The clause value does not parse as the property type.
    """
    accessor = metadata.require(clause.name)
    semantic_type = accessor.semantic_type
    op = clause.operator

    if semantic_type is None or not supports(semantic_type, op):
        raise UnsupportedOperatorError(metadata.name, clause.name, op, accessor.type_name)

    compare = _COMPARATORS[op]
    # a missing live value only ever differs from the operand
    on_missing = op is FilterOperator.NOT_EQUALS

    if semantic_type is SemanticType.STRING:
        fold = not clause.case_sensitive
        text_operand = clause.value.lower() if fold else clause.value

        def string_predicate(entity: Any) -> bool:
            live = accessor.read(entity)
            if live is None:
                return on_missing
            text = str(live)
            return compare(text.lower() if fold else text, text_operand)

        return string_predicate

    operand = convert_operand(clause.value, semantic_type, clause.name, datetime_formats=datetime_formats)
    aligns = semantic_type is SemanticType.DATETIME

    def typed_predicate(entity: Any) -> bool:
        live = accessor.read(entity)
        if live is None:
            return on_missing
        live = normalize_live(live, semantic_type, clause.name, datetime_formats=datetime_formats)
        if aligns:
            left, right = align_datetimes(live, operand)
            return compare(left, right)
        return compare(live, operand)

    return typed_predicate


def compile_clauses(
    clauses: Sequence[FilterProperty],
    metadata: EntityMetadata,
    *,
    datetime_formats: Sequence[str] = (),
) -> Predicate:
    """Compile every clause and AND them into one predicate.

    Clauses compile in declaration order, so the first invalid clause is
    the one reported.  An empty clause list yields a predicate that accepts
    every entity.
    """
    predicates = [compile_clause(c, metadata, datetime_formats=datetime_formats) for c in clauses]

    if not predicates:
        return lambda entity: True
    if len(predicates) == 1:
        return predicates[0]

    def conjunction(entity: Any) -> bool:
        # every clause runs so a bad live value surfaces regardless of order
        results = [predicate(entity) for predicate in predicates]
        return all(results)

    return conjunction
