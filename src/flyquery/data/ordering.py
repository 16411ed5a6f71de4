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
"""Stable single-property ordering of filtered entities.

Sort keys go through the same live-value normalisation as filter clauses,
so text-backed rows order numerically or chronologically by their
semantic type.
"""

from __future__ import annotations

import datetime
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from flyquery.data.conversion import normalize_live
from flyquery.data.entity import EntityMetadata, PropertyAccessor
from flyquery.data.exceptions import UnsupportedOperatorError
from flyquery.data.types import SemanticType

T = TypeVar("T")


def _sort_key(
    accessor: PropertyAccessor, datetime_formats: Sequence[str]
) -> Callable[[Any], tuple[bool, Any]]:
    semantic_type = accessor.semantic_type
    as_single_zone = semantic_type is SemanticType.DATETIME

    def key(entity: Any) -> tuple[bool, Any]:
        value = accessor.read(entity)
        if value is None:
            return (False, 0)
        if semantic_type is not None:
            value = normalize_live(value, semantic_type, accessor.name, datetime_formats=datetime_formats)
        if as_single_zone and isinstance(value, datetime.datetime) and value.utcoffset() is None:
            value = value.replace(tzinfo=datetime.timezone.utc)
        return (True, value)

    return key


def order_entities(
    items: Sequence[T],
    metadata: EntityMetadata,
    property_name: str,
    *,
    descending: bool = False,
    datetime_formats: Sequence[str] = (),
) -> list[T]:
    """Sort *items* by one property using its natural ordering.

    Missing (``None``) values sort first ascending and last descending.
    Entities with equal keys keep their input order in both directions.

    Raises:
        UnknownPropertyError: *property_name* is not a property of the entity.
        UnsupportedOperatorError: The property's values are not mutually orderable.
        ValueConversionError: A text-backed value does not parse as the property type.
    """
    accessor = metadata.require(property_name, role="order_by")
    try:
        return sorted(items, key=_sort_key(accessor, datetime_formats), reverse=descending)
    except TypeError as exc:
        raise UnsupportedOperatorError(metadata.name, property_name, "OrderBy", accessor.type_name) from exc
