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
"""Projection: the SELECT column list that accompanies a filtered result.

Entities stay full in-memory objects; the include list travels alongside
them as :attr:`FilterResult.selected_properties`, and :meth:`FilterResult.rows`
materialises keyed records pruned to those columns when a caller needs them.

Projection types declare the column list as a Protocol::

    @projection
    class PersonSummary(Protocol):
        Name: str
        Age: int

    query = QueryFilter().include_projection(PersonSummary)
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, get_type_hints, overload

from flyquery.data.entity import EntityMetadata
from flyquery.data.exceptions import UnknownPropertyError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_PROJECTION_MARKER = "__flyquery_projection__"


def projection(cls: type) -> type:
    """Mark a Protocol class as a projection interface."""
    setattr(cls, _PROJECTION_MARKER, True)
    return cls


def is_projection(cls: type) -> bool:
    """Check if a type is marked as a projection."""
    return getattr(cls, _PROJECTION_MARKER, False) is True


def projection_fields(cls: type) -> list[str]:
    """Get the field names declared on a projection type."""
    hints = get_type_hints(cls)
    return [name for name in hints if not name.startswith("_")]


def select_properties(
    metadata: EntityMetadata,
    names: Sequence[str],
    *,
    strict: bool = True,
) -> tuple[str, ...]:
    """Validate an include list against the entity, dropping duplicates.

    Unknown names raise :class:`UnknownPropertyError` when *strict*, and are
    logged and skipped otherwise.
    """
    selected: list[str] = []
    for name in names:
        if name in metadata:
            if name not in selected:
                selected.append(name)
        elif strict:
            raise UnknownPropertyError(metadata.name, name, role="include")
        else:
            logger.warning("Ignoring unknown include property %s.%s", metadata.name, name)
    return tuple(selected)


@dataclass(frozen=True)
class FilterResult(Sequence[T], Generic[T]):
    """Ordered entities matching a filter, plus the selected column list.

    Attributes:
        items: Matching entities in result order.
        selected_properties: Included column names; empty means all columns.
        metadata: Capability table of the entity type, used by :meth:`rows`.
    """

    items: list[T]
    selected_properties: tuple[str, ...] = ()
    metadata: EntityMetadata | None = None

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> list[T]: ...

    def __getitem__(self, index: int | slice) -> T | list[T]:
        return self.items[index]

    @property
    def is_projected(self) -> bool:
        return bool(self.selected_properties)

    @property
    def columns(self) -> tuple[str, ...]:
        """Selected columns, or every entity property when nothing is selected."""
        if self.selected_properties or self.metadata is None:
            return self.selected_properties
        return tuple(self.metadata)

    def rows(self) -> list[dict[str, Any]]:
        """Materialise each entity as a dict holding only :attr:`columns`."""
        if self.metadata is None:
            return [{} for _ in self.items]
        accessors = [self.metadata.properties[name] for name in self.columns]
        return [{a.name: a.read(entity) for a in accessors} for entity in self.items]
