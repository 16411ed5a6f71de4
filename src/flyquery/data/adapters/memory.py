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
"""In-memory repository adapter backed by a plain list."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from flyquery.config.properties.query import QueryFilterProperties
from flyquery.data.entity import EntityMetadata, entity_metadata
from flyquery.data.exceptions import DuplicateEntityError, EntityNotFoundError
from flyquery.data.filter import QueryFilter
from flyquery.data.projection import FilterResult

T = TypeVar("T")


class InMemoryRepository(Generic[T]):
    """List-backed repository keyed by one identifier property.

    Suitable for development, testing, and client-side caches.  Entities
    are held by reference in insertion order; ``get`` filters a snapshot.
    Concurrent mutation while a filter runs must be serialised by the caller.
    """

    def __init__(
        self,
        entity_type: type[T],
        items: Iterable[T] = (),
        *,
        id_property: str = "id",
        properties: QueryFilterProperties | None = None,
    ) -> None:
        self._entity_type = entity_type
        self._metadata: EntityMetadata = entity_metadata(entity_type)
        self._id = self._metadata.require(id_property, role="id")
        self._properties = properties or QueryFilterProperties()
        self._items: list[T] = []
        for item in items:
            self._add(item)

    def _add(self, entity: T) -> None:
        entity_id = self._id.read(entity)
        if self._index_of(entity_id) is not None:
            raise DuplicateEntityError(self._metadata.name, entity_id)
        self._items.append(entity)

    def _index_of(self, entity_id: Any) -> int | None:
        for index, item in enumerate(self._items):
            if self._id.read(item) == entity_id:
                return index
        return None

    async def get_all(self) -> list[T]:
        """Return every entity in insertion order."""
        return list(self._items)

    async def get(self, query_filter: QueryFilter) -> FilterResult[T]:
        """Evaluate *query_filter* against a snapshot of the store."""
        return query_filter.apply(list(self._items), self._metadata, properties=self._properties)

    async def get_by_id(self, id: Any) -> T | None:
        index = self._index_of(id)
        return self._items[index] if index is not None else None

    async def insert(self, entity: T) -> T:
        self._add(entity)
        return entity

    async def update(self, entity: T) -> T:
        """Replace the stored entity sharing *entity*'s identifier."""
        entity_id = self._id.read(entity)
        index = self._index_of(entity_id)
        if index is None:
            raise EntityNotFoundError(self._metadata.name, entity_id)
        self._items[index] = entity
        return entity

    async def delete(self, entity: T) -> bool:
        return await self.delete_by_id(self._id.read(entity))

    async def delete_by_id(self, id: Any) -> bool:
        """Remove the entity with *id*. Returns True if it existed."""
        index = self._index_of(id)
        if index is None:
            return False
        del self._items[index]
        return True

    async def count(self) -> int:
        return len(self._items)
