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
"""Async SQLAlchemy 2.0 repository adapter.

The store supplies candidates; filtering, projection and ordering run in
memory over the fully loaded table.  Nothing from a :class:`QueryFilter`
is translated into SQL.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Generic, TypeVar, cast, get_args, get_origin

import sqlalchemy as sa
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from flyquery.config.properties.query import QueryFilterProperties
from flyquery.data.entity import EntityMetadata, entity_metadata
from flyquery.data.exceptions import EntityNotFoundError, StoreAccessError
from flyquery.data.filter import QueryFilter
from flyquery.data.projection import FilterResult

logger = logging.getLogger(__name__)

T = TypeVar("T")
ID = TypeVar("ID")


class SqlAlchemyRepository(Generic[T, ID]):
    """Repository over one SQLAlchemy mapped class.

    Type Parameters:
        T: The mapped entity class.
        ID: The primary key type.

    Usage::

        class PersonRepository(SqlAlchemyRepository[Person, int]):
            pass

        repo = PersonRepository(session=session)
        adults = await repo.get(QueryFilter().where("age", "GreaterThanOrEqual", "18"))
    """

    _entity_type: type | None = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        for base in getattr(cls, "__orig_bases__", []):
            if get_origin(base) is SqlAlchemyRepository:
                args = get_args(base)
                if args and not isinstance(args[0], TypeVar):
                    cls._entity_type = args[0]
                break

    def __init__(
        self,
        model: type[T] | None = None,
        session: AsyncSession | None = None,
        *,
        properties: QueryFilterProperties | None = None,
    ) -> None:
        resolved = model or getattr(type(self), "_entity_type", None)
        if resolved is None:
            raise TypeError(
                f"{type(self).__name__} requires either SqlAlchemyRepository[Entity, ID] declaration "
                "or explicit model argument"
            )
        self._model: type[T] = cast(type[T], resolved)
        self._session = session
        self._properties = properties or QueryFilterProperties()
        self._metadata: EntityMetadata = entity_metadata(self._model)
        self._pk_name: str = sa.inspect(self._model).primary_key[0].key

    def _require_session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError(f"No AsyncSession configured for {type(self).__name__}")
        return self._session

    @contextmanager
    def _store_errors(self, operation: str) -> Iterator[None]:
        """Re-raise driver exceptions as :class:`StoreAccessError`."""
        try:
            yield
        except SQLAlchemyError as exc:
            logger.error("SQL %s failed for %s: %s", operation, self._metadata.name, type(exc).__name__)
            raise StoreAccessError(
                self._metadata.name,
                operation,
                "Database operation failed.",
                cause=exc,
            ) from exc

    async def get_all(self) -> list[T]:
        """Load every row of the mapped table."""
        session = self._require_session()
        with self._store_errors("get_all"):
            result = await session.execute(select(self._model))
            return list(result.scalars().all())

    async def get(self, query_filter: QueryFilter) -> FilterResult[T]:
        """Load every row, then evaluate *query_filter* in memory."""
        candidates = await self.get_all()
        return query_filter.apply(candidates, self._metadata, properties=self._properties)

    async def get_by_id(self, id: ID) -> T | None:
        session = self._require_session()
        with self._store_errors("get_by_id"):
            return await session.get(self._model, id)

    async def insert(self, entity: T) -> T:
        session = self._require_session()
        with self._store_errors("insert"):
            session.add(entity)
            await session.flush()
            await session.refresh(entity)
        return entity

    async def update(self, entity: T) -> T:
        """Merge *entity* over the stored row with the same primary key."""
        session = self._require_session()
        entity_id = getattr(entity, self._pk_name)
        with self._store_errors("update"):
            if await session.get(self._model, entity_id) is None:
                raise EntityNotFoundError(self._metadata.name, entity_id)
            merged = await session.merge(entity)
            await session.flush()
        return merged

    async def delete(self, entity: T) -> bool:
        return await self.delete_by_id(getattr(entity, self._pk_name))

    async def delete_by_id(self, id: ID) -> bool:
        """Delete the row with *id*. Returns True if it existed."""
        session = self._require_session()
        with self._store_errors("delete"):
            entity = await session.get(self._model, id)
            if entity is None:
                return False
            await session.delete(entity)
            await session.flush()
        return True
