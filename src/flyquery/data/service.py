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
"""API-facing service that wraps repository outcomes in response envelopes.

Library errors (an invalid filter, a missing entity, a failing store) become
``success=False`` envelopes carrying the error message.  Anything that is
not a :class:`FlyQueryException` is a programming error and propagates.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import Any, Generic, TypeVar

from flyquery.data.filter import QueryFilter
from flyquery.data.ports.outbound import RepositoryPort
from flyquery.data.response import APIListResponse, APIResponse
from flyquery.kernel.exceptions import FlyQueryException, InfrastructureException

_logger = logging.getLogger(__name__)

T = TypeVar("T")
ID = TypeVar("ID")
R = TypeVar("R")


class RepositoryService(Generic[T, ID]):
    """Exposes a :class:`RepositoryPort` through the response envelopes."""

    def __init__(self, repository: RepositoryPort[T, ID]) -> None:
        self._repository = repository

    @property
    def repository(self) -> RepositoryPort[T, ID]:
        return self._repository

    async def _call(self, operation: str, awaitable: Awaitable[R]) -> R:
        try:
            return await awaitable
        except FlyQueryException as exc:
            log = _logger.error if isinstance(exc, InfrastructureException) else _logger.warning
            log("%s failed [%s]: %s", operation, exc.code, exc)
            raise

    async def get_all(self) -> APIListResponse[T]:
        try:
            items = await self._call("get_all", self._repository.get_all())
        except FlyQueryException as exc:
            return APIListResponse.from_exception(exc)
        return APIListResponse.ok(items)

    async def get(self, query_filter: QueryFilter) -> APIListResponse[Any]:
        """Evaluate *query_filter*; an invalid filter yields ``success=False``.

        When the filter names include properties, ``data`` holds one dict per
        match restricted to those properties instead of the entities.
        """
        try:
            result = await self._call("get", self._repository.get(query_filter))
        except FlyQueryException as exc:
            return APIListResponse.from_exception(exc)
        if result.is_projected:
            return APIListResponse.ok(result.rows())
        return APIListResponse.ok(list(result))

    async def get_by_id(self, id: ID) -> APIResponse[T]:
        """Look up one entity; a miss is a successful response with no data."""
        return await self._single("get_by_id", self._repository.get_by_id(id))

    async def insert(self, entity: T) -> APIResponse[T]:
        return await self._single("insert", self._repository.insert(entity))

    async def update(self, entity: T) -> APIResponse[T]:
        return await self._single("update", self._repository.update(entity))

    async def delete(self, entity: T) -> APIResponse[bool]:
        return await self._single("delete", self._repository.delete(entity))

    async def delete_by_id(self, id: ID) -> APIResponse[bool]:
        return await self._single("delete_by_id", self._repository.delete_by_id(id))

    async def _single(self, operation: str, awaitable: Awaitable[Any]) -> APIResponse[Any]:
        try:
            value = await self._call(operation, awaitable)
        except FlyQueryException as exc:
            return APIResponse.from_exception(exc)
        return APIResponse.ok(value)
