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
"""Outbound port: the repository contract shared by client and server code."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from flyquery.data.filter import QueryFilter
    from flyquery.data.projection import FilterResult

T = TypeVar("T")
ID = TypeVar("ID")


@runtime_checkable
class RepositoryPort(Protocol[T, ID]):
    """Data-access contract implemented by every store adapter.

    ``get`` loads every candidate from the store and evaluates the filter
    in memory; no part of the filter is pushed down to the store.
    """

    async def get_all(self) -> list[T]: ...

    async def get(self, query_filter: QueryFilter) -> FilterResult[T]: ...

    async def get_by_id(self, id: ID) -> T | None: ...

    async def insert(self, entity: T) -> T: ...

    async def update(self, entity: T) -> T: ...

    async def delete(self, entity: T) -> bool: ...

    async def delete_by_id(self, id: ID) -> bool: ...
