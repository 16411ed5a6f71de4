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
"""Tests for InMemoryRepository."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from flyquery.config.properties.query import QueryFilterProperties
from flyquery.data.adapters.memory import InMemoryRepository
from flyquery.data.exceptions import DuplicateEntityError, EntityNotFoundError, UnknownPropertyError
from flyquery.data.filter import QueryFilter
from flyquery.data.types import FilterOperator


@dataclass
class Book:
    id: int
    title: str
    year: int


@pytest.fixture
def repo() -> InMemoryRepository[Book]:
    return InMemoryRepository(
        Book,
        [Book(1, "Dune", 1965), Book(2, "Emma", 1815), Book(3, "Ubik", 1969)],
    )


class TestInMemoryRepository:
    @pytest.mark.asyncio
    async def test_get_all_in_insertion_order(self, repo: InMemoryRepository[Book]) -> None:
        assert [b.id for b in await repo.get_all()] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_get_filters(self, repo: InMemoryRepository[Book]) -> None:
        query = QueryFilter().where("year", FilterOperator.GREATER_THAN, "1900").order_by("title", descending=True)
        result = await repo.get(query)
        assert [b.title for b in result] == ["Ubik", "Dune"]

    @pytest.mark.asyncio
    async def test_get_propagates_query_errors(self, repo: InMemoryRepository[Book]) -> None:
        with pytest.raises(UnknownPropertyError):
            await repo.get(QueryFilter().where("author", value="x"))

    @pytest.mark.asyncio
    async def test_get_uses_configured_properties(self) -> None:
        repo = InMemoryRepository(Book, [Book(1, "Dune", 1965)], properties=QueryFilterProperties(strict_include=False))
        result = await repo.get(QueryFilter().include("author", "title"))
        assert result.selected_properties == ("title",)

    @pytest.mark.asyncio
    async def test_get_by_id(self, repo: InMemoryRepository[Book]) -> None:
        assert (await repo.get_by_id(2)).title == "Emma"
        assert await repo.get_by_id(99) is None

    @pytest.mark.asyncio
    async def test_insert(self, repo: InMemoryRepository[Book]) -> None:
        book = Book(4, "Solaris", 1961)
        assert await repo.insert(book) is book
        assert await repo.count() == 4

    @pytest.mark.asyncio
    async def test_insert_duplicate_id(self, repo: InMemoryRepository[Book]) -> None:
        with pytest.raises(DuplicateEntityError):
            await repo.insert(Book(1, "Other", 2000))

    @pytest.mark.asyncio
    async def test_update_replaces_in_place(self, repo: InMemoryRepository[Book]) -> None:
        await repo.update(Book(2, "Emma (revised)", 1816))
        assert [b.title for b in await repo.get_all()] == ["Dune", "Emma (revised)", "Ubik"]

    @pytest.mark.asyncio
    async def test_update_missing(self, repo: InMemoryRepository[Book]) -> None:
        with pytest.raises(EntityNotFoundError):
            await repo.update(Book(42, "Nope", 2000))

    @pytest.mark.asyncio
    async def test_delete(self, repo: InMemoryRepository[Book]) -> None:
        book = await repo.get_by_id(1)
        assert await repo.delete(book) is True
        assert await repo.delete(book) is False
        assert await repo.count() == 2

    @pytest.mark.asyncio
    async def test_delete_by_id(self, repo: InMemoryRepository[Book]) -> None:
        assert await repo.delete_by_id(3) is True
        assert await repo.delete_by_id(3) is False

    def test_unknown_id_property(self) -> None:
        with pytest.raises(UnknownPropertyError):
            InMemoryRepository(Book, id_property="isbn")

    def test_duplicate_seed_items(self) -> None:
        with pytest.raises(DuplicateEntityError):
            InMemoryRepository(Book, [Book(1, "A", 1), Book(1, "B", 2)])
