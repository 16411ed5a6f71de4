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
"""Tests for SqlAlchemyRepository over an in-memory SQLite database."""

import datetime

import pytest
from sqlalchemy import Date, Float, Integer, String
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from flyquery.data.adapters.sqlalchemy import SqlAlchemyRepository
from flyquery.data.exceptions import (
    EntityNotFoundError,
    StoreAccessError,
    UnsupportedOperatorError,
)
from flyquery.data.filter import QueryFilter
from flyquery.data.types import FilterOperator


class Base(DeclarativeBase):
    pass


class UnmigratedBase(DeclarativeBase):
    pass


class Item(Base):
    __tablename__ = "items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    price: Mapped[float] = mapped_column(Float, default=0.0)
    released: Mapped[datetime.date | None] = mapped_column(Date, nullable=True)


class Ghost(UnmigratedBase):
    __tablename__ = "ghosts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)


class ItemRepository(SqlAlchemyRepository[Item, int]):
    pass


@pytest.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine):
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
async def repo(session: AsyncSession) -> ItemRepository:
    repo = ItemRepository(session=session)
    await repo.insert(Item(name="Widget", price=9.99, released=datetime.date(2023, 5, 1)))
    await repo.insert(Item(name="bolt", price=0.25, released=datetime.date(2021, 1, 1)))
    await repo.insert(Item(name="Anchor", price=3.5))
    return repo


class TestConstruction:
    def test_model_from_generic_declaration(self) -> None:
        assert ItemRepository()._model is Item

    def test_explicit_model(self) -> None:
        assert SqlAlchemyRepository(Item)._model is Item

    def test_model_required(self) -> None:
        with pytest.raises(TypeError):
            SqlAlchemyRepository()

    @pytest.mark.asyncio
    async def test_session_required(self) -> None:
        with pytest.raises(RuntimeError):
            await ItemRepository().get_all()


class TestCrud:
    @pytest.mark.asyncio
    async def test_insert_assigns_id(self, repo: ItemRepository) -> None:
        saved = await repo.insert(Item(name="Gear", price=1.0))
        assert saved.id is not None
        assert (await repo.get_by_id(saved.id)).name == "Gear"

    @pytest.mark.asyncio
    async def test_get_all(self, repo: ItemRepository) -> None:
        assert sorted(i.name for i in await repo.get_all()) == ["Anchor", "Widget", "bolt"]

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, repo: ItemRepository) -> None:
        assert await repo.get_by_id(999) is None

    @pytest.mark.asyncio
    async def test_update(self, repo: ItemRepository) -> None:
        widget = next(i for i in await repo.get_all() if i.name == "Widget")
        updated = await repo.update(Item(id=widget.id, name="Widget", price=12.0))
        assert updated.price == 12.0
        assert (await repo.get_by_id(widget.id)).price == 12.0

    @pytest.mark.asyncio
    async def test_update_missing(self, repo: ItemRepository) -> None:
        with pytest.raises(EntityNotFoundError):
            await repo.update(Item(id=999, name="Nope", price=1.0))

    @pytest.mark.asyncio
    async def test_delete(self, repo: ItemRepository) -> None:
        anchor = next(i for i in await repo.get_all() if i.name == "Anchor")
        assert await repo.delete(anchor) is True
        assert await repo.get_by_id(anchor.id) is None
        assert await repo.delete_by_id(anchor.id) is False


class TestGet:
    @pytest.mark.asyncio
    async def test_filters_in_memory(self, repo: ItemRepository) -> None:
        query = QueryFilter().where("price", FilterOperator.LESS_THAN, "5").order_by("name")
        result = await repo.get(query)
        assert [i.name for i in result] == ["Anchor", "bolt"]

    @pytest.mark.asyncio
    async def test_case_insensitive_text(self, repo: ItemRepository) -> None:
        result = await repo.get(QueryFilter().where("name", FilterOperator.CONTAINS, "OL"))
        assert [i.name for i in result] == ["bolt"]

    @pytest.mark.asyncio
    async def test_date_column_with_missing_values(self, repo: ItemRepository) -> None:
        query = QueryFilter().where("released", FilterOperator.GREATER_THAN, "2022-01-01")
        assert [i.name for i in await repo.get(query)] == ["Widget"]

    @pytest.mark.asyncio
    async def test_projection(self, repo: ItemRepository) -> None:
        result = await repo.get(QueryFilter().include("name").order_by("price", descending=True))
        assert result.rows() == [{"name": "Widget"}, {"name": "Anchor"}, {"name": "bolt"}]

    @pytest.mark.asyncio
    async def test_invalid_filter(self, repo: ItemRepository) -> None:
        with pytest.raises(UnsupportedOperatorError):
            await repo.get(QueryFilter().where("price", FilterOperator.STARTS_WITH, "9"))


class TestStoreErrors:
    @pytest.mark.asyncio
    async def test_driver_errors_are_wrapped(self, session: AsyncSession) -> None:
        repo = SqlAlchemyRepository(Ghost, session)
        with pytest.raises(StoreAccessError) as exc_info:
            await repo.get_all()
        assert exc_info.value.code == "STORE_ACCESS"
        assert exc_info.value.operation == "get_all"
        assert exc_info.value.__cause__ is not None

    @pytest.mark.asyncio
    async def test_get_propagates_store_errors(self, session: AsyncSession) -> None:
        repo = SqlAlchemyRepository(Ghost, session)
        with pytest.raises(StoreAccessError):
            await repo.get(QueryFilter())
