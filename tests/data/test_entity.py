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
"""Tests for entity introspection and the metadata registry."""

from __future__ import annotations

import datetime
import decimal
from dataclasses import dataclass
from typing import ClassVar, Optional

import pytest
from pydantic import BaseModel
from sqlalchemy import BigInteger, Boolean, Date, DateTime, Float, Integer, Numeric, SmallInteger, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from flyquery.data.entity import (
    EntityMetadata,
    classify,
    clear_entity_registry,
    entity_metadata,
    register_entity,
)
from flyquery.data.exceptions import UnknownPropertyError
from flyquery.data.types import Byte, Char, Float32, Int16, SemanticType, UInt32


@dataclass
class Reading:
    sensor: str
    channel: Byte
    sample: Int16
    value: Float32
    flags: UInt32
    grade: Char
    taken_at: datetime.datetime
    taken_on: datetime.date
    amount: decimal.Decimal
    valid: bool
    note: Optional[str] = None
    tags: list[str] | None = None


class Customer(BaseModel):
    name: str
    age: int
    code: Int16 = 0
    balance: float = 0.0


class Account:
    kind: ClassVar[str] = "account"
    owner: str
    _secret: str

    def __init__(self, owner: str, opened: datetime.date) -> None:
        self.owner = owner
        self._opened = opened

    @property
    def opened(self) -> datetime.date:
        return self._opened


class _Base(DeclarativeBase):
    pass


class Ledger(_Base):
    __tablename__ = "ledgers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    small: Mapped[int] = mapped_column(SmallInteger)
    big: Mapped[int] = mapped_column(BigInteger)
    label: Mapped[str] = mapped_column(String(50))
    active: Mapped[bool] = mapped_column(Boolean)
    ratio: Mapped[float] = mapped_column(Float)
    total: Mapped[decimal.Decimal] = mapped_column(Numeric(10, 2))
    approx: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False))
    booked_at: Mapped[datetime.datetime] = mapped_column(DateTime)
    booked_on: Mapped[datetime.date] = mapped_column(Date)


@pytest.fixture(autouse=True)
def _fresh_registry():
    clear_entity_registry()
    yield
    clear_entity_registry()


def _types(metadata: EntityMetadata) -> dict[str, SemanticType | None]:
    return {name: metadata.properties[name].semantic_type for name in metadata}


class TestClassify:
    def test_builtin_types(self) -> None:
        assert classify(str) is SemanticType.STRING
        assert classify(int) is SemanticType.INT64
        assert classify(float) is SemanticType.FLOAT64
        assert classify(bool) is SemanticType.BOOLEAN
        assert classify(decimal.Decimal) is SemanticType.DECIMAL
        assert classify(datetime.datetime) is SemanticType.DATETIME
        assert classify(datetime.date) is SemanticType.DATE

    def test_markers(self) -> None:
        assert classify(Int16) is SemanticType.INT16
        assert classify(Byte) is SemanticType.BYTE
        assert classify(Char) is SemanticType.CHAR

    def test_optional_is_unwrapped(self) -> None:
        assert classify(Optional[int]) is SemanticType.INT64
        assert classify(datetime.date | None) is SemanticType.DATE
        assert classify(Optional[Int16]) is SemanticType.INT16

    def test_mapped_is_unwrapped(self) -> None:
        assert classify(Mapped[str]) is SemanticType.STRING

    def test_unsupported(self) -> None:
        assert classify(list[str]) is None
        assert classify(int | str) is None
        assert classify(object) is None
        assert classify(None) is None


class TestDataclassEntity:
    def test_field_types(self) -> None:
        assert _types(EntityMetadata.build(Reading)) == {
            "sensor": SemanticType.STRING,
            "channel": SemanticType.BYTE,
            "sample": SemanticType.INT16,
            "value": SemanticType.FLOAT32,
            "flags": SemanticType.UINT32,
            "grade": SemanticType.CHAR,
            "taken_at": SemanticType.DATETIME,
            "taken_on": SemanticType.DATE,
            "amount": SemanticType.DECIMAL,
            "valid": SemanticType.BOOLEAN,
            "note": SemanticType.STRING,
            "tags": None,
        }

    def test_name_and_reading(self) -> None:
        metadata = EntityMetadata.build(Reading)
        reading = Reading(
            "s1", 3, 7, 1.5, 9, "A", datetime.datetime(2024, 1, 1), datetime.date(2024, 1, 1),
            decimal.Decimal("2.50"), True,
        )
        assert metadata.name == "Reading"
        assert metadata.require("sensor").read(reading) == "s1"
        assert metadata.properties["tags"].type_name == "object"


class TestPydanticEntity:
    def test_model_fields(self) -> None:
        assert _types(EntityMetadata.build(Customer)) == {
            "name": SemanticType.STRING,
            "age": SemanticType.INT64,
            "code": SemanticType.INT16,
            "balance": SemanticType.FLOAT64,
        }


class TestPlainClassEntity:
    def test_annotations_and_properties(self) -> None:
        metadata = EntityMetadata.build(Account)
        assert _types(metadata) == {"owner": SemanticType.STRING, "opened": SemanticType.DATE}

    def test_property_getter_reads(self) -> None:
        account = Account("ann", datetime.date(2020, 5, 1))
        assert EntityMetadata.build(Account).require("opened").read(account) == datetime.date(2020, 5, 1)


class TestSqlAlchemyEntity:
    def test_column_types(self) -> None:
        assert _types(EntityMetadata.build(Ledger)) == {
            "id": SemanticType.INT32,
            "small": SemanticType.INT16,
            "big": SemanticType.INT64,
            "label": SemanticType.STRING,
            "active": SemanticType.BOOLEAN,
            "ratio": SemanticType.FLOAT64,
            "total": SemanticType.DECIMAL,
            "approx": SemanticType.FLOAT64,
            "booked_at": SemanticType.DATETIME,
            "booked_on": SemanticType.DATE,
        }


class TestRequire:
    def test_unknown_property(self) -> None:
        metadata = EntityMetadata.build(Customer)
        with pytest.raises(UnknownPropertyError) as exc_info:
            metadata.require("email", role="order_by")
        assert exc_info.value.context == {"entity": "Customer", "property": "email", "role": "order_by"}

    def test_lookup_is_case_sensitive(self) -> None:
        metadata = EntityMetadata.build(Customer)
        assert "name" in metadata
        assert "Name" not in metadata
        assert metadata.get("Name") is None


class TestFromSchema:
    def test_mapping_rows(self) -> None:
        metadata = EntityMetadata.from_schema(
            "Row", {"id": SemanticType.INT32, "city": SemanticType.STRING}, mapping=True
        )
        row = {"id": 4, "city": "Oslo"}
        assert metadata.require("city").read(row) == "Oslo"
        assert list(metadata) == ["id", "city"]

    def test_attribute_rows(self) -> None:
        metadata = EntityMetadata.from_schema("Customer", {"name": SemanticType.STRING})
        assert metadata.require("name").read(Customer(name="x", age=1)) == "x"


class TestRegistry:
    def test_metadata_is_cached(self) -> None:
        assert entity_metadata(Reading) is entity_metadata(Reading)

    def test_register_overrides_introspection(self) -> None:
        custom = EntityMetadata.from_schema("Reading", {"sensor": SemanticType.STRING})
        assert register_entity(Reading, custom) is custom
        assert entity_metadata(Reading) is custom

    def test_register_without_metadata_builds(self) -> None:
        metadata = register_entity(Customer)
        assert "age" in metadata
        assert entity_metadata(Customer) is metadata

    def test_clear(self) -> None:
        first = entity_metadata(Reading)
        clear_entity_registry()
        assert entity_metadata(Reading) is not first
