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
"""Domain exceptions for query filter evaluation and the store collaborators.

Filter errors are synchronous failures of the whole evaluation call: a
single malformed clause fails the query rather than being skipped.
"""

from __future__ import annotations

from typing import Any

from flyquery.kernel.exceptions import (
    ConflictException,
    InfrastructureException,
    InvalidRequestException,
    ResourceNotFoundException,
)


class QueryFilterException(InvalidRequestException):
    """Base exception for an invalid query filter."""


class UnknownPropertyError(QueryFilterException):
    """A clause, include list, or order-by names a property the entity lacks."""

    def __init__(self, entity_name: str, property_name: str, *, role: str = "filter") -> None:
        self.entity_name = entity_name
        self.property_name = property_name
        super().__init__(
            f"{entity_name} has no property named '{property_name}' ({role})",
            code="UNKNOWN_PROPERTY",
            context={"entity": entity_name, "property": property_name, "role": role},
        )


class UnsupportedOperatorError(QueryFilterException):
    """The operator is not valid for the resolved property's semantic type."""

    def __init__(self, entity_name: str, property_name: str, operator: Any, type_name: str) -> None:
        self.entity_name = entity_name
        self.property_name = property_name
        self.operator = operator
        super().__init__(
            f"Operator {getattr(operator, 'value', operator)} is not supported for "
            f"{entity_name}.{property_name} of type {type_name}",
            code="UNSUPPORTED_OPERATOR",
            context={
                "entity": entity_name,
                "property": property_name,
                "operator": getattr(operator, "value", str(operator)),
                "type": type_name,
            },
        )


class ValueConversionError(QueryFilterException):
    """The clause's textual value cannot be converted to the property's type."""

    def __init__(self, property_name: str, raw_value: Any, type_name: str, reason: str = "") -> None:
        self.property_name = property_name
        self.raw_value = raw_value
        detail = f": {reason}" if reason else ""
        super().__init__(
            f"Cannot convert {raw_value!r} for property '{property_name}' to {type_name}{detail}",
            code="VALUE_CONVERSION",
            context={"property": property_name, "value": raw_value, "type": type_name},
        )


class EntityNotFoundError(ResourceNotFoundException):
    """An update targeted an entity the store does not hold."""

    def __init__(self, entity_name: str, entity_id: Any) -> None:
        self.entity_name = entity_name
        self.entity_id = entity_id
        super().__init__(
            f"{entity_name} with id {entity_id!r} not found",
            code="ENTITY_NOT_FOUND",
            context={"entity": entity_name, "id": entity_id},
        )


class StoreAccessError(InfrastructureException):
    """The backing store failed while supplying or persisting entities.

    Propagated unchanged by the filter engine; retrying is the caller's call.
    """

    def __init__(self, entity_name: str, operation: str, detail: str, cause: Exception | None = None) -> None:
        self.entity_name = entity_name
        self.operation = operation
        super().__init__(
            f"[{entity_name}] {operation} failed: {detail}",
            code="STORE_ACCESS",
            context={"entity": entity_name, "operation": operation},
        )
        if cause is not None:
            self.__cause__ = cause


class DuplicateEntityError(ConflictException):
    """An insert reused an identifier the store already holds."""

    def __init__(self, entity_name: str, entity_id: Any) -> None:
        self.entity_name = entity_name
        self.entity_id = entity_id
        super().__init__(
            f"{entity_name} with id {entity_id!r} already exists",
            code="DUPLICATE_ENTITY",
            context={"entity": entity_name, "id": entity_id},
        )
