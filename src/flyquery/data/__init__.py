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
"""flyquery data: serializable query filters evaluated over loaded collections.

A :class:`QueryFilter` encodes WHERE / SELECT / ORDER BY as plain data so
client and server can share one data-access contract.  Store adapters
implement :class:`RepositoryPort` and evaluate filters in memory:

    - ``InMemoryRepository``: list-backed store.
    - ``SqlAlchemyRepository``: loads through an ``AsyncSession``.
"""

from flyquery.data.adapters.memory import InMemoryRepository
from flyquery.data.adapters.sqlalchemy import SqlAlchemyRepository
from flyquery.data.entity import (
    EntityMetadata,
    PropertyAccessor,
    clear_entity_registry,
    entity_metadata,
    register_entity,
)
from flyquery.data.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    QueryFilterException,
    StoreAccessError,
    UnknownPropertyError,
    UnsupportedOperatorError,
    ValueConversionError,
)
from flyquery.data.filter import FilterProperty, QueryFilter
from flyquery.data.ports.outbound import RepositoryPort
from flyquery.data.predicate import compile_clause, compile_clauses
from flyquery.data.projection import FilterResult, is_projection, projection, projection_fields
from flyquery.data.response import APIListResponse, APIResponse
from flyquery.data.service import RepositoryService
from flyquery.data.types import (
    Byte,
    Char,
    FilterOperator,
    Float32,
    Int16,
    Int32,
    Int64,
    SemanticType,
    UInt16,
    UInt32,
    UInt64,
)

__all__ = [
    # Filter
    "FilterOperator",
    "FilterProperty",
    "FilterResult",
    "QueryFilter",
    "compile_clause",
    "compile_clauses",
    # Entity introspection
    "EntityMetadata",
    "PropertyAccessor",
    "SemanticType",
    "clear_entity_registry",
    "entity_metadata",
    "register_entity",
    "Byte",
    "Char",
    "Float32",
    "Int16",
    "Int32",
    "Int64",
    "UInt16",
    "UInt32",
    "UInt64",
    # Projection
    "is_projection",
    "projection",
    "projection_fields",
    # Errors
    "DuplicateEntityError",
    "EntityNotFoundError",
    "QueryFilterException",
    "StoreAccessError",
    "UnknownPropertyError",
    "UnsupportedOperatorError",
    "ValueConversionError",
    # Repository
    "APIListResponse",
    "APIResponse",
    "InMemoryRepository",
    "RepositoryPort",
    "RepositoryService",
    "SqlAlchemyRepository",
]
