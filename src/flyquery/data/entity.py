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
"""Entity type introspection: the per-type property capability table.

Every entity type gets one :class:`EntityMetadata`, built on first use and
cached: a mapping of property name to :class:`PropertyAccessor` (getter plus
semantic type).  Filter clauses and order-by directives resolve properties
through this table instead of looking members up by name on every element.

Supported entity shapes:

* dataclasses and pydantic models: fields from type hints
* SQLAlchemy declarative models: mapped columns, typed from the column type
* plain classes: class-level annotations and annotated ``@property`` getters

Anything else can be described explicitly with :func:`register_entity` or
:meth:`EntityMetadata.from_schema`.
"""

from __future__ import annotations

import dataclasses
import datetime
import decimal
import operator
import threading
import types
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Annotated, Any, ClassVar, Union, get_args, get_origin, get_type_hints

import sqlalchemy as sa
from pydantic import BaseModel
from sqlalchemy.orm import Mapped

from flyquery.data.exceptions import UnknownPropertyError
from flyquery.data.types import SemanticType

_SA_COLUMN_TYPES: tuple[tuple[type[sa.types.TypeEngine[Any]], SemanticType], ...] = (
    (sa.SmallInteger, SemanticType.INT16),
    (sa.BigInteger, SemanticType.INT64),
    (sa.Integer, SemanticType.INT32),
    (sa.Boolean, SemanticType.BOOLEAN),
    (sa.Float, SemanticType.FLOAT64),
    (sa.Numeric, SemanticType.DECIMAL),
    (sa.DateTime, SemanticType.DATETIME),
    (sa.Date, SemanticType.DATE),
    (sa.String, SemanticType.STRING),
)


@dataclass(frozen=True)
class PropertyAccessor:
    """A readable entity property: its name, getter, and semantic type.

    ``semantic_type`` is ``None`` for properties whose type no filter
    operator supports; such properties can still be read and ordered by.
    """

    name: str
    getter: Callable[[Any], Any]
    semantic_type: SemanticType | None

    @property
    def type_name(self) -> str:
        return self.semantic_type.value if self.semantic_type is not None else "object"

    def read(self, entity: Any) -> Any:
        return self.getter(entity)


@dataclass(frozen=True)
class EntityMetadata:
    """Capability table ``{name: PropertyAccessor}`` for one entity type."""

    name: str
    properties: Mapping[str, PropertyAccessor] = field(default_factory=dict)

    def __contains__(self, name: object) -> bool:
        return name in self.properties

    def __iter__(self) -> Iterator[str]:
        return iter(self.properties)

    def get(self, name: str) -> PropertyAccessor | None:
        return self.properties.get(name)

    def require(self, name: str, *, role: str = "filter") -> PropertyAccessor:
        """Return the accessor for *name* or raise :class:`UnknownPropertyError`.

        Lookup is exact and case-sensitive.
        """
        accessor = self.properties.get(name)
        if accessor is None:
            raise UnknownPropertyError(self.name, name, role=role)
        return accessor

    @classmethod
    def from_schema(
        cls,
        name: str,
        schema: Mapping[str, SemanticType | None],
        *,
        mapping: bool = False,
    ) -> EntityMetadata:
        """Describe an entity shape explicitly.

        With ``mapping=True`` values are read by key (``entity[name]``),
        which suits dict-shaped rows; otherwise by attribute.
        """
        factory = operator.itemgetter if mapping else operator.attrgetter
        return cls(
            name=name,
            properties={prop: PropertyAccessor(prop, factory(prop), st) for prop, st in schema.items()},
        )

    @classmethod
    def build(cls, entity_type: type) -> EntityMetadata:
        """Introspect *entity_type* and build its capability table."""
        mapper = sa.inspect(entity_type, raiseerr=False)
        if mapper is not None and hasattr(mapper, "column_attrs"):
            schema = _sqlalchemy_schema(mapper)
        else:
            schema = _annotated_schema(entity_type)
        return cls.from_schema(entity_type.__name__, schema)


def classify(annotation: Any) -> SemanticType | None:
    """Map a type annotation to its :class:`SemanticType`, or ``None``."""
    origin = get_origin(annotation)
    if origin is Annotated:
        base, *extras = get_args(annotation)
        for extra in extras:
            if isinstance(extra, SemanticType):
                return extra
        return classify(base)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        return classify(args[0]) if len(args) == 1 else None
    if origin is Mapped:
        return classify(get_args(annotation)[0])
    if origin is not None or not isinstance(annotation, type):
        return None
    # bool before int, datetime before date: subclass relationships
    if issubclass(annotation, bool):
        return SemanticType.BOOLEAN
    if issubclass(annotation, int):
        return SemanticType.INT64
    if issubclass(annotation, float):
        return SemanticType.FLOAT64
    if issubclass(annotation, decimal.Decimal):
        return SemanticType.DECIMAL
    if issubclass(annotation, datetime.datetime):
        return SemanticType.DATETIME
    if issubclass(annotation, datetime.date):
        return SemanticType.DATE
    if issubclass(annotation, str):
        return SemanticType.STRING
    return None


def _resolve_hints(entity_type: type) -> dict[str, Any]:
    try:
        return get_type_hints(entity_type, include_extras=True)
    except NameError as exc:
        raise TypeError(f"Cannot resolve type hints of {entity_type.__qualname__}: {exc}") from exc


def _annotated_schema(entity_type: type) -> dict[str, SemanticType | None]:
    schema: dict[str, SemanticType | None]
    if issubclass(entity_type, BaseModel):
        schema = {name: _classify_model_field(info) for name, info in entity_type.model_fields.items()}
    else:
        hints = _resolve_hints(entity_type)
        if dataclasses.is_dataclass(entity_type):
            names = [f.name for f in dataclasses.fields(entity_type)]
        else:
            names = [n for n, hint in hints.items() if not n.startswith("_") and not _is_classvar(hint)]
        schema = {name: classify(hints.get(name)) for name in names}

    # annotated read-only properties count as readable members too
    for klass in reversed(entity_type.__mro__):
        if klass is object or klass in BaseModel.__mro__:
            continue
        for attr, member in vars(klass).items():
            if isinstance(member, property) and member.fget is not None and not attr.startswith("_"):
                schema[attr] = classify(_resolve_return_hint(member.fget))
    return schema


def _classify_model_field(info: Any) -> SemanticType | None:
    # pydantic moves Annotated extras into FieldInfo.metadata
    for extra in info.metadata:
        if isinstance(extra, SemanticType):
            return extra
    return classify(info.annotation)


def _is_classvar(hint: Any) -> bool:
    return hint is ClassVar or get_origin(hint) is ClassVar


def _resolve_return_hint(func: Callable[..., Any]) -> Any:
    try:
        return get_type_hints(func, include_extras=True).get("return")
    except NameError:
        return None


def _sqlalchemy_schema(mapper: Any) -> dict[str, SemanticType | None]:
    schema: dict[str, SemanticType | None] = {}
    for attr in mapper.column_attrs:
        column_type = attr.columns[0].type
        semantic: SemanticType | None = None
        for sa_type, candidate in _SA_COLUMN_TYPES:
            if isinstance(column_type, sa_type):
                semantic = candidate
                break
        if semantic is SemanticType.DECIMAL and not getattr(column_type, "asdecimal", True):
            semantic = SemanticType.FLOAT64
        schema[attr.key] = semantic
    return schema


_registry: dict[type, EntityMetadata] = {}
_registry_lock = threading.Lock()


def register_entity(entity_type: type, metadata: EntityMetadata | None = None) -> EntityMetadata:
    """Register (or replace) the capability table used for *entity_type*."""
    resolved = metadata if metadata is not None else EntityMetadata.build(entity_type)
    with _registry_lock:
        _registry[entity_type] = resolved
    return resolved


def entity_metadata(entity_type: type) -> EntityMetadata:
    """Return the cached capability table for *entity_type*, building it once."""
    cached = _registry.get(entity_type)
    if cached is not None:
        return cached
    built = EntityMetadata.build(entity_type)
    with _registry_lock:
        return _registry.setdefault(entity_type, built)


def clear_entity_registry() -> None:
    """Drop all cached capability tables."""
    with _registry_lock:
        _registry.clear()
