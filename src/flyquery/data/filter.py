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
"""Serializable query filter: a WHERE / SELECT / ORDER BY carried as plain data.

A :class:`QueryFilter` holds property names, operators and textual values
instead of executable expressions, so the same filter can be built by a UI
or API client, shipped as JSON, and evaluated server-side against a fully
loaded collection::

    query = (
        QueryFilter()
        .where("Age", FilterOperator.EQUALS, "30")
        .order_by("Name")
    )
    payload = query.to_json()
    # ... across the wire ...
    result = QueryFilter.from_json(payload).apply(people, Person)

Evaluation runs in three strictly sequential stages: every clause is
compiled and ANDed, the candidates are narrowed (input order preserved),
then the include list is attached and the result is stably ordered.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_pascal

from flyquery.config.properties.query import QueryFilterProperties
from flyquery.data.entity import EntityMetadata, entity_metadata
from flyquery.data.ordering import order_entities
from flyquery.data.predicate import compile_clauses
from flyquery.data.projection import FilterResult, projection_fields, select_properties
from flyquery.data.types import FilterOperator

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WireModel(BaseModel):
    """Base for models exchanged as JSON with PascalCase keys."""

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)


class FilterProperty(WireModel):
    """One WHERE condition: ``name <operator> value``.

    ``case_sensitive`` only affects string comparisons; property-name lookup
    is always exact.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    value: str = ""
    operator: FilterOperator = FilterOperator.EQUALS
    case_sensitive: bool = False

    @field_validator("operator", mode="before")
    @classmethod
    def _parse_operator(cls, raw: Any) -> FilterOperator:
        return FilterOperator.parse(raw)

    @field_validator("value", mode="before")
    @classmethod
    def _stringify_value(cls, raw: Any) -> Any:
        if raw is None:
            return ""
        if isinstance(raw, bool):
            return "true" if raw else "false"
        if not isinstance(raw, str):
            return str(raw)
        return raw


class QueryFilter(WireModel):
    """The full query: clauses (ANDed), include list, and ordering directive.

    Immutable by convention; the builder methods return modified copies.
    """

    model_config = ConfigDict(frozen=True)

    include_property_names: list[str] = Field(default_factory=list)
    filter_properties: list[FilterProperty] = Field(default_factory=list)
    order_by_property_name: str = ""
    order_by_descending: bool = False

    # ------------------------------------------------------------------
    # Builder
    # ------------------------------------------------------------------

    def where(
        self,
        name: str,
        operator: FilterOperator | str = FilterOperator.EQUALS,
        value: Any = "",
        *,
        case_sensitive: bool = False,
    ) -> QueryFilter:
        """Return a copy with one more clause appended."""
        clause = FilterProperty(name=name, operator=operator, value=value, case_sensitive=case_sensitive)
        return self.model_copy(update={"filter_properties": [*self.filter_properties, clause]})

    def include(self, *names: str) -> QueryFilter:
        """Return a copy whose include list is extended by *names*."""
        return self.model_copy(update={"include_property_names": [*self.include_property_names, *names]})

    def include_projection(self, projection_type: type) -> QueryFilter:
        """Return a copy including every field declared on *projection_type*."""
        return self.include(*projection_fields(projection_type))

    def order_by(self, name: str, *, descending: bool = False) -> QueryFilter:
        """Return a copy ordered by *name*."""
        return self.model_copy(update={"order_by_property_name": name, "order_by_descending": descending})

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, payload: str | bytes) -> QueryFilter:
        return cls.model_validate_json(payload)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not (self.filter_properties or self.include_property_names or self.order_by_property_name)

    def apply(
        self,
        items: Iterable[T],
        entity_type: type | EntityMetadata | None = None,
        *,
        properties: QueryFilterProperties | None = None,
    ) -> FilterResult[T]:
        """Evaluate this filter against an already materialised collection.

        Args:
            items: Every candidate entity.
            entity_type: The entity class or its capability table.  Defaults
                to the type of the first candidate; with no candidates and no
                type there is nothing to validate and the result is empty.
            properties: Evaluation settings; defaults apply when omitted.

        Raises:
            UnknownPropertyError: A clause, include name, or order-by is unknown.
            UnsupportedOperatorError: A clause operator is invalid for its property.
            ValueConversionError: A clause value or live value fails to convert.
        """
        candidates = list(items)
        props = properties or QueryFilterProperties()

        if isinstance(entity_type, EntityMetadata):
            metadata: EntityMetadata | None = entity_type
        elif entity_type is not None:
            metadata = entity_metadata(entity_type)
        elif candidates:
            metadata = entity_metadata(type(candidates[0]))
        else:
            metadata = None

        if metadata is None:
            return FilterResult(items=[])

        # compile everything before touching the collection
        predicate = compile_clauses(self.filter_properties, metadata, datetime_formats=props.datetime_formats)
        selected = select_properties(metadata, self.include_property_names, strict=props.strict_include)
        if self.order_by_property_name:
            metadata.require(self.order_by_property_name, role="order_by")

        matched = [e for e in candidates if predicate(e)] if self.filter_properties else candidates

        if self.order_by_property_name:
            matched = order_entities(
                matched,
                metadata,
                self.order_by_property_name,
                descending=self.order_by_descending,
                datetime_formats=props.datetime_formats,
            )

        logger.debug(
            "Filtered %s: %d clause(s), %d candidate(s), %d match(es)",
            metadata.name,
            len(self.filter_properties),
            len(candidates),
            len(matched),
        )
        return FilterResult(items=matched, selected_properties=selected, metadata=metadata)
