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
"""Outcome wrappers for carrying repository results across an API boundary.

``success=False`` with ``error_messages`` lets a client tell "the query was
invalid" apart from "the query matched nothing" without a transport fault.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import ConfigDict, Field

from flyquery.data.filter import WireModel
from flyquery.kernel.exceptions import FlyQueryException

T = TypeVar("T")


class APIResponse(WireModel, Generic[T]):
    """Single-entity outcome: ``{Success, ErrorMessages, Data}``."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool = True
    error_messages: list[str] = Field(default_factory=list)
    data: T | None = None

    @classmethod
    def ok(cls, data: T | None) -> APIResponse[T]:
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, *messages: str) -> APIResponse[T]:
        return cls(success=False, error_messages=list(messages))

    @classmethod
    def from_exception(cls, exc: FlyQueryException) -> APIResponse[T]:
        return cls.failure(str(exc))


class APIListResponse(WireModel, Generic[T]):
    """List outcome: ``{Success, ErrorMessages, Data}`` with ``Data`` a list."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool = True
    error_messages: list[str] = Field(default_factory=list)
    data: list[T] = Field(default_factory=list)

    @classmethod
    def ok(cls, data: list[T]) -> APIListResponse[T]:
        return cls(success=True, data=list(data))

    @classmethod
    def failure(cls, *messages: str) -> APIListResponse[T]:
        return cls(success=False, error_messages=list(messages))

    @classmethod
    def from_exception(cls, exc: FlyQueryException) -> APIListResponse[T]:
        return cls.failure(str(exc))
