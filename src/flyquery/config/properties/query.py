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
"""Query filter configuration properties."""

from __future__ import annotations

from dataclasses import dataclass, field

from flyquery.core.config import config_properties

DEFAULT_DATETIME_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y",
)


@config_properties(prefix="flyquery.query")
@dataclass
class QueryFilterProperties:
    """Configuration for filter evaluation (flyquery.query.*).

    ``datetime_formats`` are ``strptime`` patterns tried, in order, after
    ISO-8601 when a clause value targets a date/time property.
    ``strict_include`` makes unknown include-list names an error instead
    of a logged warning.
    """

    strict_include: bool = True
    datetime_formats: list[str] = field(default_factory=lambda: list(DEFAULT_DATETIME_FORMATS))
