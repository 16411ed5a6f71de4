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
"""Logging contract for hosts embedding flyquery.

Filter evaluation, repositories and the response service write to stdlib
loggers under ``flyquery.data``.  Match counts are logged at DEBUG and failed
repository calls at WARNING or ERROR.  A host decides how
those records are rendered by configuring one ``LoggingPort``.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from flyquery.core.config import Config


@runtime_checkable
class LoggingPort(Protocol):
    """Routes flyquery's log records into the host application's output.

    ``configure`` reads the ``flyquery.logging`` section (``format`` and
    ``level.<logger>``); ``set_level`` adjusts one logger afterwards, for
    example ``set_level("flyquery.data.filter", "DEBUG")`` to trace how many
    entities each query matched.
    """

    def configure(self, config: Config) -> None: ...

    def get_logger(self, name: str) -> Any: ...

    def set_level(self, name: str, level: str) -> None: ...
