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
"""Unified exception hierarchy for flyquery.

All library exceptions inherit from FlyQueryException, enabling unified
error handling across modules.

Categories:
- BusinessException: Invalid requests and missing resources
- InfrastructureException: Store and driver failures
"""

from __future__ import annotations


class FlyQueryException(Exception):
    """Base exception for all flyquery errors.

    Carries an optional error code and context dict for structured error data.
    Catch FlyQueryException to handle every library error, or catch specific
    subclasses for targeted handling.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "UNKNOWN_PROPERTY").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# ---------------------------------------------------------------------------
# Business
# ---------------------------------------------------------------------------


class BusinessException(FlyQueryException):
    """Domain rule violations and invalid requests."""


class InvalidRequestException(BusinessException):
    """Request is syntactically valid but semantically incorrect."""


class ResourceNotFoundException(BusinessException):
    """Requested resource does not exist."""


class ConflictException(BusinessException):
    """Operation conflicts with current state (e.g. duplicate identifier)."""


# ---------------------------------------------------------------------------
# Infrastructure
# ---------------------------------------------------------------------------


class InfrastructureException(FlyQueryException):
    """Infrastructure failures: database, driver, network."""
