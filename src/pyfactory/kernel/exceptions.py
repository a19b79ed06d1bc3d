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
"""Unified exception hierarchy for pyfactory.

All engine exceptions inherit from PyFactoryException, enabling unified
error handling across modules.

Categories:
- ConfigurationException: misconfiguration detected at registration time
- ResolutionException: failures while resolving or invoking a provider
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class PyFactoryException(Exception):
    """Base exception for all pyfactory errors.

    Carries an optional error code and context dict for structured error data.
    Catch PyFactoryException to handle all engine errors, or catch specific
    subclasses for targeted handling.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "NO_SUCH_PROVIDER").
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


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(PyFactoryException):
    """A provider, hook or contract was declared in an unusable way.

    Raised while the engine is being configured, so misconfiguration fails
    fast instead of surfacing at the first resolution.
    """


# =============================================================================
# Resolution Exceptions
# =============================================================================


class ResolutionException(PyFactoryException):
    """A requested value could not be located, adapted or produced."""


# =============================================================================
# Signature and Conversion Exceptions
# =============================================================================


def _name(tp: object) -> str:
    return getattr(tp, "__qualname__", None) or repr(tp)


class MismatchedSignatureError(ConfigurationException):
    """A callable cannot be registered with the declared signature or bindings.

    Raised for initializer values that do not fit the declared parameters and
    for callables whose parameters cannot be adapted positionally.
    """

    def __init__(self, message: str, *, target: object = None, context: dict | None = None) -> None:
        self.target = target
        ctx = dict(context or {})
        if target is not None:
            ctx.setdefault("target", _name(target))
        super().__init__(message, code="MISMATCHED_SIGNATURE", context=ctx)


class NoMatchingConverterError(ResolutionException):
    """A value cannot be coerced to the requested target type."""

    def __init__(self, source: type, target: type, value: object = None) -> None:
        self.source = source
        self.target = target
        self.value = value
        super().__init__(
            f"No converter from '{_name(source)}' to '{_name(target)}' (value: {value!r})",
            code="NO_MATCHING_CONVERTER",
            context={"source": _name(source), "target": _name(target)},
        )
