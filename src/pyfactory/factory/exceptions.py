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
"""Factory exceptions — failures to resolve, adapt or invoke providers."""

from __future__ import annotations

from typing import Any

from pyfactory.kernel.exceptions import (
    ConfigurationException,
    MismatchedSignatureError,
    NoMatchingConverterError,
    ResolutionException,
)
from pyfactory.signature.descriptor import TypeDescriptor
from pyfactory.signature.types import type_name

__all__ = [
    "InvalidContractError",
    "InvalidHookError",
    "MismatchedSignatureError",
    "NoMatchingConverterError",
    "NoSuchProviderError",
    "ProviderInvocationError",
    "RecursiveExecutionError",
    "TooManyArgumentsExpectedError",
]


class NoSuchProviderError(ResolutionException):
    """Nothing in the provider chain, and no constructor, yields the requested signature."""

    def __init__(self, descriptor: TypeDescriptor, *, reason: str | None = None) -> None:
        self.descriptor = descriptor
        headline = f"No provider for {descriptor}"

        lines = [f"NoSuchProviderError: {headline}"]
        if reason:
            lines.append("")
            lines.append(f"  Reason: {reason}")
        lines.append("")
        lines.append("  Suggestions:")
        lines.append("    - Register a provider with with_provider() or with_providers_from()")
        lines.append("    - Register a converter for the parameter or return types")
        lines.append("    - Start from FactoryFinder.instantiator() to fall back to constructors")

        super().__init__(
            headline,
            code="NO_SUCH_PROVIDER",
            context={
                "return_type": type_name(descriptor.return_type),
                "parameter_types": [type_name(p) for p in descriptor.parameter_types],
            },
        )
        self.args = ("\n".join(lines),)

    def __str__(self) -> str:
        return self.args[0] if self.args else ""


class TooManyArgumentsExpectedError(ResolutionException):
    """The target needs more trailing arguments than were requested or supplied."""

    def __init__(self, declared: TypeDescriptor, requested: TypeDescriptor, supplied: int) -> None:
        self.declared = declared
        self.requested = requested
        self.supplied = supplied
        missing = declared.parameter_count - requested.parameter_count
        super().__init__(
            f"{declared} cannot be called as {requested}: {missing} more argument(s) needed, "
            f"{supplied} initializer(s) supplied",
            code="TOO_MANY_ARGUMENTS_EXPECTED",
            context={"missing": missing, "supplied": supplied},
        )


class ProviderInvocationError(ResolutionException):
    """A provider raised while producing a value; the original error is ``__cause__``."""

    def __init__(self, provider: Any, cause: BaseException) -> None:
        self.provider = provider
        name = type_name(provider)
        super().__init__(
            f"Provider '{name}' failed: {type(cause).__name__}: {cause}",
            code="PROVIDER_INVOCATION_FAILED",
            context={"provider": name},
        )


class RecursiveExecutionError(ResolutionException):
    """A memoized provider asked for its own value while computing it."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"'{name}' is already being computed on this thread; the provider depends on itself",
            code="RECURSIVE_EXECUTION",
            context={"name": name},
        )


class InvalidHookError(ConfigurationException):
    """A ``@post_create`` hook has the wrong arity or an unusable return type."""

    def __init__(self, hook: Any, target: type, reason: str) -> None:
        self.hook = hook
        self.target = target
        super().__init__(
            f"Hook '{type_name(hook)}' cannot post-process {type_name(target)}: {reason}",
            code="INVALID_HOOK",
            context={"hook": type_name(hook), "target": type_name(target)},
        )


class InvalidContractError(ConfigurationException):
    """A functional contract does not declare exactly one method to implement."""

    def __init__(self, contract: Any, reason: str) -> None:
        self.contract = contract
        super().__init__(
            f"'{type_name(contract)}' is not a functional contract: {reason}",
            code="INVALID_CONTRACT",
            context={"contract": type_name(contract)},
        )
