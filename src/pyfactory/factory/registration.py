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
"""ProviderRegistration — what a dynamic provider sees for one request."""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from pyfactory.factory.adapter import adapt, descriptor_for
from pyfactory.factory.chain import ProviderChain
from pyfactory.factory.matcher import accepts_parameters
from pyfactory.kernel.exceptions import MismatchedSignatureError, NoMatchingConverterError
from pyfactory.signature.descriptor import TypeDescriptor

if TYPE_CHECKING:
    from pyfactory.factory.finder import FactoryFinder


class ProviderRegistration:
    """Handed to a dynamic provider callback for a single requested descriptor.

    The callback either calls :meth:`register` with a callable able to serve the
    request, or returns without registering to let older providers try.
    """

    __slots__ = ("_finder", "_requested", "_remaining", "_result")

    def __init__(self, finder: FactoryFinder, requested: TypeDescriptor, remaining: ProviderChain) -> None:
        self._finder = finder
        self._requested = requested
        self._remaining = remaining
        self._result: Callable[..., Any] | None = None

    @property
    def requested(self) -> TypeDescriptor:
        return self._requested

    @property
    def return_type(self) -> type:
        return self._requested.return_type

    @property
    def parameter_types(self) -> tuple[type, ...]:
        return self._requested.parameter_types

    @property
    def finder(self) -> FactoryFinder:
        return self._finder

    @property
    def result(self) -> Callable[..., Any] | None:
        return self._result

    def register(
        self,
        fn: Callable[..., Any],
        *leading_values: Any,
        descriptor: TypeDescriptor | None = None,
    ) -> None:
        """Serve the request with *fn*, binding *leading_values* to its first parameters.

        Raises:
            MismatchedSignatureError: *fn* cannot be adapted to the request.
        """
        declared = descriptor if descriptor is not None else descriptor_for(fn)
        registry = self._finder.converters
        if leading_values:
            if len(leading_values) > declared.parameter_count:
                raise MismatchedSignatureError(
                    f"{len(leading_values)} leading value(s) given for {declared}", target=fn
                )
            try:
                bound = [
                    registry.convert(value, declared.parameter_types[i]) for i, value in enumerate(leading_values)
                ]
            except NoMatchingConverterError as exc:
                raise MismatchedSignatureError(str(exc), target=fn) from exc
            fn = functools.partial(fn, *bound)
            declared = declared.drop_parameters(0, len(leading_values))
        if not accepts_parameters(declared.parameter_types, self._requested.parameter_types, registry) or not (
            registry.is_convertible(declared.return_type, self._requested.return_type)
        ):
            raise MismatchedSignatureError(f"{declared} cannot serve {self._requested}", target=fn)
        try:
            self._result = adapt(fn, declared, self._requested, registry)
        except NoMatchingConverterError as exc:
            raise MismatchedSignatureError(str(exc), target=fn) from exc

    def find_existing(self) -> Callable[..., Any] | None:
        """What the providers registered before this one offer for the same request."""
        return self._finder.resolve_in(self._remaining, self._requested)

    def lookup(self, return_type: Any, *parameter_types: Any) -> Callable[..., Any] | None:
        """Resolve an unrelated request through the whole finder."""
        return self._finder.find(return_type, *parameter_types)
