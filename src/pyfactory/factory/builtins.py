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
"""Built-in dynamic providers: constructors, converters, enums and ``value_of``."""

from __future__ import annotations

import enum
import inspect
from typing import Any

from pyfactory.factory.matcher import accepts_parameters
from pyfactory.factory.registration import ProviderRegistration
from pyfactory.kernel.exceptions import MismatchedSignatureError
from pyfactory.signature.descriptor import TypeDescriptor
from pyfactory.signature.introspection import inspect_callable, inspect_constructor
from pyfactory.signature.types import VOID

_NOT_CONSTRUCTIBLE = frozenset({VOID, type})


def _constructible(cls: Any) -> bool:
    if not isinstance(cls, type) or cls in _NOT_CONSTRUCTIBLE:
        return False
    if inspect.isabstract(cls) or getattr(cls, "_is_protocol", False):
        return False
    return not issubclass(cls, enum.Enum)


def construct_instance(registration: ProviderRegistration) -> None:
    """Call the requested type's own constructor.

    Trailing constructor parameters with defaults may be left out. Types
    without an introspectable constructor (``int``, ``dict``) are assumed to
    accept the requested arguments as they are.
    """
    cls = registration.return_type
    if not _constructible(cls):
        return
    requested = registration.parameter_types
    info = inspect_constructor(cls)
    if info is None:
        registration.register(cls, descriptor=TypeDescriptor(cls, requested))
        return
    if len(info.parameters) < len(requested):
        return
    if any(not p.has_default for p in info.parameters[len(requested):]):
        return
    descriptor = TypeDescriptor(cls, tuple(p.type for p in info.parameters[: len(requested)]))
    if accepts_parameters(descriptor.parameter_types, requested, registration.finder.converters):
        registration.register(cls, descriptor=descriptor)


def convert_single_value(registration: ProviderRegistration) -> None:
    """Serve one-argument requests from the finder's converter registry."""
    if len(registration.parameter_types) != 1:
        return
    (source,) = registration.parameter_types
    converter = registration.finder.converters.find(source, registration.return_type)
    if converter is not None:
        registration.register(
            converter.function, descriptor=TypeDescriptor(registration.return_type, (source,))
        )


def enum_by_name(registration: ProviderRegistration) -> None:
    """``str`` to an ``Enum`` member, looked up by name."""
    cls = registration.return_type
    if not (isinstance(cls, type) and issubclass(cls, enum.Enum)):
        return
    if registration.parameter_types != (str,):
        return

    def by_name(name: str) -> Any:
        return cls[name]

    registration.register(by_name, descriptor=TypeDescriptor(cls, (str,)))


def value_of(registration: ProviderRegistration) -> None:
    """A one-argument ``value_of`` static or class method on the requested type."""
    cls = registration.return_type
    if not isinstance(cls, type) or len(registration.parameter_types) != 1:
        return
    factory = getattr(cls, "value_of", None)
    if factory is None or not callable(factory):
        return
    try:
        info = inspect_callable(factory)
    except MismatchedSignatureError:
        return
    if len(info.parameters) != 1:
        return
    descriptor = TypeDescriptor(cls, (info.parameters[0].type,))
    if accepts_parameters(descriptor.parameter_types, registration.parameter_types, registration.finder.converters):
        registration.register(factory, descriptor=descriptor)
