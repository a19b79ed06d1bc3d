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
"""Adapter synthesis: reshape a callable to exactly a requested descriptor.

Two tiers produce identical behaviour. The *direct* tier hands back the
original callable (or a ``functools.partial`` over it) whenever no argument or
return value needs converting. The *generic* tier wraps the target in an
:class:`AdaptedCallable` that carries its descriptor and performs the
conversions on every call.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Sequence
from typing import Any

from pyfactory.conversion.registry import ConverterRegistry
from pyfactory.factory.exceptions import TooManyArgumentsExpectedError
from pyfactory.kernel.exceptions import MismatchedSignatureError
from pyfactory.signature.descriptor import TypeDescriptor
from pyfactory.signature.introspection import descriptor_of
from pyfactory.signature.types import VOID, is_assignable, type_name

Conversion = Callable[[Any], Any]


class AdaptedCallable:
    """Generic-tier callable of a fixed :class:`TypeDescriptor`."""

    __slots__ = ("descriptor", "target", "_invoke", "__signature__")

    def __init__(self, descriptor: TypeDescriptor, invoke: Callable[..., Any], target: Any = None) -> None:
        self.descriptor = descriptor
        self.target = target if target is not None else invoke
        self._invoke = invoke
        self.__signature__ = signature_for(descriptor)

    def __call__(self, *args: Any) -> Any:
        if len(args) != self.descriptor.parameter_count:
            raise TypeError(
                f"{self!r} takes {self.descriptor.parameter_count} positional argument(s), {len(args)} given"
            )
        return self._invoke(*args)

    def __repr__(self) -> str:
        return f"<adapted {type_name(self.target)} {self.descriptor}>"


def signature_for(descriptor: TypeDescriptor) -> inspect.Signature:
    """An ``inspect.Signature`` with positional-only ``arg0..argN`` parameters."""
    params = [
        inspect.Parameter(f"arg{i}", inspect.Parameter.POSITIONAL_ONLY, annotation=tp)
        for i, tp in enumerate(descriptor.parameter_types)
    ]
    returns = None if descriptor.return_type is VOID else descriptor.return_type
    return inspect.Signature(params, return_annotation=returns)


def is_direct(fn: Callable[..., Any]) -> bool:
    """True when *fn* came from the direct tier."""
    return not isinstance(fn, AdaptedCallable)


def descriptor_for(fn: Callable[..., Any]) -> TypeDescriptor:
    if isinstance(fn, AdaptedCallable):
        return fn.descriptor
    return descriptor_of(fn)


def _conversion(registry: ConverterRegistry, source: type, target: type) -> Conversion | None:
    """The conversion from *source* to *target*; ``None`` when values pass through unchanged."""
    converter = registry.find(source, target)
    if converter is not None:
        return None if converter.is_identity else converter.function
    if is_assignable(source, target):
        return None
    return registry.converter_for(source, target)


def adapt(
    fn: Callable[..., Any],
    declared: TypeDescriptor,
    requested: TypeDescriptor,
    registry: ConverterRegistry,
) -> Callable[..., Any]:
    """Convert arguments and the return value of *fn* position by position.

    *declared* and *requested* must have the same arity.
    """
    if declared.parameter_count != requested.parameter_count:
        raise MismatchedSignatureError(
            f"Cannot adapt {declared} to {requested}: parameter counts differ", target=fn
        )
    arguments = [
        _conversion(registry, wanted, have)
        for have, wanted in zip(declared.parameter_types, requested.parameter_types)
    ]
    returns: Conversion | None = None
    discard = requested.return_type is VOID and declared.return_type is not VOID
    if not discard and requested.return_type is not VOID:
        returns = _conversion(registry, declared.return_type, requested.return_type)

    if not discard and returns is None and not any(arguments):
        return fn
    return AdaptedCallable(requested, _converting(fn, arguments, returns, discard), fn)


def _converting(
    fn: Callable[..., Any],
    arguments: Sequence[Conversion | None],
    returns: Conversion | None,
    discard: bool,
) -> Callable[..., Any]:
    def invoke(*args: Any) -> Any:
        converted = [
            value if convert is None or value is None else convert(value)
            for convert, value in zip(arguments, args)
        ]
        result = fn(*converted)
        if discard:
            return None
        if returns is None or result is None:
            return result
        return returns(result)

    return invoke


def drop_arguments(
    fn: Callable[..., Any], declared: TypeDescriptor, requested: TypeDescriptor
) -> tuple[Callable[..., Any], TypeDescriptor]:
    """Accept the surplus trailing requested arguments and ignore them."""
    keep = declared.parameter_count
    widened = declared.append_parameters(*requested.parameter_types[keep:])

    def invoke(*args: Any) -> Any:
        return fn(*args[:keep])

    return AdaptedCallable(widened, invoke, fn), widened


def fill_arguments(
    fn: Callable[..., Any],
    declared: TypeDescriptor,
    requested: TypeDescriptor,
    initializers: Sequence[Any],
    registry: ConverterRegistry,
) -> tuple[Callable[..., Any], TypeDescriptor]:
    """Supply the missing trailing arguments from converted *initializers*."""
    start = requested.parameter_count
    missing = declared.parameter_count - start
    if len(initializers) < missing:
        raise TooManyArgumentsExpectedError(declared, requested, len(initializers))
    constants = tuple(
        registry.convert(value, declared.parameter_types[start + i])
        for i, value in enumerate(initializers[:missing])
    )
    narrowed = declared.drop_parameters(start, declared.parameter_count)

    def invoke(*args: Any) -> Any:
        return fn(*args, *constants)

    return AdaptedCallable(narrowed, invoke, fn), narrowed


def convert_to(
    fn: Callable[..., Any],
    requested: TypeDescriptor,
    registry: ConverterRegistry,
    *initializers: Any,
) -> Callable[..., Any]:
    """Reshape *fn* to *requested*, dropping or filling trailing arguments first."""
    declared = descriptor_for(fn)
    if declared.parameter_count > requested.parameter_count:
        fn, declared = fill_arguments(fn, declared, requested, initializers, registry)
    elif declared.parameter_count < requested.parameter_count:
        fn, declared = drop_arguments(fn, declared, requested)
    return adapt(fn, declared, requested, registry)


def with_result_filter(
    fn: Callable[..., Any], descriptor: TypeDescriptor, result_filter: Conversion
) -> AdaptedCallable:
    """Pass every non-``None`` result of *fn* through *result_filter*."""

    def invoke(*args: Any) -> Any:
        value = fn(*args)
        return value if value is None else result_filter(value)

    return AdaptedCallable(descriptor, invoke, fn)


def with_fallback(
    fn: Callable[..., Any], descriptor: TypeDescriptor, fallback: Callable[..., Any]
) -> AdaptedCallable:
    """Call *fallback* with the same arguments whenever *fn* returns ``None``."""

    def invoke(*args: Any) -> Any:
        value = fn(*args)
        return fallback(*args) if value is None else value

    return AdaptedCallable(descriptor, invoke, fn)
