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
"""Callable introspection: positional parameters, annotations and defaults."""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass, is_dataclass
from typing import Any, get_type_hints

from pyfactory.kernel.exceptions import MismatchedSignatureError
from pyfactory.signature.descriptor import TypeDescriptor
from pyfactory.signature.types import erase, optional_inner, type_name

_EMPTY = inspect.Parameter.empty


@dataclass(frozen=True)
class ParameterInfo:
    """One positional parameter of an introspected callable."""

    name: str
    annotation: Any
    default: Any = _EMPTY

    @property
    def type(self) -> type:
        return erase(self.annotation)

    @property
    def has_default(self) -> bool:
        return self.default is not _EMPTY


@dataclass(frozen=True)
class CallableInfo:
    """Positional shape of a callable as seen through its annotations."""

    target: Any
    parameters: tuple[ParameterInfo, ...]
    return_annotation: Any

    @property
    def descriptor(self) -> TypeDescriptor:
        return TypeDescriptor(erase(self.return_annotation), tuple(p.type for p in self.parameters))

    @property
    def required_count(self) -> int:
        return sum(1 for p in self.parameters if not p.has_default)

    @property
    def returns_optional(self) -> bool:
        return optional_inner(self.return_annotation) is not None


def resolve_hints(target: Any) -> dict[str, Any]:
    """``get_type_hints`` with extras, or an empty dict when annotations do not resolve."""
    try:
        return get_type_hints(target, include_extras=True)
    except Exception:
        return {}


def _positional_parameters(
    target: Any, signature: inspect.Signature, hints: dict[str, Any], skip_first: bool
) -> tuple[ParameterInfo, ...]:
    params: list[ParameterInfo] = []
    items = list(signature.parameters.values())
    if skip_first:
        items = items[1:]
    for param in items:
        if param.kind is inspect.Parameter.VAR_KEYWORD:
            continue
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            raise MismatchedSignatureError(
                f"'{type_name(target)}' takes *{param.name}; only fixed positional parameters can be adapted",
                target=target,
            )
        if param.kind is inspect.Parameter.KEYWORD_ONLY:
            if param.default is _EMPTY:
                raise MismatchedSignatureError(
                    f"'{type_name(target)}' requires keyword-only parameter '{param.name}'",
                    target=target,
                )
            continue
        annotation = hints.get(param.name, Any if param.annotation is _EMPTY else param.annotation)
        params.append(ParameterInfo(param.name, annotation, param.default))
    return tuple(params)


def inspect_callable(target: Callable[..., Any], *, skip_first: bool = False) -> CallableInfo:
    """Introspect a function, method or callable object.

    *skip_first* drops the leading receiver parameter of a function taken from
    a class body (``Owner.method``).
    """
    if isinstance(target, type):
        info = inspect_constructor(target)
        if info is None:
            raise MismatchedSignatureError(f"Cannot introspect the constructor of '{type_name(target)}'", target=target)
        return info
    try:
        signature = inspect.signature(target)
    except (TypeError, ValueError) as exc:
        raise MismatchedSignatureError(f"Cannot introspect '{type_name(target)}': {exc}", target=target) from exc
    hints = resolve_hints(target)
    params = _positional_parameters(target, signature, hints, skip_first)
    if "return" in hints:
        returns = hints["return"]
    elif signature.return_annotation is _EMPTY:
        returns = Any
    else:
        returns = signature.return_annotation
    return CallableInfo(target, params, returns)


def inspect_constructor(cls: type) -> CallableInfo | None:
    """Introspect the constructor of *cls*; ``None`` when its shape is unknown.

    Built-in types such as ``int`` or ``dict`` expose no signature, and
    constructors taking ``*args`` cannot be adapted positionally.
    """
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError):
        return None
    init = cls.__init__  # type: ignore[misc]
    hints = resolve_hints(init) if init is not object.__init__ else {}
    if is_dataclass(cls):
        hints = {**resolve_hints(cls), **hints}
    try:
        params = _positional_parameters(cls, signature, hints, skip_first=False)
    except MismatchedSignatureError:
        return None
    return CallableInfo(cls, params, cls)


def descriptor_of(target: Callable[..., Any]) -> TypeDescriptor:
    """The declared :class:`TypeDescriptor` of *target*."""
    return inspect_callable(target).descriptor
