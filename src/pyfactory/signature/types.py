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
"""Semantic types: erasure of typing constructs, assignability and zero values."""

from __future__ import annotations

import types
from typing import Annotated, Any, TypeVar, Union, get_args, get_origin

VOID: type = type(None)

ZERO_VALUES: dict[type, Any] = {bool: False, int: 0, float: 0.0, complex: 0j}


def erase(annotation: Any) -> type:
    """Reduce a type annotation to the class used for matching.

    ``list[int]`` becomes ``list``, ``Annotated[X, ...]`` becomes ``X``,
    ``T | None`` becomes ``T``, ``None`` becomes :data:`VOID`. Anything that
    is not a class (``Any``, unresolved forward references, wide unions)
    becomes ``object``.
    """
    if annotation is None or annotation is VOID:
        return VOID
    if annotation is Any or isinstance(annotation, str):
        return object
    if isinstance(annotation, TypeVar):
        return erase(annotation.__bound__) if annotation.__bound__ is not None else object

    origin = get_origin(annotation)
    if origin is Annotated:
        return erase(get_args(annotation)[0])
    if origin is Union or origin is types.UnionType:
        inner = optional_inner(annotation)
        return erase(inner) if inner is not None else object
    if origin is not None:
        return origin if isinstance(origin, type) else object
    if isinstance(annotation, type):
        return annotation
    return object


def optional_inner(annotation: Any) -> Any | None:
    """Return ``T`` for ``T | None`` / ``Optional[T]``, otherwise ``None``."""
    origin = get_origin(annotation)
    if origin is Annotated:
        return optional_inner(get_args(annotation)[0])
    if origin is not Union and origin is not types.UnionType:
        return None
    members = [arg for arg in get_args(annotation) if arg is not VOID]
    if len(members) == 1 and len(get_args(annotation)) == 2:
        return members[0]
    return None


def is_assignable(target: type, source: type) -> bool:
    """True if a value of *source* may be used where *target* is expected."""
    if target is source or target is object:
        return True
    if source is object:
        return False
    try:
        return issubclass(source, target)
    except TypeError:
        return False


def zero_value(tp: type) -> Any:
    """The value a ``None`` becomes for *tp*: ``0`` for ``int``, ``None`` for reference types."""
    return ZERO_VALUES.get(tp)


def type_name(tp: Any) -> str:
    if tp is VOID:
        return "None"
    name = getattr(tp, "__qualname__", None)
    return name if isinstance(name, str) else repr(tp)
