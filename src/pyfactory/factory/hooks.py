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
"""Post-construction hooks: discovered once per type, composed in order."""

from __future__ import annotations

import inspect
import threading
import typing
from collections.abc import Callable
from typing import Any

from pyfactory.factory.decorators import PostProcessor, is_post_create
from pyfactory.factory.exceptions import InvalidHookError
from pyfactory.signature.introspection import resolve_hints
from pyfactory.signature.types import VOID, erase, is_assignable

Hook = Callable[[Any], Any]


def _run_post_construct(value: Any) -> Any:
    value.post_construct()
    return value


class PostConstructionHooks:
    """Per-type cache of composed post-construction hooks.

    For a type ``T`` the composed hook first runs ``post_construct()`` when
    ``T`` implements :class:`PostProcessor`, then every ``@post_create``
    method. Methods are collected along the MRO starting at ``T``, in
    definition order within each class; a name already seen in a more derived
    class hides the base class definition. The cache only grows and is shared
    by every finder derived from the same root.
    """

    def __init__(self) -> None:
        self._cache: dict[type, Hook | None] = {}
        self._lock = threading.Lock()

    def hook_for(self, target: type) -> Hook | None:
        """The composed hook for *target*, or ``None`` when it has none."""
        try:
            return self._cache[target]
        except KeyError:
            pass
        hook = self._compose(self.discover(target))
        with self._lock:
            return self._cache.setdefault(target, hook)

    def discover(self, target: type) -> list[Hook]:
        if not isinstance(target, type) or target is VOID or target is object:
            return []
        steps: list[Hook] = []
        if issubclass(target, PostProcessor):
            steps.append(_run_post_construct)
        seen: set[str] = set()
        for owner in target.__mro__:
            if owner is object:
                continue
            for name, member in vars(owner).items():
                if name in seen:
                    continue
                seen.add(name)
                if is_post_create(member):
                    step = self._step(target, owner, member)
                    if step is not None:
                        steps.append(step)
        return steps

    @staticmethod
    def _compose(steps: list[Hook]) -> Hook | None:
        if not steps:
            return None
        if len(steps) == 1:
            return steps[0]

        def composed(value: Any) -> Any:
            for step in steps:
                value = step(value)
            return value

        return composed

    def _step(self, target: type, owner: type, member: Any) -> Hook | None:
        if isinstance(member, staticmethod):
            func = member.__func__
            call = func
            expected = 1
        elif isinstance(member, classmethod):
            func = member.__func__
            call = member.__get__(None, owner)
            expected = 2
        else:
            func = member
            call = member
            expected = 1

        params = [
            p
            for p in inspect.signature(func).parameters.values()
            if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
        ]
        if len(params) != expected:
            raise InvalidHookError(func, target, "a hook takes exactly one argument, the new instance")

        annotation = resolve_hints(func).get("return", inspect.signature(func).return_annotation)
        if annotation is inspect.Parameter.empty or erase(annotation) is VOID:
            return _keeping(call)
        if annotation is typing.Self:
            return call
        returned = erase(annotation)
        if is_assignable(target, returned):
            return call
        if is_assignable(owner, returned):
            # declared for a base class this subtype no longer fits
            return None
        raise InvalidHookError(
            func, target, f"return type {returned.__qualname__} is not assignable to {target.__qualname__}"
        )


def _keeping(call: Hook) -> Hook:
    def keep(value: Any) -> Any:
        call(value)
        return value

    return keep
