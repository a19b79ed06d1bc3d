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
"""Markers: ``@provider``, ``Requested``, ``@post_create`` and the ``PostProcessor`` contract."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar, runtime_checkable

F = TypeVar("F", bound=Callable[..., Any])

PROVIDER_ATTR = "__pyfactory_provider__"
POST_CREATE_ATTR = "__pyfactory_post_create__"


@dataclass(frozen=True)
class ProviderMetadata:
    """Options attached to a ``@provider`` method."""

    accepts: tuple[type, ...] = ()
    optional: bool = False
    singleton: bool = False


def _unwrap(func: Any) -> Any:
    return getattr(func, "__func__", func)


def provider(
    func: F | None = None,
    *,
    accepts: tuple[type, ...] = (),
    optional: bool = False,
    singleton: bool = False,
) -> F | Callable[[F], F]:
    """Mark a method as a provider for ``FactoryFinder.with_providers_from``.

    Usage::

        class Factories:
            @provider
            def greeting(self, name: str) -> str: ...

            @provider(accepts=(int,), optional=True)
            @staticmethod
            def parse(text: str) -> int | None: ...

    Args:
        accepts: Restrict the method to exactly these requested return types.
        optional: A ``None`` result falls through to the next provider.
            A ``T | None`` return annotation has the same effect.
        singleton: Invoke a zero-argument provider once and reuse its value.
    """
    metadata = ProviderMetadata(accepts=tuple(accepts), optional=optional, singleton=singleton)

    def decorator(fn: F) -> F:
        setattr(_unwrap(fn), PROVIDER_ATTR, metadata)
        return fn

    if func is not None:
        return decorator(func)
    return decorator


def provider_metadata(func: Any) -> ProviderMetadata | None:
    return getattr(_unwrap(func), PROVIDER_ATTR, None)


class Requested:
    """Annotated marker for the parameter that receives the requested class.

    Usage::

        @provider
        def number(kind: Annotated[type[Number], Requested()], value: int) -> Number:
            return kind(value)
    """

    __slots__ = ()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Requested)

    def __hash__(self) -> int:
        return hash(Requested)

    def __repr__(self) -> str:
        return "Requested()"


def post_create(func: F) -> F:
    """Mark a one-argument method as a post-construction hook.

    Instance methods receive the new object as ``self``; static and class
    methods receive it as their single parameter. Returning ``None`` (or
    having no return annotation) keeps the object, returning a compatible
    value replaces it.
    """
    setattr(_unwrap(func), POST_CREATE_ATTR, True)
    return func


def is_post_create(func: Any) -> bool:
    return bool(getattr(_unwrap(func), POST_CREATE_ATTR, False))


@runtime_checkable
class PostProcessor(Protocol):
    """Self-initialization contract, run before any ``@post_create`` hook."""

    def post_construct(self) -> None: ...
