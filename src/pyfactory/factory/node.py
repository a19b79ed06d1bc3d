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
"""ProviderNode — one immutable entry of a provider chain."""

from __future__ import annotations

import enum
import functools
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pyfactory.signature.descriptor import TypeDescriptor
from pyfactory.signature.types import type_name

if TYPE_CHECKING:
    from pyfactory.factory.registration import ProviderRegistration


class NodeStrategy(enum.Enum):
    """How a node produces its callable."""

    FIXED = "fixed"
    """A callable with leading initializers and an optional requested-class slot."""

    RECEIVER_FACTORY = "receiver_factory"
    """An unbound method whose receiver comes from a memoized factory."""

    DYNAMIC = "dynamic"
    """A callback deciding per request whether and how to provide."""


@dataclass(frozen=True)
class RequestedClass:
    """Parameter slot receiving the requested type itself."""

    index: int
    upper_bound: type


@dataclass(frozen=True, eq=False)
class ProviderNode:
    """An entry of the provider chain.

    ``descriptor`` is the *effective* signature: the declared one without the
    parameters the node injects itself (initializers, receiver, requested class).
    A ``memoized`` node already ran the post-construction hooks inside its
    one-time factory.
    """

    strategy: NodeStrategy
    descriptor: TypeDescriptor
    function: Callable[..., Any] | None = None
    name: str = ""
    accepted_types: frozenset[type] = frozenset()
    requested_class: RequestedClass | None = None
    initializers: tuple[Any, ...] = ()
    receiver_factory: Callable[[], Any] | None = None
    dynamic: Callable[[ProviderRegistration], None] | None = None
    is_optional: bool = False
    is_static: bool = True
    memoized: bool = False

    def bind(self, requested_type: type) -> Callable[..., Any]:
        """A callable taking exactly the effective parameters."""
        fn = self.function
        assert fn is not None, "dynamic nodes have no fixed function"
        if self.strategy is NodeStrategy.RECEIVER_FACTORY:
            receiver = self.receiver_factory
            assert receiver is not None
            fn = _ReceiverBound(fn, receiver)
        if self.requested_class is not None:
            index = self.requested_class.index
            if index == 0:
                return functools.partial(fn, *self.initializers, requested_type)
            leading = self.initializers

            def with_requested(*args: Any) -> Any:
                return fn(*leading, *args[:index], requested_type, *args[index:])

            return with_requested
        if self.initializers:
            return functools.partial(fn, *self.initializers)
        return fn

    def __repr__(self) -> str:
        label = self.name or (type_name(self.function) if self.function is not None else "?")
        return f"ProviderNode({self.strategy.value}, {label}, {self.descriptor})"


class _ReceiverBound:
    """Calls an unbound method on the receiver its factory yields."""

    __slots__ = ("function", "receiver_factory")

    def __init__(self, function: Callable[..., Any], receiver_factory: Callable[[], Any]) -> None:
        self.function = function
        self.receiver_factory = receiver_factory

    def __call__(self, *args: Any) -> Any:
        return self.function(self.receiver_factory(), *args)
