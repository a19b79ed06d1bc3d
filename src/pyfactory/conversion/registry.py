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
"""ConverterRegistry — immutable, newest-first stack of one-argument converters."""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

from pyfactory.kernel.exceptions import NoMatchingConverterError
from pyfactory.signature.types import is_assignable, zero_value


class ConversionRank(enum.IntEnum):
    """How good a conversion is; higher wins."""

    EXPLICIT = 0
    WIDENING = 1
    IN_HIERARCHY = 2
    IDENTICAL = 3


def _identity(value: Any) -> Any:
    return value


@dataclass(frozen=True)
class Converter:
    """Converts values of ``source`` (or a subclass) into ``target``."""

    source: type
    target: type
    function: Callable[[Any], Any]
    rank: ConversionRank = ConversionRank.EXPLICIT

    def __call__(self, value: Any) -> Any:
        return self.function(value)

    @property
    def is_identity(self) -> bool:
        return self.function is _identity

    def applies_to(self, source: type, target: type) -> bool:
        return is_assignable(self.source, source) and is_assignable(target, self.target)

    def fit(self, target: type) -> tuple[ConversionRank, bool]:
        """Sort key for a lookup of *target*: rank first, then an exact target over a subclass one."""
        return self.rank, self.target is target


class ConverterRegistry:
    """Persistent stack of :class:`Converter` entries.

    ``with_converter`` never mutates: it returns a new registry whose head is the
    new converter, sharing the older entries. Lookups pick the best-ranked
    applicable converter. A converter whose target is exactly the requested
    type beats one producing a subclass of it (``str`` to ``bool`` never shadows
    ``str`` to ``int``), and among equal candidates the newest wins.
    """

    __slots__ = ("_head", "_tail", "_size")

    def __init__(self, head: Converter | None = None, tail: ConverterRegistry | None = None) -> None:
        self._head = head
        self._tail = tail
        self._size = 0 if head is None else 1 + (tail._size if tail is not None else 0)

    @classmethod
    def empty(cls) -> ConverterRegistry:
        return _EMPTY

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Converter]:
        node: ConverterRegistry | None = self
        while node is not None and node._head is not None:
            yield node._head
            node = node._tail

    def __repr__(self) -> str:
        return f"ConverterRegistry(size={self._size})"

    def with_converter(
        self,
        source: type,
        target: type,
        function: Callable[[Any], Any],
        rank: ConversionRank = ConversionRank.EXPLICIT,
    ) -> ConverterRegistry:
        return ConverterRegistry(Converter(source, target, function, rank), self)

    def with_converters(self, other: ConverterRegistry) -> ConverterRegistry:
        """Stack all of *other* on top of this registry, keeping its order."""
        result = self
        for converter in reversed(list(other)):
            result = ConverterRegistry(converter, result)
        return result

    def find(self, source: type, target: type) -> Converter | None:
        if source is target:
            return Converter(source, target, _identity, ConversionRank.IDENTICAL)
        if is_assignable(target, source):
            return Converter(source, target, _identity, ConversionRank.IN_HIERARCHY)
        best: Converter | None = None
        for converter in self:
            if not converter.applies_to(source, target):
                continue
            if best is None or converter.fit(target) > best.fit(target):
                best = converter
        return best

    def can_convert(self, source: type, target: type) -> bool:
        return self.find(source, target) is not None

    def is_convertible(self, a: type, b: type) -> bool:
        """Either type is assignable to the other, or a converter leads from *a* to *b*."""
        return is_assignable(a, b) or is_assignable(b, a) or self.find(a, b) is not None

    def converter_for(self, source: type, target: type) -> Callable[[Any], Any]:
        """The conversion function from *source* to *target*, failing fast."""
        converter = self.find(source, target)
        if converter is not None:
            return converter.function
        if is_assignable(source, target):
            return _identity
        raise NoMatchingConverterError(source, target)

    def convert(self, value: Any, target: type) -> Any:
        """Convert *value* to *target*; ``None`` becomes the zero value of value types."""
        if value is None:
            return zero_value(target)
        converter = self.find(type(value), target)
        if converter is None:
            raise NoMatchingConverterError(type(value), target, value)
        return converter(value)


_EMPTY = ConverterRegistry()
