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
"""TypeDescriptor — the (return type, parameter types) key every lookup uses."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pyfactory.signature.types import erase, is_assignable, type_name

if TYPE_CHECKING:
    from pyfactory.conversion.registry import ConverterRegistry


class Match(enum.Enum):
    """Outcome of comparing a declared descriptor with a requested one."""

    EXACT = "exact"
    CONVERTIBLE = "convertible"
    INCOMPATIBLE = "incompatible"


@dataclass(frozen=True)
class TypeDescriptor:
    """Immutable signature: a return type and ordered parameter types.

    Equality and hashing are structural so descriptors can key caches.
    """

    return_type: type
    parameter_types: tuple[type, ...] = ()

    @classmethod
    def of(cls, return_type: Any, *parameter_types: Any) -> TypeDescriptor:
        """Build a descriptor from annotations, erasing typing constructs."""
        return cls(erase(return_type), tuple(erase(p) for p in parameter_types))

    @property
    def parameter_count(self) -> int:
        return len(self.parameter_types)

    def parameter_type(self, index: int) -> type:
        return self.parameter_types[index]

    def change_return_type(self, return_type: Any) -> TypeDescriptor:
        return TypeDescriptor(erase(return_type), self.parameter_types)

    def change_parameter_type(self, index: int, parameter_type: Any) -> TypeDescriptor:
        params = list(self.parameter_types)
        params[index] = erase(parameter_type)
        return TypeDescriptor(self.return_type, tuple(params))

    def drop_parameters(self, start: int, end: int) -> TypeDescriptor:
        """Remove the parameters in ``[start, end)``."""
        return TypeDescriptor(self.return_type, self.parameter_types[:start] + self.parameter_types[end:])

    def insert_parameters(self, position: int, *parameter_types: Any) -> TypeDescriptor:
        inserted = tuple(erase(p) for p in parameter_types)
        return TypeDescriptor(
            self.return_type,
            self.parameter_types[:position] + inserted + self.parameter_types[position:],
        )

    def append_parameters(self, *parameter_types: Any) -> TypeDescriptor:
        return self.insert_parameters(self.parameter_count, *parameter_types)

    def matches(self, requested: TypeDescriptor, registry: ConverterRegistry | None = None) -> Match:
        """Compare this (declared) descriptor with *requested* position by position.

        A pair of types is convertible when either one is assignable to the
        other or *registry* knows a converter between them.
        """
        if self == requested:
            return Match.EXACT
        if self.parameter_count != requested.parameter_count:
            return Match.INCOMPATIBLE

        def compatible(declared: type, wanted: type) -> bool:
            if is_assignable(declared, wanted) or is_assignable(wanted, declared):
                return True
            return registry is not None and registry.is_convertible(wanted, declared)

        if not compatible(self.return_type, requested.return_type):
            if registry is None or not registry.is_convertible(self.return_type, requested.return_type):
                return Match.INCOMPATIBLE
        for declared, wanted in zip(self.parameter_types, requested.parameter_types):
            if not compatible(declared, wanted):
                return Match.INCOMPATIBLE
        return Match.CONVERTIBLE

    def __str__(self) -> str:
        params = ", ".join(type_name(p) for p in self.parameter_types)
        return f"({params}) -> {type_name(self.return_type)}"
