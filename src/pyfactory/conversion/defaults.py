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
"""Built-in converter sets used by ``FactoryFinder.minimal()`` and ``FactoryFinder.full()``."""

from __future__ import annotations

import datetime as dt
import enum
from decimal import Decimal

from pyfactory.conversion.registry import ConversionRank, ConverterRegistry

_EPOCH = dt.datetime(1970, 1, 1, tzinfo=dt.timezone.utc)

_TRUE_CHARS = frozenset("tyw1")


def parse_bool(value: str) -> bool:
    return value.strip().lower() == "true"


def parse_bool_char(value: str) -> bool:
    """``t``, ``y``, ``w`` and ``1`` (any case) are true, everything else false."""
    stripped = value.strip()
    return bool(stripped) and stripped[0].lower() in _TRUE_CHARS


def to_epoch_millis(value: dt.datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    return (value - _EPOCH) // dt.timedelta(milliseconds=1)


def from_epoch_millis(value: int) -> dt.datetime:
    return _EPOCH + dt.timedelta(milliseconds=value)


def widening_converters(registry: ConverterRegistry | None = None) -> ConverterRegistry:
    """Numeric widening: ``int`` to ``float``/``complex``/``Decimal``, ``float`` to ``complex``."""
    registry = registry if registry is not None else ConverterRegistry.empty()
    return (
        registry.with_converter(int, float, float, ConversionRank.WIDENING)
        .with_converter(int, complex, complex, ConversionRank.WIDENING)
        .with_converter(float, complex, complex, ConversionRank.WIDENING)
        .with_converter(int, Decimal, Decimal, ConversionRank.WIDENING)
    )


def minimal_converters(registry: ConverterRegistry | None = None) -> ConverterRegistry:
    """Widening plus string parsing/printing of numbers, booleans and enums."""
    return (
        widening_converters(registry)
        .with_converter(float, int, int)
        .with_converter(Decimal, int, int)
        .with_converter(Decimal, float, float)
        .with_converter(str, int, int)
        .with_converter(str, float, float)
        .with_converter(str, Decimal, Decimal)
        .with_converter(str, bool, parse_bool)
        .with_converter(int, str, str)
        .with_converter(float, str, str)
        .with_converter(Decimal, str, str)
        .with_converter(enum.Enum, str, lambda member: member.name)
    )


def full_converters(registry: ConverterRegistry | None = None) -> ConverterRegistry:
    """Minimal converters plus temporal values and single-character booleans."""
    return (
        minimal_converters(registry)
        .with_converter(int, bool, lambda number: number != 0)
        .with_converter(str, bool, parse_bool_char)
        .with_converter(bool, str, lambda flag: "t" if flag else "f")
        .with_converter(dt.datetime, int, to_epoch_millis)
        .with_converter(int, dt.datetime, from_epoch_millis)
        .with_converter(dt.date, dt.datetime, lambda day: dt.datetime.combine(day, dt.time(), dt.timezone.utc))
    )
