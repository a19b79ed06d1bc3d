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
"""Signature matching between provider nodes and requested descriptors."""

from __future__ import annotations

from collections.abc import Sequence

from pyfactory.conversion.registry import ConverterRegistry
from pyfactory.factory.node import NodeStrategy, ProviderNode
from pyfactory.signature.descriptor import TypeDescriptor
from pyfactory.signature.types import is_assignable


def accepts_return_type(node: ProviderNode, requested: type, registry: ConverterRegistry) -> bool:
    """Return-type compatibility, checked before parameters.

    1. An explicit allow-list must contain *requested* exactly.
    2. A requested-class node needs *requested* below its upper bound.
    3. Otherwise *requested* equals the declared type, is one of its
       supertypes, or is reachable from it through a converter.
    """
    if node.accepted_types:
        return requested in node.accepted_types
    if node.requested_class is not None:
        return is_assignable(node.requested_class.upper_bound, requested)
    declared = node.descriptor.return_type
    return is_assignable(requested, declared) or registry.can_convert(declared, requested)


def accepts_parameters(
    declared: Sequence[type], requested: Sequence[type], registry: ConverterRegistry
) -> bool:
    """Same arity, and every requested type convertible to the declared one."""
    if len(declared) != len(requested):
        return False
    return all(registry.is_convertible(wanted, have) for have, wanted in zip(declared, requested))


def matches(node: ProviderNode, requested: TypeDescriptor, registry: ConverterRegistry) -> bool:
    """Whether a fixed node can serve *requested*; dynamic nodes decide for themselves."""
    if node.strategy is NodeStrategy.DYNAMIC:
        return False
    if not accepts_return_type(node, requested.return_type, registry):
        return False
    return accepts_parameters(node.descriptor.parameter_types, requested.parameter_types, registry)
