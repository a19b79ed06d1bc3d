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
"""pyfactory signature — type descriptors, assignability and introspection."""

from pyfactory.signature.descriptor import Match, TypeDescriptor
from pyfactory.signature.introspection import (
    CallableInfo,
    ParameterInfo,
    descriptor_of,
    inspect_callable,
    inspect_constructor,
)
from pyfactory.signature.types import (
    VOID,
    erase,
    is_assignable,
    optional_inner,
    type_name,
    zero_value,
)

__all__ = [
    "VOID",
    "CallableInfo",
    "Match",
    "ParameterInfo",
    "TypeDescriptor",
    "descriptor_of",
    "erase",
    "inspect_callable",
    "inspect_constructor",
    "is_assignable",
    "optional_inner",
    "type_name",
    "zero_value",
]
