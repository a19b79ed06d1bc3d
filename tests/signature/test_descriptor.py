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
"""Tests for type descriptors, erasure and callable introspection."""

from decimal import Decimal
from typing import Annotated, Any, Optional

import pytest

from pyfactory.conversion import minimal_converters
from pyfactory.kernel.exceptions import MismatchedSignatureError
from pyfactory.signature import (
    VOID,
    Match,
    TypeDescriptor,
    descriptor_of,
    erase,
    inspect_callable,
    inspect_constructor,
    is_assignable,
    optional_inner,
    zero_value,
)


# -- Fixtures --


class Animal:
    pass


class Dog(Animal):
    def __init__(self, name: str, age: int = 3) -> None:
        self.name = name
        self.age = age


def greet(name: str, times: int) -> str:
    return name * times


def maybe(value: int) -> Optional[int]:
    return value or None


def untyped(a, b):
    return a


def keyword_only(a: int, *, flag: bool) -> int:
    return a


def variadic(*values: int) -> int:
    return sum(values)


class TestErase:
    def test_plain_class(self):
        assert erase(int) is int

    def test_generic_alias(self):
        assert erase(list[int]) is list
        assert erase(dict[str, int]) is dict

    def test_annotated(self):
        assert erase(Annotated[int, "meta"]) is int

    def test_optional(self):
        assert erase(int | None) is int
        assert erase(Optional[str]) is str

    def test_wide_union_and_any(self):
        assert erase(int | str) is object
        assert erase(Any) is object

    def test_none_is_void(self):
        assert erase(None) is VOID


class TestAssignability:
    def test_subclass(self):
        assert is_assignable(Animal, Dog)
        assert not is_assignable(Dog, Animal)

    def test_object_is_top(self):
        assert is_assignable(object, int)
        assert not is_assignable(int, object)

    def test_numbers_are_not_widened(self):
        assert not is_assignable(float, int)

    def test_zero_values(self):
        assert zero_value(int) == 0
        assert zero_value(bool) is False
        assert zero_value(float) == 0.0
        assert zero_value(str) is None

    def test_optional_inner(self):
        assert optional_inner(int | None) is int
        assert optional_inner(int) is None
        assert optional_inner(int | str | None) is None


class TestTypeDescriptor:
    def test_structural_equality(self):
        assert TypeDescriptor.of(int, str) == TypeDescriptor(int, (str,))
        assert hash(TypeDescriptor.of(int, str)) == hash(TypeDescriptor(int, (str,)))

    def test_parameter_helpers(self):
        descriptor = TypeDescriptor.of(int, str, float, bool)
        assert descriptor.parameter_count == 3
        assert descriptor.drop_parameters(1, 2) == TypeDescriptor.of(int, str, bool)
        assert descriptor.insert_parameters(0, bytes) == TypeDescriptor.of(int, bytes, str, float, bool)
        assert descriptor.change_return_type(str).return_type is str
        assert descriptor.change_parameter_type(2, int).parameter_types == (str, float, int)

    def test_str(self):
        assert str(TypeDescriptor.of(None, int, str)) == "(int, str) -> None"

    def test_matches_exact(self):
        assert TypeDescriptor.of(int, str).matches(TypeDescriptor.of(int, str)) is Match.EXACT

    def test_matches_through_hierarchy(self):
        declared = TypeDescriptor.of(Dog, Animal)
        assert declared.matches(TypeDescriptor.of(Animal, Dog)) is Match.CONVERTIBLE

    def test_matches_through_converters(self):
        declared = TypeDescriptor.of(int, int)
        registry = minimal_converters()
        assert declared.matches(TypeDescriptor.of(Decimal, str), registry) is Match.CONVERTIBLE
        assert declared.matches(TypeDescriptor.of(Decimal, str)) is Match.INCOMPATIBLE

    def test_arity_mismatch_is_incompatible(self):
        assert TypeDescriptor.of(int, int).matches(TypeDescriptor.of(int)) is Match.INCOMPATIBLE


class TestIntrospection:
    def test_function_descriptor(self):
        assert descriptor_of(greet) == TypeDescriptor.of(str, str, int)

    def test_optional_return(self):
        info = inspect_callable(maybe)
        assert info.returns_optional
        assert info.descriptor == TypeDescriptor.of(int, int)

    def test_unannotated_parameters_accept_anything(self):
        assert descriptor_of(untyped) == TypeDescriptor.of(object, object, object)

    def test_required_keyword_only_rejected(self):
        with pytest.raises(MismatchedSignatureError):
            inspect_callable(keyword_only)

    def test_var_positional_rejected(self):
        with pytest.raises(MismatchedSignatureError):
            inspect_callable(variadic)

    def test_skip_first_for_methods_taken_from_a_class(self):
        class Greeter:
            def hello(self, name: str) -> str:
                return name

        assert inspect_callable(Greeter.hello, skip_first=True).descriptor == TypeDescriptor.of(str, str)

    def test_constructor(self):
        info = inspect_constructor(Dog)
        assert info is not None
        assert [p.name for p in info.parameters] == ["name", "age"]
        assert info.required_count == 1
        assert info.descriptor == TypeDescriptor.of(Dog, str, int)
