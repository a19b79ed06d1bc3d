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
"""Functional values: bind a resolved callable as the single method of a contract."""

from __future__ import annotations

import collections.abc
import typing
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar, get_args, get_origin

from pyfactory.factory.exceptions import InvalidContractError
from pyfactory.kernel.exceptions import MismatchedSignatureError
from pyfactory.signature.descriptor import TypeDescriptor
from pyfactory.signature.introspection import inspect_callable
from pyfactory.signature.types import type_name

_SKIPPED_BASES = (object, Generic, Protocol)


@dataclass(frozen=True)
class ContractMethod:
    """The one method a functional contract asks to implement.

    ``descriptor`` is ``None`` for a bare ``Callable`` whose shape is unknown.
    """

    contract: type
    name: str
    descriptor: TypeDescriptor | None


def _is_callable_contract(contract: Any) -> bool:
    if contract is collections.abc.Callable or contract is typing.Callable:
        return True
    return get_origin(contract) is collections.abc.Callable


def _candidates(contract: type) -> list[str]:
    abstract = getattr(contract, "__abstractmethods__", frozenset())
    names: list[str] = []
    for owner in contract.__mro__:
        if owner in _SKIPPED_BASES:
            continue
        for name, member in vars(owner).items():
            if name in names or not callable(getattr(member, "__func__", member)):
                continue
            if isinstance(member, type):
                continue
            if abstract:
                if name in abstract:
                    names.append(name)
            elif not name.startswith("_") or name == "__call__":
                names.append(name)
    return names


def contract_method(contract: Any) -> ContractMethod:
    """Locate the single method of *contract*.

    Raises:
        InvalidContractError: *contract* declares no method or more than one.
    """
    if _is_callable_contract(contract):
        args = get_args(contract)
        if len(args) == 2 and isinstance(args[0], list):
            return ContractMethod(collections.abc.Callable, "__call__", TypeDescriptor.of(args[1], *args[0]))
        return ContractMethod(collections.abc.Callable, "__call__", None)

    origin = get_origin(contract) or contract
    if not isinstance(origin, type):
        raise InvalidContractError(contract, "not a class")
    names = _candidates(origin)
    if len(names) != 1:
        found = ", ".join(names) if names else "none"
        raise InvalidContractError(contract, f"expected exactly one method to implement, found {found}")

    name = names[0]
    member = getattr(origin, name)
    static = isinstance(_lookup_static(origin, name), staticmethod | classmethod)
    try:
        info = inspect_callable(member, skip_first=not static)
    except MismatchedSignatureError as exc:
        raise InvalidContractError(contract, str(exc)) from exc

    bindings = dict(zip(getattr(origin, "__parameters__", ()), get_args(contract)))
    descriptor = TypeDescriptor.of(
        bindings.get(info.return_annotation, info.return_annotation),
        *(bindings.get(p.annotation, p.annotation) for p in info.parameters),
    )
    return ContractMethod(origin, name, descriptor)


def _lookup_static(cls: type, name: str) -> Any:
    for owner in cls.__mro__:
        if name in vars(owner):
            return vars(owner)[name]
    return None


class FunctionalProxy:
    """Generic fallback: dispatches the contract method through ``__getattr__``."""

    __slots__ = ("contract", "method_name", "target")

    def __init__(self, contract: type, method_name: str, target: Callable[..., Any]) -> None:
        self.contract = contract
        self.method_name = method_name
        self.target = target

    def __getattr__(self, name: str) -> Any:
        if name == self.method_name:
            return self.target
        raise AttributeError(f"{type_name(self.contract)} proxy has no attribute '{name}'")

    def __repr__(self) -> str:
        return f"<{type_name(self.contract)} proxy -> {self.target!r}>"


def bind_functional(method: ContractMethod, target: Callable[..., Any]) -> Any:
    """An instance of the contract whose method is *target*.

    Subclasses the contract with *target* installed as a static method; when the
    contract refuses subclassing or instantiation, returns a :class:`FunctionalProxy`.
    """
    if method.contract is collections.abc.Callable:
        return target
    try:
        implementation = type(
            f"{method.contract.__name__}Impl",
            (method.contract,),
            {method.name: staticmethod(target), "__module__": method.contract.__module__},
        )
        return implementation()
    except TypeError:
        return FunctionalProxy(method.contract, method.name, target)
