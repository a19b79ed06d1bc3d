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
"""BeanFactory — named, cached beans with constructor injection and a cycle guard."""

from __future__ import annotations

import functools
import inspect
import threading
from collections.abc import Callable
from typing import Annotated, Any, TypeVar, get_args, get_origin

import structlog

from pyfactory.beans.context import BeanKey, ResolutionContext, activate
from pyfactory.beans.exceptions import BeanCreationError, NoSuchBeanError
from pyfactory.factory.exceptions import NoSuchProviderError
from pyfactory.factory.finder import FactoryFinder
from pyfactory.kernel.exceptions import PyFactoryException
from pyfactory.signature.introspection import ParameterInfo, inspect_callable
from pyfactory.signature.types import erase, optional_inner, type_name

T = TypeVar("T")

logger = structlog.get_logger("pyfactory.beans")


class Inject:
    """Annotated marker selecting a bean by name: ``Annotated[Service, Inject("primary")]``."""

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Inject) and other.name == self.name

    def __hash__(self) -> int:
        return hash((Inject, self.name))

    def __repr__(self) -> str:
        return f"Inject({self.name!r})"


def default_bean_name(bean_type: type) -> str:
    """``UserService`` becomes ``userService``."""
    name = bean_type.__name__
    return name[:1].lower() + name[1:]


class BeanFactory:
    """Creates and caches beans keyed by ``(name, type)``.

    A bean is produced by its registered factory or, failing that, by its
    constructor, with annotated parameters resolved recursively through
    :meth:`get`. Creation runs under one re-entrant lock per bean type. When a
    bean is requested again while it is being created, the inner request
    logs ``bean.cycle_detected`` and yields ``None``, so cyclic graphs come
    out incomplete instead of failing. Only successfully created beans are
    cached.
    """

    def __init__(self, finder: FactoryFinder | None = None) -> None:
        self._finder = finder if finder is not None else FactoryFinder.instantiator()
        self._factories: dict[BeanKey, Callable[..., Any]] = {}
        self._beans: dict[BeanKey, Any] = {}
        self._type_locks: dict[type, threading.RLock] = {}
        self._guard = threading.Lock()

    @property
    def finder(self) -> FactoryFinder:
        return self._finder

    def register(self, bean_type: type, factory: Callable[..., Any] | None = None, name: str = "") -> None:
        """Define how the bean ``(name, bean_type)`` is made.

        *factory* defaults to *bean_type* itself; its annotated parameters are
        injected like constructor parameters.
        """
        key = (name or default_bean_name(bean_type), bean_type)
        self._factories[key] = factory if factory is not None else bean_type
        self._beans.pop(key, None)

    def contains(self, bean_type: type, name: str | None = None) -> bool:
        return (name or default_bean_name(bean_type), bean_type) in self._beans

    def reset(self) -> None:
        """Drop every cached bean; definitions stay."""
        with self._guard:
            self._beans.clear()

    def get(self, bean_type: type[T], name: str | None = None, context: ResolutionContext | None = None) -> T | None:
        """The bean ``(name, bean_type)``, created on first request.

        Returns ``None`` for a request re-entering a bean that is still being
        created within the same resolution.

        Raises:
            NoSuchBeanError: nothing can produce the bean.
            BeanCreationError: its factory or constructor raised.
        """
        key = (name or default_bean_name(bean_type), bean_type)
        with activate(context) as active, self._lock_for(bean_type):
            if key in self._beans:
                return self._beans[key]
            if key in active:
                logger.warning(
                    "bean.cycle_detected",
                    bean=key[0],
                    bean_type=type_name(bean_type),
                    path=[n for n, _ in active.path],
                )
                return None
            with active.resolving(key):
                bean = self._create(key)
            self._beans[key] = bean
            logger.debug("bean.created", bean=key[0], bean_type=type_name(bean_type))
            return bean

    def _lock_for(self, bean_type: type) -> threading.RLock:
        with self._guard:
            lock = self._type_locks.get(bean_type)
            if lock is None:
                lock = self._type_locks[bean_type] = threading.RLock()
            return lock

    def _create(self, key: BeanKey) -> Any:
        name, bean_type = key
        factory = self._factories.get(key)
        if factory is None and name != default_bean_name(bean_type):
            raise NoSuchBeanError(bean_type=bean_type, name=name)
        target = factory if factory is not None else bean_type

        injected = self._injectable(target)
        if injected:
            kwargs = self._resolve_arguments(target)
            create: Callable[[], Any] = functools.partial(target, **kwargs)
        else:
            try:
                create = self._finder.find_or_fail(bean_type)
            except NoSuchProviderError as exc:
                raise NoSuchBeanError(bean_type=bean_type, name=name) from exc

        try:
            bean = create()
        except PyFactoryException:
            raise
        except Exception as exc:
            raise BeanCreationError(bean_type, name, f"{type(exc).__name__}: {exc}") from exc
        return self._finder.apply_hooks(bean_type, bean) if injected else bean

    def _injectable(self, target: Callable[..., Any]) -> bool:
        if not isinstance(target, type):
            return True
        init = target.__init__  # type: ignore[misc]
        return init is not object.__init__ and inspect.isfunction(init)

    def _resolve_arguments(self, target: Callable[..., Any]) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        for parameter in inspect_callable(target).parameters:
            try:
                kwargs[parameter.name] = self._resolve_parameter(parameter)
            except NoSuchBeanError:
                if parameter.has_default:
                    continue
                raise NoSuchBeanError(
                    bean_type=parameter.type,
                    name=default_bean_name(parameter.type),
                    required_by=f"{type_name(target)}()",
                    parameter=f"{parameter.name}: {type_name(parameter.type)}",
                ) from None
        return kwargs

    def _resolve_parameter(self, parameter: ParameterInfo) -> Any:
        annotation = parameter.annotation
        if get_origin(annotation) is Annotated:
            for extra in get_args(annotation)[1:]:
                if isinstance(extra, Inject):
                    return self.get(erase(annotation), extra.name)
        inner = optional_inner(annotation)
        if inner is not None:
            try:
                return self.get(erase(inner))
            except NoSuchBeanError:
                return None
        if parameter.type is object:
            raise NoSuchBeanError(bean_type=object, name=parameter.name)
        if parameter.has_default and parameter.type not in {t for _, t in self._factories}:
            raise NoSuchBeanError(bean_type=parameter.type, name=parameter.name)
        return self.get(parameter.type)
