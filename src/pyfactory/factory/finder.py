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
"""FactoryFinder — resolves and adapts providers for requested signatures.

A finder is immutable. Every ``with_*`` call returns a new finder whose
provider chain (or converter registry) has one more entry on top, so a finder
can be shared between threads and extended without affecting its users.

Usage::

    finder = FactoryFinder.minimal().with_provider(add)
    fn = finder.find_or_fail(float, int, int)
    fn(3, 4)  # 7.0
"""

from __future__ import annotations

import datetime as dt
import functools
from collections.abc import Callable
from typing import Annotated, Any, get_args, get_origin

import structlog

from pyfactory.conversion.defaults import full_converters, minimal_converters, widening_converters
from pyfactory.conversion.registry import ConversionRank, ConverterRegistry
from pyfactory.core.config import Config
from pyfactory.factory import adapter, builtins
from pyfactory.factory.chain import ProviderChain
from pyfactory.factory.decorators import ProviderMetadata, Requested, provider_metadata
from pyfactory.factory.exceptions import NoSuchProviderError, ProviderInvocationError
from pyfactory.factory.functional import bind_functional, contract_method
from pyfactory.factory.hooks import PostConstructionHooks
from pyfactory.factory.matcher import matches
from pyfactory.factory.memoizer import OneTimeExecution
from pyfactory.factory.node import NodeStrategy, ProviderNode, RequestedClass
from pyfactory.factory.properties import FinderProperties
from pyfactory.factory.registration import ProviderRegistration
from pyfactory.kernel.exceptions import (
    MismatchedSignatureError,
    NoMatchingConverterError,
    PyFactoryException,
)
from pyfactory.logging.port import LoggingPort, configure_logging
from pyfactory.signature.descriptor import TypeDescriptor
from pyfactory.signature.introspection import CallableInfo, ParameterInfo, inspect_callable
from pyfactory.signature.types import ZERO_VALUES, erase, optional_inner, type_name

logger = structlog.get_logger("pyfactory.factory")

DynamicProvider = Callable[[ProviderRegistration], None]

_TEMPORAL_PARSERS: dict[type, Callable[[str, str], Any]] = {
    dt.datetime: dt.datetime.strptime,
    dt.date: lambda text, pattern: dt.datetime.strptime(text, pattern).date(),
    dt.time: lambda text, pattern: dt.datetime.strptime(text, pattern).time(),
}


def _requested_bound(parameter: ParameterInfo) -> type | None:
    """The upper bound of an ``Annotated[type[T], Requested()]`` parameter."""
    annotation = parameter.annotation
    if get_origin(annotation) is not Annotated:
        return None
    inner, *extras = get_args(annotation)
    if not any(isinstance(extra, Requested) for extra in extras):
        return None
    bound_args = get_args(inner) if get_origin(inner) is type else ()
    return erase(bound_args[0]) if bound_args else object


def _call_on_receiver(fn: Callable[..., Any], receiver: Callable[[], Any], *args: Any) -> Any:
    return fn(receiver(), *args)


class FactoryFinder:
    """Immutable provider chain plus converter registry and hook cache."""

    __slots__ = ("_chain", "_converters", "_hooks", "_properties")

    def __init__(
        self,
        chain: ProviderChain | None = None,
        converters: ConverterRegistry | None = None,
        hooks: PostConstructionHooks | None = None,
        properties: FinderProperties | None = None,
    ) -> None:
        self._chain = chain if chain is not None else ProviderChain.empty()
        self._converters = converters if converters is not None else ConverterRegistry.empty()
        self._hooks = hooks if hooks is not None else PostConstructionHooks()
        self._properties = properties if properties is not None else FinderProperties()

    # ------------------------------------------------------------------
    # Defaults
    # ------------------------------------------------------------------

    @classmethod
    def empty(cls, properties: FinderProperties | None = None) -> FactoryFinder:
        """No providers and no converters."""
        return cls(properties=properties)

    @classmethod
    def instantiator(cls, properties: FinderProperties | None = None) -> FactoryFinder:
        """Falls back to converters, then to the requested type's constructor; numeric widening only."""
        return (
            cls(converters=widening_converters(), properties=properties)
            .with_dynamic_provider(builtins.construct_instance, name="constructor")
            .with_dynamic_provider(builtins.convert_single_value, name="converters")
        )

    @classmethod
    def minimal(cls, properties: FinderProperties | None = None) -> FactoryFinder:
        """Constructor fallback, ``value_of`` factories, enums by name and string/number converters."""
        return (
            cls(converters=minimal_converters(), properties=properties)
            .with_dynamic_provider(builtins.construct_instance, name="constructor")
            .with_dynamic_provider(builtins.convert_single_value, name="converters")
            .with_dynamic_provider(builtins.value_of, name="value_of")
            .with_dynamic_provider(builtins.enum_by_name, name="enum_by_name")
        )

    @classmethod
    def full(cls, properties: FinderProperties | None = None) -> FactoryFinder:
        """Like :meth:`minimal`, plus temporal and single-character boolean converters."""
        return cls.minimal(properties).with_converters(full_converters())

    @classmethod
    def from_config(cls, config: Config, logging_port: LoggingPort | None = None) -> FactoryFinder:
        """Build the finder named by ``pyfactory.finder.defaults``.

        With a *logging_port*, the ``pyfactory.logging.*`` keys of the same
        *config* are applied through it first.
        """
        if logging_port is not None:
            configure_logging(config, logging_port)
        properties = config.bind(FinderProperties)
        factory = {
            "empty": cls.empty,
            "instantiator": cls.instantiator,
            "minimal": cls.minimal,
            "full": cls.full,
        }[properties.defaults]
        return factory(properties)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def chain(self) -> ProviderChain:
        return self._chain

    @property
    def converters(self) -> ConverterRegistry:
        return self._converters

    @property
    def properties(self) -> FinderProperties:
        return self._properties

    def __repr__(self) -> str:
        return f"FactoryFinder(providers={len(self._chain)}, converters={len(self._converters)})"

    def _derive(
        self, chain: ProviderChain | None = None, converters: ConverterRegistry | None = None
    ) -> FactoryFinder:
        return FactoryFinder(
            chain if chain is not None else self._chain,
            converters if converters is not None else self._converters,
            self._hooks,
            self._properties,
        )

    def _register(self, node: ProviderNode) -> FactoryFinder:
        logger.debug(
            "provider.registered",
            provider=node.name,
            strategy=node.strategy.value,
            signature=str(node.descriptor),
            optional=node.is_optional,
        )
        return self._derive(chain=self._chain.prepend(node))

    def _memoize(self, factory: Callable[[], Any], name: str) -> OneTimeExecution[Any]:
        memoizer = self._properties.memoizer
        return OneTimeExecution(
            factory,
            name=name,
            wait_strategy=memoizer.wait_strategy,
            spin_interval=memoizer.spin_interval,
        )

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def with_provider(
        self,
        fn: Callable[..., Any],
        *initializers: Any,
        accepts: tuple[type, ...] = (),
        optional: bool = False,
        singleton: bool = False,
    ) -> FactoryFinder:
        """Register *fn* for its own declared signature.

        *initializers* are bound to the leading parameters. A parameter
        annotated ``Annotated[type[T], Requested()]`` receives the requested
        type. A ``T | None`` return annotation makes the provider optional.

        Raises:
            MismatchedSignatureError: the initializers do not fit *fn*.
            NoSuchProviderError: *fn* is optional and nothing older can stand in for it.
        """
        metadata = provider_metadata(fn) or ProviderMetadata()
        info = inspect_callable(fn)
        return self._with_callable(
            fn,
            info,
            initializers,
            accepts=tuple(accepts) or metadata.accepts,
            optional=optional or metadata.optional,
            singleton=singleton or metadata.singleton,
        )

    def _with_callable(
        self,
        fn: Callable[..., Any],
        info: CallableInfo,
        initializers: tuple[Any, ...],
        *,
        accepts: tuple[type, ...],
        optional: bool,
        singleton: bool,
        receiver: Callable[[], Any] | None = None,
    ) -> FactoryFinder:
        name = type_name(fn)
        params = list(info.parameters)
        if len(initializers) > len(params):
            raise MismatchedSignatureError(
                f"{len(initializers)} initializer(s) given but '{name}' takes {len(params)} parameter(s)",
                target=fn,
            )
        try:
            bound = tuple(
                self._converters.convert(value, params[i].type) for i, value in enumerate(initializers)
            )
        except NoMatchingConverterError as exc:
            raise MismatchedSignatureError(f"Initializer does not fit '{name}': {exc}", target=fn) from exc
        remaining = params[len(bound):]

        requested_class: RequestedClass | None = None
        for index, parameter in enumerate(remaining):
            upper_bound = _requested_bound(parameter)
            if upper_bound is not None:
                requested_class = RequestedClass(index, upper_bound)
                del remaining[index]
                break

        return_annotation = info.return_annotation
        inner = optional_inner(return_annotation)
        if inner is not None:
            optional = True
            return_annotation = inner
        descriptor = TypeDescriptor.of(return_annotation, *(p.annotation for p in remaining))

        strategy = NodeStrategy.FIXED if receiver is None else NodeStrategy.RECEIVER_FACTORY
        if singleton:
            if descriptor.parameter_count or requested_class is not None:
                raise MismatchedSignatureError(
                    f"Singleton provider '{name}' must not take parameters, declares {descriptor}", target=fn
                )
            if receiver is None:
                produce = functools.partial(fn, *bound)
            else:
                produce = functools.partial(_call_on_receiver, fn, receiver, *bound)
            declared = descriptor.return_type
            fn = self._memoize(lambda: self.apply_hooks(declared, produce()), name)
            bound = ()
            strategy = NodeStrategy.FIXED
            receiver = None

        if optional and self.resolve_in(self._chain, descriptor) is None:
            raise NoSuchProviderError(descriptor, reason=f"optional provider '{name}' has nothing to fall back to")

        node = ProviderNode(
            strategy=strategy,
            descriptor=descriptor,
            function=fn,
            name=name,
            accepted_types=frozenset(erase(t) for t in accepts),
            requested_class=requested_class,
            initializers=bound,
            receiver_factory=receiver,
            is_optional=optional,
            is_static=receiver is None,
            memoized=singleton,
        )
        return self._register(node)

    def with_method(self, fn: Any, owner: type | None = None, instance: Any = None) -> FactoryFinder:
        """Register one provider method.

        Bound methods and static/class methods are registered as they are. A
        plain function taken from *owner* gets its receiver from *instance*, or
        else from a memoized receiver built through this finder.
        """
        return self._with_method(fn, owner, instance, None)

    def _with_method(
        self, fn: Any, owner: type | None, instance: Any, receiver: OneTimeExecution[Any] | None
    ) -> FactoryFinder:
        metadata = provider_metadata(fn) or ProviderMetadata()
        options = {"accepts": metadata.accepts, "optional": metadata.optional, "singleton": metadata.singleton}
        if isinstance(fn, staticmethod):
            fn = fn.__func__
        elif isinstance(fn, classmethod):
            if owner is None:
                raise MismatchedSignatureError("A classmethod provider needs its owner class", target=fn)
            fn = fn.__get__(None, owner)
        elif instance is not None and not hasattr(fn, "__self__"):
            fn = fn.__get__(instance, type(instance))
        elif owner is not None and not hasattr(fn, "__self__"):
            if receiver is None:
                receiver = self._receiver_for(owner)
            return self._with_callable(
                fn, inspect_callable(fn, skip_first=True), (), receiver=receiver, **options
            )
        return self._with_callable(fn, inspect_callable(fn), (), **options)

    def _receiver_for(self, owner: type) -> OneTimeExecution[Any]:
        def create_receiver() -> Any:
            factory = self.find_or_fail(owner)
            try:
                return factory()
            except PyFactoryException:
                raise
            except Exception as exc:
                raise ProviderInvocationError(owner, exc) from exc

        return self._memoize(create_receiver, type_name(owner))

    def with_providers_from(self, container: Any) -> FactoryFinder:
        """Register every ``@provider`` method of a class or instance, in definition order.

        Instance methods of a class share one memoized receiver.
        """
        owner = container if isinstance(container, type) else type(container)
        instance = None if isinstance(container, type) else container
        receiver = self._receiver_for(owner) if instance is None else None
        names: list[str] = []
        for klass in reversed(owner.__mro__):
            for name, member in vars(klass).items():
                if name not in names and provider_metadata(member) is not None:
                    names.append(name)

        finder = self
        for name in names:
            member = next(vars(k)[name] for k in owner.__mro__ if name in vars(k))
            if provider_metadata(member) is not None:
                finder = finder._with_method(member, owner, instance, receiver)
        return finder

    def with_dynamic_provider(self, callback: DynamicProvider, *, name: str | None = None) -> FactoryFinder:
        """Register a callback that decides per request; see :class:`ProviderRegistration`."""
        node = ProviderNode(
            strategy=NodeStrategy.DYNAMIC,
            descriptor=TypeDescriptor(object),
            name=name or type_name(callback),
            dynamic=callback,
        )
        return self._register(node)

    def with_converter(
        self,
        source: type,
        target: type,
        fn: Callable[[Any], Any],
        rank: ConversionRank = ConversionRank.EXPLICIT,
    ) -> FactoryFinder:
        return self._derive(converters=self._converters.with_converter(source, target, fn, rank))

    def with_converters(self, registry: ConverterRegistry) -> FactoryFinder:
        return self._derive(converters=self._converters.with_converters(registry))

    def formatting(self, temporal_type: type, pattern: str) -> FactoryFinder:
        """Parse and print *temporal_type* values as strings with a ``strptime`` pattern."""
        parser = _TEMPORAL_PARSERS.get(temporal_type)
        if parser is None:
            raise MismatchedSignatureError(
                f"Cannot format {type_name(temporal_type)}; use datetime, date or time", target=temporal_type
            )
        return self.with_converter(str, temporal_type, lambda text: parser(text, pattern)).with_converter(
            temporal_type, str, lambda value: value.strftime(pattern)
        )

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve_in(self, chain: ProviderChain, requested: TypeDescriptor) -> Callable[..., Any] | None:
        """First provider in *chain* serving *requested*, adapted.

        Only singleton providers come back with their hooks applied.
        """
        return self._resolve(chain, requested)[0]

    def _resolve(self, chain: ProviderChain, requested: TypeDescriptor) -> tuple[Callable[..., Any] | None, bool]:
        # The flag tells whether the post-construction hooks already ran inside the result.
        for link in chain.links():
            node = link.node
            assert node is not None
            if node.strategy is NodeStrategy.DYNAMIC:
                assert node.dynamic is not None
                registration = ProviderRegistration(self, requested, link.tail or ProviderChain.empty())
                node.dynamic(registration)
                if registration.result is not None:
                    return registration.result, False
                continue
            if not matches(node, requested, self._converters):
                continue
            found = adapter.adapt(node.bind(requested.return_type), self._bound_descriptor(node, requested),
                                  requested, self._converters)
            if not node.is_optional:
                return found, node.memoized
            fallback, hooked = self._resolve(link.tail or ProviderChain.empty(), requested)
            if fallback is None:
                continue
            if node.memoized and not hooked:
                fallback = self._with_hooks(fallback, requested)
            elif hooked and not node.memoized:
                found = self._with_hooks(found, requested)
            return adapter.with_fallback(found, requested, fallback), node.memoized or hooked
        return None, False

    def _with_hooks(self, fn: Callable[..., Any], requested: TypeDescriptor) -> Callable[..., Any]:
        if not self._properties.hooks.enabled:
            return fn
        hook = self._hooks.hook_for(requested.return_type)
        return fn if hook is None else adapter.with_result_filter(fn, requested, hook)

    @staticmethod
    def _bound_descriptor(node: ProviderNode, requested: TypeDescriptor) -> TypeDescriptor:
        if node.requested_class is not None:
            return node.descriptor.change_return_type(requested.return_type)
        return node.descriptor

    def find(self, return_type: Any, *parameter_types: Any) -> Callable[..., Any] | None:
        """A callable taking *parameter_types* and returning *return_type*, or ``None``."""
        requested = TypeDescriptor.of(return_type, *parameter_types)
        found, hooked = self._resolve(self._chain, requested)
        if found is None:
            return None
        if not hooked:
            found = self._with_hooks(found, requested)
        logger.debug("provider.resolved", signature=str(requested), direct=adapter.is_direct(found))
        return found

    def apply_hooks(self, target: Any, value: Any) -> Any:
        """Run the post-construction hooks of *target* on a value produced elsewhere."""
        if value is None or not self._properties.hooks.enabled:
            return value
        hook = self._hooks.hook_for(erase(target))
        return value if hook is None else hook(value)

    def find_or_fail(self, return_type: Any, *parameter_types: Any) -> Callable[..., Any]:
        """Like :meth:`find`, raising :class:`NoSuchProviderError` instead of returning ``None``."""
        found = self.find(return_type, *parameter_types)
        if found is None:
            raise NoSuchProviderError(TypeDescriptor.of(return_type, *parameter_types))
        return found

    def transform(self, target: Any, *values: Any) -> Any:
        """Produce a *target* from *values*, resolving by their runtime types.

        A single value that already is a *target* is returned unchanged, except
        that numbers come back as exactly *target* (``transform(int, True)`` is ``1``).
        """
        target_type = erase(target)
        if len(values) == 1 and isinstance(values[0], target_type):
            value = values[0]
            if target_type in ZERO_VALUES and type(value) is not target_type:
                return target_type(value)
            return value
        fn = self.find(target_type, *(type(v) for v in values))
        if fn is None:
            if len(values) == 1 and self._converters.can_convert(type(values[0]), target_type):
                return self._converters.convert(values[0], target_type)
            raise NoSuchProviderError(TypeDescriptor.of(target_type, *(type(v) for v in values)))
        try:
            return fn(*values)
        except PyFactoryException:
            raise
        except Exception as exc:
            raise ProviderInvocationError(fn, exc) from exc

    # ------------------------------------------------------------------
    # Adaptation of arbitrary callables
    # ------------------------------------------------------------------

    def convert_to(self, fn: Callable[..., Any], descriptor: TypeDescriptor, *additional_values: Any) -> Callable[..., Any]:
        """Reshape *fn* to *descriptor*.

        Surplus requested arguments are ignored; missing trailing ones are
        filled from *additional_values*.

        Raises:
            TooManyArgumentsExpectedError: not enough *additional_values*.
        """
        return adapter.convert_to(fn, descriptor, self._converters, *additional_values)

    def convert_return_type_to(self, fn: Callable[..., Any], return_type: Any) -> Callable[..., Any]:
        declared = adapter.descriptor_for(fn)
        return adapter.adapt(fn, declared, declared.change_return_type(return_type), self._converters)

    def convert_argument_types_to(self, fn: Callable[..., Any], index: int, *parameter_types: Any) -> Callable[..., Any]:
        """Accept *parameter_types* from position *index* on, converting to the declared ones."""
        declared = adapter.descriptor_for(fn)
        requested = declared
        for offset, parameter_type in enumerate(parameter_types):
            requested = requested.change_parameter_type(index + offset, parameter_type)
        return adapter.adapt(fn, declared, requested, self._converters)

    # ------------------------------------------------------------------
    # Functional values
    # ------------------------------------------------------------------

    def create_functional_value(
        self,
        contract: Any,
        return_type: Any = None,
        parameter_types: tuple[Any, ...] = (),
    ) -> Any:
        """An instance of *contract* whose single method is a resolved provider.

        *return_type* and *parameter_types* override the method's own annotations.

        Raises:
            InvalidContractError: *contract* has no single method to implement.
            NoSuchProviderError: nothing provides the method's signature.
        """
        method = contract_method(contract)
        declared = method.descriptor or TypeDescriptor(object)
        descriptor = TypeDescriptor.of(
            return_type if return_type is not None else declared.return_type,
            *(parameter_types or declared.parameter_types),
        )
        target = self.find_or_fail(descriptor.return_type, *descriptor.parameter_types)
        return bind_functional(method, target)

    def create_supplier_for(self, return_type: Any) -> Callable[[], Any]:
        """A zero-argument callable producing *return_type*."""
        return self.create_functional_value(Callable, return_type)

    def create_function_for(self, return_type: Any, parameter_type: Any) -> Callable[[Any], Any]:
        """A one-argument callable producing *return_type* from *parameter_type*."""
        return self.create_functional_value(Callable, return_type, (parameter_type,))
