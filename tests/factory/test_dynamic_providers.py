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
"""Tests for dynamic providers and finders built from configuration."""

import logging
from decimal import Decimal

import pytest
import structlog

from pyfactory.core.config import Config
from pyfactory.factory import (
    FactoryFinder,
    MismatchedSignatureError,
    ProviderRegistration,
    WaitStrategy,
)
from pyfactory.logging import StructlogAdapter
from pyfactory.signature import TypeDescriptor


class RecordingPort:
    def __init__(self) -> None:
        self.configured: list[Config] = []

    def configure(self, config: Config) -> None:
        self.configured.append(config)

    def get_logger(self, name: str) -> object:
        return None

    def set_level(self, name: str, level: str) -> None:
        pass


def text_length(text: str) -> int:
    return len(text)


def add(a: int, b: int) -> int:
    return a + b


def repeat(text: str, times: int) -> str:
    return text * times


def fallback(text: str) -> int:
    return -1


def lengths(registration: ProviderRegistration) -> None:
    if registration.parameter_types == (str,) and registration.return_type in (int, float):
        registration.register(text_length)


def doubling(registration: ProviderRegistration) -> None:
    if registration.return_type is not int:
        return
    existing = registration.find_existing()
    if existing is not None:
        registration.register(lambda *args: existing(*args) * 2, descriptor=registration.requested)


def repeater(registration: ProviderRegistration) -> None:
    if registration.requested == TypeDescriptor.of(str, int):
        registration.register(repeat, "ab")


def incompatible(registration: ProviderRegistration) -> None:
    registration.register(text_length)


def via_lookup(registration: ProviderRegistration) -> None:
    if registration.requested != TypeDescriptor.of(Decimal, str):
        return
    parse = registration.lookup(int, str)
    if parse is not None:
        registration.register(lambda text: Decimal(parse(text) * 100), descriptor=registration.requested)


class TestDynamicProviders:
    def test_registers_typed_callable(self):
        finder = FactoryFinder.empty().with_dynamic_provider(lengths)
        assert finder.find_or_fail(int, str)("abc") == 3

    def test_registered_callable_is_adapted(self):
        finder = FactoryFinder.instantiator().with_dynamic_provider(lengths)
        assert finder.find_or_fail(float, str)("abc") == 3.0

    def test_declining_lets_older_providers_try(self):
        finder = FactoryFinder.empty().with_provider(fallback).with_dynamic_provider(lengths)
        assert finder.find_or_fail(int, str)("abc") == 3
        assert finder.find(list, str) is None

    def test_find_existing_sees_older_providers(self):
        finder = FactoryFinder.empty().with_provider(add).with_dynamic_provider(doubling)
        assert finder.find_or_fail(int, int, int)(3, 4) == 14

    def test_find_existing_without_older_providers(self):
        finder = FactoryFinder.empty().with_dynamic_provider(doubling)
        assert finder.find(int, int, int) is None

    def test_leading_values_are_bound(self):
        finder = FactoryFinder.empty().with_dynamic_provider(repeater)
        assert finder.find_or_fail(str, int)(3) == "ababab"

    def test_lookup_resolves_through_whole_finder(self):
        finder = FactoryFinder.minimal().with_dynamic_provider(via_lookup)
        assert finder.find_or_fail(Decimal, str)("12") == Decimal(1200)

    def test_incompatible_registration_is_rejected(self):
        finder = FactoryFinder.empty().with_dynamic_provider(incompatible)
        with pytest.raises(MismatchedSignatureError):
            finder.find(list, int)

    def test_registration_describes_request(self):
        seen = []

        def record(registration: ProviderRegistration) -> None:
            seen.append((registration.return_type, registration.parameter_types, registration.finder))

        finder = FactoryFinder.empty().with_dynamic_provider(record)
        assert finder.find(str, int, bool) is None
        assert seen == [(str, (int, bool), finder)]


class TestFinderFromConfig:
    def test_named_defaults(self):
        config = Config({"pyfactory": {"finder": {"defaults": "minimal"}}})
        finder = FactoryFinder.from_config(config)
        assert finder.transform(int, "5") == 5

    def test_empty_defaults(self):
        config = Config({"pyfactory": {"finder": {"defaults": "empty"}}})
        assert FactoryFinder.from_config(config).find(list) is None

    def test_instantiator_is_the_default(self):
        finder = FactoryFinder.from_config(Config({}))
        assert finder.find_or_fail(list)() == []

    def test_nested_properties(self):
        config = Config(
            {
                "pyfactory": {
                    "finder": {
                        "defaults": "full",
                        "memoizer": {"wait_strategy": "spin", "spin_interval": 0.01},
                        "hooks": {"enabled": False},
                    }
                }
            }
        )
        finder = FactoryFinder.from_config(config)
        assert finder.properties.memoizer.wait_strategy is WaitStrategy.SPIN
        assert finder.properties.hooks.enabled is False
        assert finder.transform(bool, "y") is True

    def test_logging_port_receives_the_same_config(self):
        config = Config({"pyfactory": {"finder": {"defaults": "empty"}}})
        port = RecordingPort()
        FactoryFinder.from_config(config, logging_port=port)
        assert port.configured == [config]

    def test_structlog_port_applies_logging_section(self):
        config = Config({"pyfactory": {"logging": {"level": {"root": "warning", "pyfactory.factory": "DEBUG"}}}})
        port = StructlogAdapter()
        FactoryFinder.from_config(config, logging_port=port)
        assert port.root_level == "WARNING"
        assert logging.getLogger("pyfactory.factory").level == logging.DEBUG

    def test_logging_left_alone_without_a_port(self):
        FactoryFinder.from_config(Config({"pyfactory": {"logging": {"format": "json"}}}))
        assert structlog.is_configured() is False
