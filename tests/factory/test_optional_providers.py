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
"""Tests for optional providers and their fallbacks."""

import pytest

from pyfactory.factory import FactoryFinder, NoSuchProviderError, provider


class Box:
    def __init__(self, size: int):
        self.size = size


CACHED = Box(1)


def cached_box(size: int) -> Box:
    return CACHED if size == 1 else None


class Codes:
    @provider
    @staticmethod
    def known(code: str) -> int | None:
        return {"one": 1, "two": 2}.get(code)


class TestOptionalProviders:
    def test_fallback_runs_only_when_preferred_returns_none(self):
        calls = []

        def fallback(text: str) -> int:
            calls.append("fallback")
            return -1

        def preferred(text: str) -> int | None:
            calls.append("preferred")
            return int(text) if text.isdigit() else None

        finder = FactoryFinder.empty().with_provider(fallback).with_provider(preferred)
        fn = finder.find_or_fail(int, str)

        assert fn("12") == 12
        assert calls == ["preferred"]
        assert fn("x") == -1
        assert calls == ["preferred", "preferred", "fallback"]

    def test_explicit_optional_falls_back_to_constructor(self):
        finder = FactoryFinder.instantiator().with_provider(cached_box, optional=True)
        fn = finder.find_or_fail(Box, int)

        assert fn(1) is CACHED
        created = fn(2)
        assert created is not CACHED
        assert created.size == 2

    def test_optional_without_fallback_is_rejected(self):
        def preferred(text: str) -> int | None:
            return None

        with pytest.raises(NoSuchProviderError) as exc_info:
            FactoryFinder.empty().with_provider(preferred)
        assert "nothing to fall back to" in str(exc_info.value)

    def test_exceptions_do_not_trigger_fallback(self):
        def fallback(text: str) -> int:
            return 0

        def failing(text: str) -> int | None:
            raise LookupError(text)

        fn = FactoryFinder.empty().with_provider(fallback).with_provider(failing).find_or_fail(int, str)
        with pytest.raises(LookupError):
            fn("x")

    def test_optional_provider_method(self):
        fn = FactoryFinder.minimal().with_providers_from(Codes).find_or_fail(int, str)
        assert fn("one") == 1
        assert fn("7") == 7

    def test_converted_results_and_fallback(self):
        fn = FactoryFinder.minimal().with_providers_from(Codes).find_or_fail(float, str)
        assert fn("two") == 2.0
        assert fn("2.5") == 2.5
