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
"""Tests for BeanFactory: injection, caching, naming and the cycle guard."""

import threading
import time
from abc import ABC, abstractmethod
from typing import Annotated

import pytest
from structlog.testing import capture_logs

from pyfactory.beans import (
    BeanCreationError,
    BeanFactory,
    Inject,
    NoSuchBeanError,
    ResolutionContext,
    current_context,
    default_bean_name,
)
from pyfactory.factory import post_create


class Repository:
    def __init__(self):
        self.items = []


class Service:
    def __init__(self, repository: Repository, retries: int = 3):
        self.repository = repository
        self.retries = retries


class Archiver:
    def __init__(self, repository: Annotated[Repository, Inject("archive")]):
        self.repository = repository


class Left:
    def __init__(self, right: "Right"):
        self.right = right


class Right:
    def __init__(self, left: Left):
        self.left = left


class Shape(ABC):
    @abstractmethod
    def area(self) -> float: ...


class NeedsShape:
    def __init__(self, shape: Shape):
        self.shape = shape


class Reporter:
    def __init__(self, shape: Shape | None = None):
        self.shape = shape


class Exploding:
    def __init__(self):
        raise RuntimeError("boom")


class Initialized:
    def __init__(self):
        self.ready = False

    def post_construct(self) -> None:
        self.ready = True


class Audited:
    @post_create
    def audit(self) -> None:
        self.audits = getattr(self, "audits", 0) + 1


class Slow:
    created = []

    def __init__(self):
        time.sleep(0.05)
        Slow.created.append(self)


class Inspector:
    pass


class UserService:
    pass


def make_archive() -> Repository:
    repository = Repository()
    repository.items.append("archived")
    return repository


def build_service(repository: Repository) -> Service:
    return Service(repository, retries=0)


@pytest.fixture
def beans():
    return BeanFactory()


class TestBeanCreation:
    def test_constructor_injection(self, beans):
        service = beans.get(Service)
        assert isinstance(service.repository, Repository)
        assert service.retries == 3

    def test_beans_are_cached(self, beans):
        service = beans.get(Service)
        assert beans.get(Service) is service
        assert service.repository is beans.get(Repository)
        assert beans.contains(Service)

    def test_reset_drops_cached_beans(self, beans):
        first = beans.get(Repository)
        beans.reset()
        assert not beans.contains(Repository)
        assert beans.get(Repository) is not first

    def test_registered_factory_is_injected(self, beans):
        beans.register(Service, build_service)
        service = beans.get(Service)
        assert service.retries == 0
        assert service.repository is beans.get(Repository)

    def test_register_replaces_cached_bean(self, beans):
        first = beans.get(Service)
        beans.register(Service, build_service)
        assert beans.get(Service) is not first

    def test_optional_parameter_without_bean(self, beans):
        assert beans.get(Reporter).shape is None

    def test_hooks_run_for_injected_beans(self, beans):
        assert beans.get(Initialized).ready is True

    def test_hooks_run_once_for_constructed_beans(self, beans):
        assert beans.get(Audited).audits == 1

    def test_concurrent_requests_create_one_bean(self, beans):
        Slow.created.clear()
        results = []
        threads = [threading.Thread(target=lambda: results.append(beans.get(Slow))) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert len(Slow.created) == 1
        assert all(result is Slow.created[0] for result in results)


class TestNamedBeans:
    def test_default_bean_name(self):
        assert default_bean_name(UserService) == "userService"

    def test_inject_by_name(self, beans):
        beans.register(Repository, make_archive, name="archive")
        archiver = beans.get(Archiver)
        assert archiver.repository.items == ["archived"]
        assert archiver.repository is beans.get(Repository, "archive")
        assert archiver.repository is not beans.get(Repository)

    def test_unknown_name(self, beans):
        with pytest.raises(NoSuchBeanError) as exc_info:
            beans.get(Repository, "missing")
        assert exc_info.value.code == "NO_SUCH_BEAN"
        assert exc_info.value.name == "missing"


class TestFailures:
    def test_missing_dependency_names_the_parameter(self, beans):
        with pytest.raises(NoSuchBeanError) as exc_info:
            beans.get(NeedsShape)
        message = str(exc_info.value)
        assert "Required by: NeedsShape()" in message
        assert "Parameter: shape: Shape" in message

    def test_creation_failure_keeps_cause(self, beans):
        with pytest.raises(BeanCreationError) as exc_info:
            beans.get(Exploding)
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert "boom" in str(exc_info.value)

    def test_failures_are_not_cached(self, beans):
        for _ in range(2):
            with pytest.raises(BeanCreationError):
                beans.get(Exploding)
        assert not beans.contains(Exploding)


class TestCycleGuard:
    def test_cycle_yields_none_and_warns(self, beans):
        with capture_logs() as logs:
            left = beans.get(Left)
        assert left.right.left is None
        warnings = [entry for entry in logs if entry["event"] == "bean.cycle_detected"]
        assert len(warnings) == 1
        assert warnings[0]["log_level"] == "warning"
        assert warnings[0]["bean"] == "left"
        assert warnings[0]["path"] == ["left", "right"]

    def test_explicit_context(self, beans):
        context = ResolutionContext()
        with context.resolving(("repository", Repository)):
            assert beans.get(Repository, context=context) is None
        assert len(context) == 0
        assert isinstance(beans.get(Repository, context=context), Repository)

    def test_active_context_during_creation(self, beans):
        seen = []

        def make_inspector() -> Inspector:
            context = current_context()
            seen.append(context is not None and ("inspector", Inspector) in context)
            return Inspector()

        beans.register(Inspector, make_inspector)
        beans.get(Inspector)
        assert seen == [True]
        assert current_context() is None
