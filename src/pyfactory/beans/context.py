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
"""Resolution context: the (name, type) keys currently being created."""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar

BeanKey = tuple[str, type]


class ResolutionContext:
    """Ordered set of bean keys whose creation is in flight."""

    __slots__ = ("_in_flight",)

    def __init__(self) -> None:
        self._in_flight: dict[BeanKey, None] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._in_flight

    def __len__(self) -> int:
        return len(self._in_flight)

    @property
    def path(self) -> list[BeanKey]:
        return list(self._in_flight)

    @contextmanager
    def resolving(self, key: BeanKey) -> Generator[None]:
        self._in_flight[key] = None
        try:
            yield
        finally:
            self._in_flight.pop(key, None)


_active_context: ContextVar[ResolutionContext | None] = ContextVar(
    "_active_resolution_context",
    default=None,
)


def current_context() -> ResolutionContext | None:
    return _active_context.get()


@contextmanager
def activate(context: ResolutionContext | None = None) -> Generator[ResolutionContext]:
    """Make *context* (or the active one, or a fresh one) current for nested lookups."""
    if context is None:
        existing = _active_context.get()
        context = existing if existing is not None else ResolutionContext()
    token = _active_context.set(context)
    try:
        yield context
    finally:
        _active_context.reset(token)
