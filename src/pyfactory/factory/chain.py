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
"""ProviderChain — persistent, newest-first linked list of provider nodes."""

from __future__ import annotations

from collections.abc import Iterator

from pyfactory.factory.node import ProviderNode


class ProviderChain:
    """Immutable singly linked list; ``prepend`` shares the existing tail."""

    __slots__ = ("node", "tail", "_size")

    def __init__(self, node: ProviderNode | None = None, tail: ProviderChain | None = None) -> None:
        self.node = node
        self.tail = tail
        self._size = 0 if node is None else 1 + (len(tail) if tail is not None else 0)

    @classmethod
    def empty(cls) -> ProviderChain:
        return _EMPTY

    @property
    def is_empty(self) -> bool:
        return self.node is None

    def prepend(self, node: ProviderNode) -> ProviderChain:
        return ProviderChain(node, self)

    def links(self) -> Iterator[ProviderChain]:
        """Each non-empty link, newest first; ``link.tail`` is the older remainder."""
        link: ProviderChain | None = self
        while link is not None and link.node is not None:
            yield link
            link = link.tail

    def __iter__(self) -> Iterator[ProviderNode]:
        for link in self.links():
            assert link.node is not None
            yield link.node

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return f"ProviderChain({list(self)!r})"


_EMPTY = ProviderChain()
