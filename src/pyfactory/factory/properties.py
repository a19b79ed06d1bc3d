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
"""Finder configuration properties bound from ``pyfactory.finder``.

YAML structure::

    pyfactory:
      finder:
        defaults: instantiator
        memoizer:
          wait_strategy: park
          spin_interval: 0.0
        hooks:
          enabled: true
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from pyfactory.core.config import config_properties
from pyfactory.factory.memoizer import WaitStrategy


class MemoizerProperties(BaseModel):
    """``pyfactory.finder.memoizer.*``."""

    wait_strategy: WaitStrategy = WaitStrategy.PARK
    spin_interval: float = Field(default=0.0, ge=0.0)


class HookProperties(BaseModel):
    """``pyfactory.finder.hooks.*``."""

    enabled: bool = True


@config_properties(prefix="pyfactory.finder")
class FinderProperties(BaseModel):
    """Configuration for :meth:`FactoryFinder.from_config`."""

    defaults: Literal["empty", "instantiator", "minimal", "full"] = "instantiator"
    memoizer: MemoizerProperties = Field(default_factory=MemoizerProperties)
    hooks: HookProperties = Field(default_factory=HookProperties)
