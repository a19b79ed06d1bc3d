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
"""pyfactory factory — provider resolution, adaptation, memoization and hooks."""

from pyfactory.factory.adapter import AdaptedCallable, is_direct
from pyfactory.factory.chain import ProviderChain
from pyfactory.factory.decorators import PostProcessor, ProviderMetadata, Requested, post_create, provider
from pyfactory.factory.exceptions import (
    InvalidContractError,
    InvalidHookError,
    MismatchedSignatureError,
    NoMatchingConverterError,
    NoSuchProviderError,
    ProviderInvocationError,
    RecursiveExecutionError,
    TooManyArgumentsExpectedError,
)
from pyfactory.factory.finder import FactoryFinder
from pyfactory.factory.functional import FunctionalProxy
from pyfactory.factory.hooks import PostConstructionHooks
from pyfactory.factory.memoizer import ExecutionState, OneTimeExecution, WaitStrategy
from pyfactory.factory.node import NodeStrategy, ProviderNode, RequestedClass
from pyfactory.factory.properties import FinderProperties, HookProperties, MemoizerProperties
from pyfactory.factory.registration import ProviderRegistration

__all__ = [
    "AdaptedCallable",
    "ExecutionState",
    "FactoryFinder",
    "FinderProperties",
    "FunctionalProxy",
    "HookProperties",
    "InvalidContractError",
    "InvalidHookError",
    "MemoizerProperties",
    "MismatchedSignatureError",
    "NoMatchingConverterError",
    "NoSuchProviderError",
    "NodeStrategy",
    "OneTimeExecution",
    "PostConstructionHooks",
    "PostProcessor",
    "ProviderChain",
    "ProviderInvocationError",
    "ProviderMetadata",
    "ProviderNode",
    "ProviderRegistration",
    "RecursiveExecutionError",
    "Requested",
    "RequestedClass",
    "TooManyArgumentsExpectedError",
    "WaitStrategy",
    "is_direct",
    "post_create",
    "provider",
]
