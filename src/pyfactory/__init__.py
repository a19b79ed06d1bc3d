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
"""pyfactory — runtime factory resolution and call adaptation.

Ask a :class:`FactoryFinder` for a callable of some signature and it finds a
registered provider, a converter or a constructor that fits, adapting
argument and return types along the way.
"""

from pyfactory.beans import BeanFactory, Inject
from pyfactory.core.config import Config, config_properties
from pyfactory.factory import (
    FactoryFinder,
    PostProcessor,
    ProviderRegistration,
    Requested,
    post_create,
    provider,
)
from pyfactory.kernel.exceptions import ConfigurationException, PyFactoryException, ResolutionException
from pyfactory.signature import TypeDescriptor

__version__ = "0.1.0"

__all__ = [
    "BeanFactory",
    "Config",
    "ConfigurationException",
    "FactoryFinder",
    "Inject",
    "PostProcessor",
    "ProviderRegistration",
    "PyFactoryException",
    "Requested",
    "ResolutionException",
    "TypeDescriptor",
    "config_properties",
    "post_create",
    "provider",
]
