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
"""Shared test fixtures."""

import importlib

import pytest
import structlog

# Modules holding a module-level structlog proxy, with the logger name each uses.
_MODULE_LOGGERS = {
    "pyfactory.factory.finder": "pyfactory.factory",
    "pyfactory.factory.memoizer": "pyfactory.factory.memoizer",
    "pyfactory.beans.factory": "pyfactory.beans",
}


@pytest.fixture(autouse=True)
def _reset_structlog(monkeypatch):
    """Each test starts from structlog's default, uncached configuration.

    ``reset_defaults()`` does not clear a module-level proxy that already cached
    its bound logger, so each test gets fresh proxies too.
    """
    structlog.reset_defaults()
    for module_name, logger_name in _MODULE_LOGGERS.items():
        module = importlib.import_module(module_name)
        monkeypatch.setattr(module, "logger", structlog.get_logger(logger_name))
    yield
    structlog.reset_defaults()
