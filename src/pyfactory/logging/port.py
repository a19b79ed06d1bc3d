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
"""LoggingPort — how the engine's diagnostics are set up from configuration."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from pyfactory.core.config import Config
from pyfactory.logging.structlog_adapter import StructlogAdapter


@runtime_checkable
class LoggingPort(Protocol):
    """Sets up the ``pyfactory.*`` loggers from the ``pyfactory.logging.*`` keys.

    The finder and the bean factory only emit structlog events; whichever port
    is configured decides where those events go and at which level.
    """

    def configure(self, config: Config) -> None: ...
    def get_logger(self, name: str) -> Any: ...
    def set_level(self, name: str, level: str) -> None: ...


def configure_logging(config: Config, port: LoggingPort | None = None) -> LoggingPort:
    """Apply the logging section of *config* through *port*, a :class:`StructlogAdapter` by default."""
    if port is None:
        port = StructlogAdapter()
    port.configure(config)
    return port
