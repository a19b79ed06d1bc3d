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
"""StructlogAdapter — structlog-backed :class:`LoggingPort`."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from pyfactory.core.config import Config

_LEVEL_SECTION = "pyfactory.logging.level"
_FORMAT_KEY = "pyfactory.logging.format"


class StructlogAdapter:
    """Routes structlog events through stdlib logging.

    ``pyfactory.logging.level.root`` sets the root level; every other key under
    ``pyfactory.logging.level`` is a logger name (``pyfactory.factory`` for
    example) with its own level. ``pyfactory.logging.format`` is ``console``
    or ``json``.
    """

    def __init__(self) -> None:
        self._root_level = "INFO"
        self._format = "console"
        self._logger_levels: dict[str, str] = {}

    @property
    def root_level(self) -> str:
        return self._root_level

    @property
    def format(self) -> str:
        return self._format

    def configure(self, config: Config) -> None:
        levels = dict(config.get_section(_LEVEL_SECTION))
        self._root_level = str(config.get(f"{_LEVEL_SECTION}.root", levels.pop("root", "INFO"))).upper()
        levels.pop("root", None)
        self._logger_levels = {name: str(level).upper() for name, level in levels.items()}
        self._format = str(config.get(_FORMAT_KEY, "console")).lower()

        structlog.configure(
            processors=self._processors(),
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(
            format="%(message)s",
            stream=sys.stdout,
            level=getattr(logging, self._root_level, logging.INFO),
            force=True,
        )
        for name, level in self._logger_levels.items():
            self.set_level(name, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        logging.getLogger(name).setLevel(getattr(logging, level.upper(), logging.INFO))

    def _processors(self) -> list[structlog.types.Processor]:
        processors: list[structlog.types.Processor] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
        ]
        if self._format == "json":
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer())
        return processors
