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
"""StructlogAdapter: routes the ``secureheaders.*`` event loggers through structlog.

Only the ``secureheaders`` logger tree is configured. The root logger and
any handlers the host application installed are left alone.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog

from secureheaders.config import Config

PACKAGE_LOGGER = "secureheaders"

_NONCE_KEYS = frozenset({"nonce", "csp_nonce"})
_VERBOSITY_LEVELS = {1: "INFO", 2: "DEBUG"}


def drop_nonce_values(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog processor: nonce values never reach a log line."""
    for key in _NONCE_KEYS & event_dict.keys():
        del event_dict[key]
    return event_dict


def _logger_name(key: str) -> str:
    if key == PACKAGE_LOGGER or key.startswith(f"{PACKAGE_LOGGER}."):
        return key
    return f"{PACKAGE_LOGGER}.{key}"


class _PackageHandler(logging.StreamHandler):
    """Marker type so reconfiguring replaces the handler instead of stacking another."""


class StructlogAdapter:
    """Configures logging from the ``secureheaders.logging`` section.

    ``level.root`` sets the level of the whole ``secureheaders`` tree
    (default ``WARNING``); any other ``level.<area>`` entry sets
    ``secureheaders.<area>`` (``engine``, ``nonce``, ``config``,
    ``configuration``). ``format`` selects ``console`` or ``json``.
    A non-zero ``verbosity`` (the CLI's ``-v`` count) replaces all
    configured levels: 1 is ``INFO``, 2 or more is ``DEBUG``.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._level: str = "WARNING"
        self._format: str = "console"
        self._area_levels: dict[str, str] = {}

    @property
    def level(self) -> str:
        return self._level

    @property
    def format(self) -> str:
        return self._format

    @property
    def area_levels(self) -> dict[str, str]:
        return dict(self._area_levels)

    def configure(self, config: Config, verbosity: int = 0) -> None:
        level_section = dict(config.get_section(f"{PACKAGE_LOGGER}.logging.level"))
        self._level = str(level_section.pop("root", "WARNING")).upper()
        self._area_levels = {_logger_name(k): str(v).upper() for k, v in level_section.items()}
        self._format = str(config.get(f"{PACKAGE_LOGGER}.logging.format", "console")).lower()

        if verbosity > 0:
            self._level = _VERBOSITY_LEVELS[min(verbosity, 2)]
            self._area_levels = {}

        self._setup_structlog()
        self._install_handler()
        for name, level in self._area_levels.items():
            logging.getLogger(name).setLevel(getattr(logging, level, logging.INFO))

    def _setup_structlog(self) -> None:
        processors: list[structlog.types.Processor] = [
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            drop_nonce_values,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
        ]

        if self._format == "json":
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer(colors=False))

        structlog.configure(
            processors=processors,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    def _install_handler(self) -> None:
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        for handler in [h for h in package_logger.handlers if isinstance(h, _PackageHandler)]:
            package_logger.removeHandler(handler)

        handler = _PackageHandler(self._stream or sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger.addHandler(handler)
        package_logger.setLevel(getattr(logging, self._level, logging.WARNING))
        package_logger.propagate = False
