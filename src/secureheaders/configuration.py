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
"""Validated configurations and the process-wide configuration store."""

from __future__ import annotations

import threading
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

import structlog

from secureheaders.exceptions import ConfigurationError, NotConfiguredError, UnknownConfigurationError
from secureheaders.headers import OPT_OUT, POLICIES, UNSET, HeaderKind

logger = structlog.get_logger("secureheaders.configuration")

DEFAULT_CONFIG_NAME = "default"


class Configuration(Mapping[HeaderKind, Any]):
    """Immutable mapping of every header kind to a validated setting.

    A setting is ``UNSET``, ``OPT_OUT`` or the value returned by the kind's
    policy ``validate``. Instances can only be produced from fully validated
    input, so a stored configuration is always valid.
    """

    __slots__ = ("_settings",)

    def __init__(self, settings: Mapping[Any, Any] | None = None) -> None:
        validated: dict[HeaderKind, Any] = {}
        raw = {as_kind(k): v for k, v in (settings or {}).items()}
        for kind, policy in POLICIES.items():
            validated[kind] = policy.validate(raw.get(kind, UNSET))
        self._settings = MappingProxyType(validated)

    def __getitem__(self, kind: Any) -> Any:
        return self._settings[as_kind(kind)]

    def __iter__(self) -> Iterator[HeaderKind]:
        return iter(self._settings)

    def __len__(self) -> int:
        return len(self._settings)

    def value_for(self, kind: HeaderKind) -> Any:
        """Effective value: the setting, the kind's default when unset, or ``OPT_OUT``.

        Returns ``None`` for an unset kind with no default.
        """
        setting = self[kind]
        if setting is UNSET:
            return POLICIES[HeaderKind(kind)].default_value
        return setting

    def configured_kinds(self) -> list[str]:
        return [kind.config_key for kind, setting in self._settings.items() if setting is not UNSET]

    def to_builder(self) -> ConfigurationBuilder:
        """A builder pre-populated with a copy of these settings."""
        return ConfigurationBuilder(self._settings)

    def __repr__(self) -> str:
        return f"Configuration({self.configured_kinds()!r})"


def as_kind(key: Any) -> HeaderKind:
    """Coerce a ``HeaderKind`` or configuration key string, raising ``ConfigurationError`` if unknown."""
    try:
        return HeaderKind(key)
    except ValueError:
        raise ConfigurationError(f"Unknown header configuration key '{key}'", key=str(key), value=key) from None


class ConfigurationBuilder:
    """Mutable staging area handed to configuration builder functions.

    Usage::

        def build(config):
            config.csp = {"default_src": ["'self'"]}
            config.x_frame_options = OPT_OUT

    Assigning an attribute that is not a header configuration key raises
    ``AttributeError``.
    """

    __slots__ = tuple(kind.config_key for kind in HeaderKind)

    def __init__(self, settings: Mapping[HeaderKind, Any] | None = None) -> None:
        for kind in HeaderKind:
            setattr(self, kind.config_key, UNSET)
        for kind, value in (settings or {}).items():
            setattr(self, as_kind(kind).config_key, value)

    def opt_out(self, kind: HeaderKind) -> None:
        setattr(self, as_kind(kind).config_key, OPT_OUT)

    def build(self) -> Configuration:
        return Configuration({kind: getattr(self, kind.config_key) for kind in HeaderKind})


class ConfigurationStore:
    """Registry of named configurations with one designated default.

    Writers take a lock and publish a new read-only snapshot; readers only
    dereference the current snapshot and never block.
    """

    def __init__(self) -> None:
        self._configs: Mapping[str, Configuration] = MappingProxyType({})
        self._write_lock = threading.Lock()

    def set_default(self, config: Configuration) -> None:
        self.set_named(DEFAULT_CONFIG_NAME, config)

    def set_named(self, name: str, config: Configuration) -> None:
        if not isinstance(config, Configuration):
            raise TypeError(f"Expected Configuration, got {type(config).__name__}")
        self.replace({name: config})

    def replace(self, configs: Mapping[str, Configuration]) -> None:
        """Publish several configurations at once."""
        with self._write_lock:
            updated = dict(self._configs)
            updated.update(configs)
            self._configs = MappingProxyType(updated)
        for name, config in configs.items():
            logger.info("configuration_stored", name=name, kinds=config.configured_kinds())

    def get(self, name: str | None = None) -> Configuration:
        configs = self._configs
        if DEFAULT_CONFIG_NAME not in configs:
            raise NotConfiguredError()
        if name is None:
            return configs[DEFAULT_CONFIG_NAME]
        try:
            return configs[name]
        except KeyError:
            raise UnknownConfigurationError(name) from None

    def ensure_configured(self) -> None:
        if DEFAULT_CONFIG_NAME not in self._configs:
            raise NotConfiguredError()

    @property
    def is_configured(self) -> bool:
        return DEFAULT_CONFIG_NAME in self._configs

    def names(self) -> list[str]:
        return list(self._configs)

    def reset(self) -> None:
        with self._write_lock:
            self._configs = MappingProxyType({})
