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
"""Header configurations from YAML/TOML files and environment variables.

Layout::

    secureheaders:
      default:
        csp: {default_src: ["'self'"]}
        x_frame_options: DENY
        hpkp: opt_out
      named:
        api:
          x_frame_options: opt_out

The string ``opt_out`` stands for ``OPT_OUT``. Any value can be overridden
with ``SECUREHEADERS_<PATH>`` environment variables, e.g.
``SECUREHEADERS_DEFAULT_X_FRAME_OPTIONS=DENY``, and string values may use
``${ENV_VAR:default}`` placeholders.
"""

from __future__ import annotations

import os
import re
import tomllib
from pathlib import Path
from typing import Any, cast

import structlog
import yaml  # type: ignore[import-untyped]

from secureheaders.configuration import DEFAULT_CONFIG_NAME, Configuration
from secureheaders.engine import SecureHeaders
from secureheaders.exceptions import ConfigurationError, NotConfiguredError
from secureheaders.headers import OPT_OUT

logger = structlog.get_logger("secureheaders.config")

ROOT_KEY = "secureheaders"
OPT_OUT_LITERAL = "opt_out"

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")


class Config:
    """Hierarchical configuration with dot-notation access and env var overrides.

    Priority (highest wins):
    1. Environment variables (SECUREHEADERS_SECTION_KEY format)
    2. Profile overlay files
    3. The base configuration file
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._loaded_sources: list[str] = []

    @property
    def loaded_sources(self) -> list[str]:
        """Config file paths that were loaded, in merge order."""
        return list(self._loaded_sources)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    @classmethod
    def from_file(cls, path: str | Path, active_profiles: list[str] | None = None) -> Config:
        """Load a YAML or TOML file, then ``<stem>-<profile><suffix>`` overlays."""
        path = Path(path)
        data = cls._load_config_data(path)
        sources = [str(path)]

        for profile in active_profiles or []:
            profile_path = path.parent / f"{path.stem}-{profile}{path.suffix}"
            if profile_path.is_file():
                data = cls._deep_merge(data, cls._load_config_data(profile_path))
                sources.append(f"{profile_path} (profile: {profile})")

        instance = cls(data)
        instance._loaded_sources = sources
        return instance

    @staticmethod
    def _load_config_data(path: Path) -> dict[str, Any]:
        try:
            if path.suffix == ".toml":
                with open(path, "rb") as f:
                    return tomllib.load(f) or {}
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (yaml.YAMLError, tomllib.TOMLDecodeError) as exc:
            raise ConfigurationError(f"Cannot parse {path}: {exc}", key=str(path)) from exc
        if not isinstance(data, dict):
            raise ConfigurationError(f"{path} must contain a mapping at the top level", key=str(path), value=data)
        return data

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Recursively merge override into base, with override values winning."""
        merged = dict(base)
        for key, value in override.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = Config._deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key, checking env vars first."""
        env_val = os.environ.get(_env_key(key))
        if env_val is not None:
            return env_val

        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict):
                return default
            current = current.get(part)
            if current is None:
                return default

        if isinstance(current, str) and "${" in current:
            return self._resolve_placeholders(current)
        return current

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Everything under ``prefix`` as a dict, with env overrides and placeholders applied."""
        current: Any = self._data
        for part in prefix.split("."):
            if not isinstance(current, dict):
                return {}
            current = current.get(part, {})
        if not isinstance(current, dict):
            return {}
        return {key: self._resolve(f"{prefix}.{key}", value) for key, value in current.items()}

    def _resolve(self, key: str, value: Any) -> Any:
        env_val = os.environ.get(_env_key(key))
        if env_val is not None:
            return env_val
        if isinstance(value, dict):
            return {k: self._resolve(f"{key}.{k}", v) for k, v in value.items()}
        if isinstance(value, list):
            return [self._resolve_placeholders(v) if isinstance(v, str) and "${" in v else v for v in value]
        if isinstance(value, str) and "${" in value:
            return self._resolve_placeholders(value)
        return value

    def _resolve_placeholders(self, value: str, _depth: int = 0) -> str:
        """Resolve ``${ENV}``, ``${config.key}`` and ``${key:default}`` placeholders."""
        if _depth > 10:
            raise ConfigurationError(
                f"Max recursion depth exceeded resolving placeholders in '{value}'. Check for circular references.",
                value=value,
            )

        def _replace(match: re.Match[str]) -> str:
            inner = match.group(1)
            ref_key, sep, default_val = inner.partition(":")

            env_val = os.environ.get(ref_key)
            if env_val is not None:
                return env_val

            current: Any = self._data
            for part in ref_key.split("."):
                current = current.get(part) if isinstance(current, dict) else None
                if current is None:
                    break

            if current is not None:
                resolved = str(current)
                if "${" in resolved:
                    resolved = self._resolve_placeholders(resolved, _depth + 1)
                return resolved

            if sep:
                return cast(str, default_val)

            raise ConfigurationError(
                f"Cannot resolve placeholder '${{{inner}}}': not found in environment or config",
                key=ref_key,
                value=value,
            )

        return _PLACEHOLDER_RE.sub(_replace, value)


def _env_key(key: str) -> str:
    base = key.removeprefix(f"{ROOT_KEY}.")
    return "SECUREHEADERS_" + base.upper().replace(".", "_").replace("-", "_")


def _to_settings(section: dict[str, Any]) -> dict[str, Any]:
    settings: dict[str, Any] = {}
    for key, value in section.items():
        if isinstance(value, str) and value.strip().lower() == OPT_OUT_LITERAL:
            value = OPT_OUT
        settings[key] = value
    return settings


def load_configurations(config: Config) -> dict[str, Configuration]:
    """Validate every configuration in ``config``. Nothing is stored.

    Raises:
        NotConfiguredError: if there is no ``default`` section.
        ConfigurationError: on the first invalid header setting; the error
            context names the configuration it came from.
    """
    if not isinstance(config.get(f"{ROOT_KEY}.{DEFAULT_CONFIG_NAME}"), dict):
        raise NotConfiguredError(f"No '{ROOT_KEY}.{DEFAULT_CONFIG_NAME}' section in configuration")

    sections = {DEFAULT_CONFIG_NAME: config.get_section(f"{ROOT_KEY}.{DEFAULT_CONFIG_NAME}")}
    sections.update(config.get_section(f"{ROOT_KEY}.named"))

    configurations: dict[str, Configuration] = {}
    for name, section in sections.items():
        if not isinstance(section, dict):
            raise ConfigurationError(f"Configuration '{name}' must be a mapping", key=name, value=section)
        try:
            configurations[name] = Configuration(_to_settings(section))
        except ConfigurationError as exc:
            exc.context["configuration"] = name
            logger.warning("configuration_rejected", configuration=name, code=exc.code, key=exc.key)
            raise
    return configurations


def configure_from_config(config: Config, engine: SecureHeaders | None = None) -> dict[str, Configuration]:
    """Validate all configurations in ``config`` and store them together.

    If any configuration is invalid nothing is stored.
    """
    if engine is None:
        from secureheaders import default_engine as engine

    configurations = load_configurations(config)
    engine.store.replace(configurations)
    return configurations


__all__ = ["Config", "configure_from_config", "load_configurations"]
