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
"""Header kinds, setting sentinels, and the per-header policy contract."""

from __future__ import annotations

import abc
import re
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ValidationError

from secureheaders.exceptions import ConfigurationError


class HeaderKind(str, Enum):
    """Closed set of header kinds. The value is the configuration key."""

    HSTS = "hsts"
    HPKP = "hpkp"
    XFO = "x_frame_options"
    XCTO = "x_content_type_options"
    XXSS = "x_xss_protection"
    XDO = "x_download_options"
    XPCDP = "x_permitted_cross_domain_policies"
    CSP = "csp"

    @property
    def config_key(self) -> str:
        return self.value


class _Sentinel:
    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        self._name = name

    def __repr__(self) -> str:
        return self._name

    def __reduce__(self) -> str:
        return self._name


OPT_OUT: Any = _Sentinel("OPT_OUT")
"""Suppress a header entirely."""

UNSET: Any = _Sentinel("UNSET")
"""No explicit setting: fall back to the header's secure default."""


class HeaderPolicy(abc.ABC):
    """Validation and rendering contract for a single header kind.

    Subclasses are stateless; every method is a classmethod. ``validate``
    normalizes an accepted setting into an immutable value and raises the
    kind's ``error_class`` otherwise. ``make_header`` renders a validated
    value into ``(header_name, header_value)``.
    """

    kind: ClassVar[HeaderKind]
    header_name: ClassVar[str]
    error_class: ClassVar[type[ConfigurationError]]
    default_value: ClassVar[Any] = None

    @classmethod
    def validate(cls, setting: Any) -> Any:
        """Validate a setting, passing the ``OPT_OUT``/``UNSET`` sentinels through."""
        if setting is OPT_OUT or setting is UNSET:
            return setting
        return cls.validate_value(setting)

    @classmethod
    @abc.abstractmethod
    def validate_value(cls, value: Any) -> Any:
        """Validate and normalize a concrete setting."""

    @classmethod
    @abc.abstractmethod
    def make_header(cls, value: Any) -> tuple[str, str]:
        """Render a validated value as ``(header_name, header_value)``."""

    @classmethod
    def fail(cls, message: str, value: Any, key: str | None = None, **context: Any) -> ConfigurationError:
        return cls.error_class(message, key=key or cls.kind.config_key, value=value, context=context or None)


class TokenHeaderPolicy(HeaderPolicy):
    """A header whose value is one token matched by ``pattern``."""

    pattern: ClassVar[re.Pattern[str]]
    description: ClassVar[str]

    @classmethod
    def validate_value(cls, value: Any) -> str:
        if not isinstance(value, str) or not cls.pattern.fullmatch(value.strip()):
            raise cls.fail(f"{cls.header_name} must be {cls.description}, got {value!r}", value)
        return cls.normalize(value.strip())

    @classmethod
    def normalize(cls, value: str) -> str:
        return value

    @classmethod
    def make_header(cls, value: str) -> tuple[str, str]:
        return cls.header_name, value


def validate_model(policy: type[HeaderPolicy], model: type[BaseModel], data: dict[str, Any]) -> Any:
    """Validate a mapping against a Pydantic model, raising the kind's error.

    The per-field messages are joined into the error message and the raw
    error list is kept under ``context["errors"]``.
    """
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        errors = exc.errors(include_url=False)
        detail = "; ".join(f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}" for e in errors)
        raise policy.fail(f"Invalid {policy.header_name} configuration: {detail}", data, errors=errors) from exc
