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
"""Strict-Transport-Security (HSTS)."""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from secureheaders.exceptions import STSConfigError
from secureheaders.headers.base import HeaderKind, HeaderPolicy, validate_model

HEADER_NAME = "Strict-Transport-Security"

_STRING_FORM = re.compile(r"max-age=(\d+)((?:; *(?:includeSubDomains|preload))*)", re.IGNORECASE)


class HSTSSettings(BaseModel):
    """Validated HSTS value.

    ``max_age`` must be a real non-negative integer; numeric strings are
    rejected along with free text.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_age: int = Field(ge=0, strict=True)
    include_subdomains: bool = Field(default=False, strict=True)
    preload: bool = Field(default=False, strict=True)


class StrictTransportSecurity(HeaderPolicy):
    kind = HeaderKind.HSTS
    header_name = HEADER_NAME
    error_class = STSConfigError
    default_value = HSTSSettings(max_age=631138519)

    @classmethod
    def validate_value(cls, value: Any) -> HSTSSettings:
        if isinstance(value, HSTSSettings):
            return value
        if isinstance(value, str):
            return cls._parse(value)
        if isinstance(value, dict):
            return validate_model(cls, HSTSSettings, value)
        raise cls.fail(f"{HEADER_NAME} must be a string or mapping, got {type(value).__name__}", value)

    @classmethod
    def _parse(cls, value: str) -> HSTSSettings:
        match = _STRING_FORM.fullmatch(value.strip())
        if match is None:
            raise cls.fail(
                f"{HEADER_NAME} must look like 'max-age=<seconds>[; includeSubDomains][; preload]', got {value!r}",
                value,
            )
        flags = [f.strip().lower() for f in match.group(2).split(";") if f.strip()]
        if len(flags) != len(set(flags)):
            raise cls.fail(f"{HEADER_NAME} repeats a directive: {value!r}", value)
        return HSTSSettings(
            max_age=int(match.group(1)),
            include_subdomains="includesubdomains" in flags,
            preload="preload" in flags,
        )

    @classmethod
    def make_header(cls, value: HSTSSettings) -> tuple[str, str]:
        parts = [f"max-age={value.max_age}"]
        if value.include_subdomains:
            parts.append("includeSubDomains")
        if value.preload:
            parts.append("preload")
        return HEADER_NAME, "; ".join(parts)
