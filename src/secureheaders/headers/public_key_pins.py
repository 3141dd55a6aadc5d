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
"""Public-Key-Pins (HPKP).

There is no default: an unset HPKP setting produces no header.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from secureheaders.exceptions import PublicKeyPinsConfigError
from secureheaders.headers.base import HeaderKind, HeaderPolicy, validate_model

HEADER_NAME = "Public-Key-Pins"
REPORT_ONLY_HEADER_NAME = "Public-Key-Pins-Report-Only"


class Pin(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    sha256: str = Field(min_length=1)


class HPKPSettings(BaseModel):
    """Validated HPKP value. Pins render in list order."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_age: int = Field(ge=0, strict=True)
    pins: tuple[Pin, ...] = Field(min_length=1)
    include_subdomains: bool = Field(default=False, strict=True)
    report_uri: str | None = None
    report_only: bool = Field(default=False, strict=True)


class PublicKeyPins(HeaderPolicy):
    kind = HeaderKind.HPKP
    header_name = HEADER_NAME
    error_class = PublicKeyPinsConfigError

    @classmethod
    def validate_value(cls, value: Any) -> HPKPSettings:
        if isinstance(value, HPKPSettings):
            return value
        if not isinstance(value, dict):
            raise cls.fail(f"{HEADER_NAME} must be a mapping, got {type(value).__name__}", value)
        return validate_model(cls, HPKPSettings, value)

    @classmethod
    def make_header(cls, value: HPKPSettings) -> tuple[str, str]:
        parts = [f"max-age={value.max_age}"]
        parts.extend(f'pin-sha256="{pin.sha256}"' for pin in value.pins)
        if value.report_uri:
            parts.append(f'report-uri="{value.report_uri}"')
        if value.include_subdomains:
            parts.append("includeSubDomains")
        name = REPORT_ONLY_HEADER_NAME if value.report_only else HEADER_NAME
        return name, "; ".join(parts)
