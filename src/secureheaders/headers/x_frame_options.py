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
"""X-Frame-Options."""

from __future__ import annotations

import re

from secureheaders.exceptions import XFOConfigError
from secureheaders.headers.base import HeaderKind, TokenHeaderPolicy

HEADER_NAME = "X-Frame-Options"

DENY = "DENY"
SAMEORIGIN = "SAMEORIGIN"
ALLOW_FROM = "ALLOW-FROM"


class XFrameOptions(TokenHeaderPolicy):
    kind = HeaderKind.XFO
    header_name = HEADER_NAME
    error_class = XFOConfigError
    default_value = SAMEORIGIN
    pattern = re.compile(r"deny|sameorigin|allow-from\s+\S+", re.IGNORECASE)
    description = "DENY, SAMEORIGIN or 'ALLOW-FROM <uri>'"

    @classmethod
    def normalize(cls, value: str) -> str:
        directive, *uri = value.split(None, 1)
        if uri:
            return f"{ALLOW_FROM} {uri[0]}"
        return directive.upper()
