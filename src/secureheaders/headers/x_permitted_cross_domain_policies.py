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
"""X-Permitted-Cross-Domain-Policies."""

from __future__ import annotations

import re

from secureheaders.exceptions import XPCDPConfigError
from secureheaders.headers.base import HeaderKind, TokenHeaderPolicy

HEADER_NAME = "X-Permitted-Cross-Domain-Policies"

VALID_POLICIES: tuple[str, ...] = ("none", "master-only", "by-content-type", "by-ftp-filename", "all")


class XPermittedCrossDomainPolicies(TokenHeaderPolicy):
    kind = HeaderKind.XPCDP
    header_name = HEADER_NAME
    error_class = XPCDPConfigError
    default_value = "none"
    pattern = re.compile("|".join(re.escape(p) for p in VALID_POLICIES), re.IGNORECASE)
    description = "one of " + ", ".join(VALID_POLICIES)

    @classmethod
    def normalize(cls, value: str) -> str:
        return value.lower()
