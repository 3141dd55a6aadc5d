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
"""X-Download-Options."""

from __future__ import annotations

import re

from secureheaders.exceptions import XDOConfigError
from secureheaders.headers.base import HeaderKind, TokenHeaderPolicy

HEADER_NAME = "X-Download-Options"

NOOPEN = "noopen"


class XDownloadOptions(TokenHeaderPolicy):
    kind = HeaderKind.XDO
    header_name = HEADER_NAME
    error_class = XDOConfigError
    default_value = NOOPEN
    pattern = re.compile(r"noopen", re.IGNORECASE)
    description = f"'{NOOPEN}'"

    @classmethod
    def normalize(cls, value: str) -> str:
        return value.lower()
