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
"""X-XSS-Protection."""

from __future__ import annotations

import re

from secureheaders.exceptions import XXssProtectionConfigError
from secureheaders.headers.base import HeaderKind, TokenHeaderPolicy

HEADER_NAME = "X-XSS-Protection"

DISABLED = "0"
ENABLED = "1"
BLOCK = "1; mode=block"


class XXssProtection(TokenHeaderPolicy):
    kind = HeaderKind.XXSS
    header_name = HEADER_NAME
    error_class = XXssProtectionConfigError
    default_value = BLOCK
    # 0 | 1 | 1; mode=block, with an optional trailing report=<uri>
    pattern = re.compile(r"0|1(; ?mode=block)?(; ?report=\S+)?", re.IGNORECASE)
    description = "'0', '1' or '1; mode=block'"
