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
"""Per-request CSP nonce management.

The only source of randomness in the package is :func:`generate_nonce`;
everything else is deterministic given a nonce.
"""

from __future__ import annotations

import secrets
from collections.abc import Callable
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from secureheaders.request import RequestContext

logger = structlog.get_logger("secureheaders.nonce")

NONCE_BYTES = 32


def generate_nonce() -> str:
    """Generate a cryptographically secure nonce.

    Returns:
        A URL-safe base64 string carrying 256 bits of entropy.
    """
    return secrets.token_urlsafe(NONCE_BYTES)


class NonceManager:
    """Creates at most one nonce per request context and memoizes it there."""

    def __init__(self, token_factory: Callable[[], str] = generate_nonce) -> None:
        self._token_factory = token_factory

    def nonce_for(self, request: RequestContext) -> str:
        if request.nonce is None:
            request.nonce = self._token_factory()
            logger.debug("csp_nonce_generated", request_id=request.request_id)
        return request.nonce
