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
"""Per-request context.

A :class:`RequestContext` is created by the framework adapter for every
inbound request and passed explicitly to every operation. It carries the
inputs the engine reads (transport security and User-Agent) and the
request-scoped state it writes: the override record, the selected named
configuration, and the memoized nonce.
"""

from __future__ import annotations

import uuid
from functools import cached_property

from secureheaders.overrides import RequestOverrideRecord
from secureheaders.user_agent import CapabilityTier, classify


class RequestContext:
    """Request-scoped state for header resolution. Not shared between requests."""

    def __init__(
        self,
        is_secure: bool = False,
        user_agent: str | None = None,
        request_id: str | None = None,
    ) -> None:
        self._request_id = request_id or uuid.uuid4().hex
        self.is_secure = is_secure
        self.user_agent = user_agent
        self.overrides = RequestOverrideRecord()
        self.configuration_name: str | None = None
        self.nonce: str | None = None
        self.nonce_directives: set[str] = set()

    @property
    def request_id(self) -> str:
        return self._request_id

    @cached_property
    def capability(self) -> CapabilityTier:
        """Capability tier of the client, classified once per request."""
        return classify(self.user_agent)

    def __repr__(self) -> str:
        return f"RequestContext(request_id={self._request_id!r}, is_secure={self.is_secure!r})"
