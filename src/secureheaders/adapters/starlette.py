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
"""Starlette adapter — pure ASGI middleware writing resolved security headers."""

from __future__ import annotations

from typing import Any

from starlette.datastructures import Headers, MutableHeaders
from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Receive, Scope, Send

from secureheaders.engine import SecureHeaders
from secureheaders.request import RequestContext

STATE_KEY = "secure_headers"

_SECURE_SCHEMES = frozenset({"https", "wss"})


def is_secure_scope(scope: Scope) -> bool:
    """``True`` for TLS connections, directly or behind a TLS-terminating proxy."""
    if scope.get("scheme") in _SECURE_SCHEMES:
        return True
    headers = Headers(scope=scope)
    forwarded_proto = headers.get("x-forwarded-proto", "").split(",")[0].strip().lower()
    return forwarded_proto == "https" or headers.get("x-forwarded-ssl", "").lower() == "on"


def context_from_scope(scope: Scope) -> RequestContext:
    return RequestContext(
        is_secure=is_secure_scope(scope),
        user_agent=Headers(scope=scope).get("user-agent"),
    )


def request_context(request: HTTPConnection) -> RequestContext:
    """The :class:`RequestContext` the middleware attached to ``request``."""
    ctx = request.scope.get("state", {}).get(STATE_KEY)
    if ctx is None:
        raise LookupError("SecureHeadersMiddleware is not installed for this request")
    return ctx


class SecureHeadersMiddleware:
    """Resolves security headers for every HTTP response.

    A fresh :class:`RequestContext` is attached to each request (see
    :func:`request_context`) so handlers can opt out, override, append or
    read the nonce before the response starts.
    """

    def __init__(self, app: ASGIApp, engine: SecureHeaders | None = None) -> None:
        self.app = app
        self._engine = engine

    @property
    def engine(self) -> SecureHeaders:
        if self._engine is None:
            from secureheaders import default_engine

            return default_engine
        return self._engine

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        ctx = context_from_scope(scope)
        scope.setdefault("state", {})[STATE_KEY] = ctx
        engine = self.engine

        async def send_with_headers(message: Any) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for name, value in engine.resolve_headers(ctx).items():
                    headers[name] = value
            await send(message)

        await self.app(scope, receive, send_with_headers)
