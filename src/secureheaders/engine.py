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
"""SecureHeaders — configuration API and per-request header resolution."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog

from secureheaders.configuration import (
    Configuration,
    ConfigurationBuilder,
    ConfigurationStore,
    as_kind,
)
from secureheaders.exceptions import ConfigurationError
from secureheaders.headers import HeaderKind
from secureheaders.headers.content_security_policy import SCRIPT_SRC, STYLE_SRC
from secureheaders.nonce import NonceManager
from secureheaders.request import RequestContext
from secureheaders.resolver import render_headers, resolve

logger = structlog.get_logger("secureheaders.engine")

BuilderFn = Callable[[ConfigurationBuilder], Any]


class SecureHeaders:
    """Entry point used by framework adapters and application code.

    Configuration is stored once at startup through :meth:`configure_default`
    and :meth:`configure_named`. Request-level changes are recorded on the
    :class:`RequestContext` passed to each call and are never visible to
    other requests.
    """

    def __init__(
        self,
        store: ConfigurationStore | None = None,
        nonce_manager: NonceManager | None = None,
    ) -> None:
        self._store = store or ConfigurationStore()
        self._nonces = nonce_manager or NonceManager()

    @property
    def store(self) -> ConfigurationStore:
        return self._store

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def configure_default(self, builder_fn: BuilderFn | None = None) -> Configuration:
        """Build, validate and store the default configuration.

        Unset header kinds use their secure defaults. On a validation error
        nothing is stored and the previous default stays in place.
        """
        config = self.build_configuration(builder_fn)
        self._store.set_default(config)
        return config

    def configure_named(self, name: str, builder_fn: BuilderFn | None = None, base: str | None = None) -> Configuration:
        """Build, validate and store a named configuration.

        When ``base`` names a stored configuration the builder starts with a
        copy of its settings; later changes to the base are not picked up.
        """
        base_config = self._store.get(base) if base else None
        config = self.build_configuration(builder_fn, base_config)
        self._store.set_named(name, config)
        return config

    def build_configuration(self, builder_fn: BuilderFn | None = None, base: Configuration | None = None) -> Configuration:
        builder = base.to_builder() if base is not None else ConfigurationBuilder()
        if builder_fn is not None:
            builder_fn(builder)
        try:
            return builder.build()
        except ConfigurationError as exc:
            logger.warning("configuration_rejected", code=exc.code, key=exc.key)
            raise

    def reset(self) -> None:
        """Drop every stored configuration."""
        self._store.reset()

    # ------------------------------------------------------------------
    # Request-level changes
    # ------------------------------------------------------------------

    def use_configuration(self, request: RequestContext, name: str) -> None:
        """Resolve ``request`` against the named configuration instead of the default."""
        self._store.get(name)
        request.configuration_name = name

    def opt_out_of_header(self, request: RequestContext, kind: HeaderKind | str) -> None:
        self._store.ensure_configured()
        request.overrides.opt_out(as_kind(kind))

    def opt_out_of_all(self, request: RequestContext) -> None:
        self._store.ensure_configured()
        request.overrides.opt_out_of_all()
        logger.debug("opted_out_of_all_headers", request_id=request.request_id)

    def override_header(self, request: RequestContext, kind: HeaderKind | str, value: Any) -> None:
        """Replace the stored value for ``kind`` for this request only."""
        self._store.ensure_configured()
        request.overrides.override(as_kind(kind), value)

    def append_header(self, request: RequestContext, kind: HeaderKind | str, partial_value: Any) -> None:
        """Append CSP directive sources for this request only."""
        self._store.ensure_configured()
        request.overrides.append(as_kind(kind), partial_value)

    # ------------------------------------------------------------------
    # Nonces
    # ------------------------------------------------------------------

    def nonce_for_script(self, request: RequestContext) -> str:
        """The request's nonce; marks ``script-src`` for nonce injection."""
        request.nonce_directives.add(SCRIPT_SRC)
        return self._nonces.nonce_for(request)

    def nonce_for_style(self, request: RequestContext) -> str:
        """The request's nonce; marks ``style-src`` for nonce injection."""
        request.nonce_directives.add(STYLE_SRC)
        return self._nonces.nonce_for(request)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve_headers(self, request: RequestContext) -> dict[str, str]:
        """Compute ``{header_name: header_value}`` for ``request``.

        Absent headers are omitted. A nonce is only injected when one was
        requested during this request and the client supports nonces.
        """
        config = self._store.get(request.configuration_name)
        resolved = resolve(config, request.overrides, request.is_secure)

        nonce = request.nonce if request.capability.supports_nonces else None
        headers = render_headers(resolved, nonce=nonce, nonce_directives=request.nonce_directives)
        logger.debug("headers_resolved", request_id=request.request_id, headers=sorted(headers))
        return headers
