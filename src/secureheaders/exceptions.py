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
"""Unified exception hierarchy for secureheaders.

All errors are raised synchronously at the point of misuse.

Categories:
- NotConfiguredError: an operation ran before a default configuration exists
- ConfigurationError: a header setting failed its kind-specific validation
"""

from __future__ import annotations

from typing import Any

# =============================================================================
# Base Exception
# =============================================================================


class SecureHeadersException(Exception):
    """Base exception for all secureheaders errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "NOT_CONFIGURED").
        context: Arbitrary key-value pairs for diagnostics.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Lifecycle Exceptions
# =============================================================================


class NotConfiguredError(SecureHeadersException):
    """No default configuration has been stored yet."""

    def __init__(self, message: str | None = None, context: dict | None = None) -> None:
        super().__init__(
            message or "Default configuration has not been set. Call configure_default() first.",
            code="NOT_CONFIGURED",
            context=context,
        )


class UnknownConfigurationError(NotConfiguredError):
    """A request selected a named configuration that was never stored."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"No configuration named '{name}' has been set",
            context={"name": name},
        )


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(SecureHeadersException, ValueError):
    """A header setting failed validation.

    Subclasses are specific to one header kind and carry the offending
    ``key`` and ``value`` in ``context``.
    """

    default_code: str = "CONFIG_ERROR"

    def __init__(
        self,
        message: str,
        key: str | None = None,
        value: Any = None,
        context: dict | None = None,
    ) -> None:
        ctx = {"key": key, "value": value}
        if context:
            ctx.update(context)
        super().__init__(message, code=self.default_code, context=ctx)

    @property
    def key(self) -> str | None:
        return self.context.get("key")

    @property
    def value(self) -> Any:
        return self.context.get("value")


class STSConfigError(ConfigurationError):
    """Invalid Strict-Transport-Security setting."""

    default_code = "HSTS_CONFIG"


class PublicKeyPinsConfigError(ConfigurationError):
    """Invalid Public-Key-Pins setting."""

    default_code = "HPKP_CONFIG"


class XFOConfigError(ConfigurationError):
    """Invalid X-Frame-Options setting."""

    default_code = "XFO_CONFIG"


class XContentTypeOptionsConfigError(ConfigurationError):
    """Invalid X-Content-Type-Options setting."""

    default_code = "XCTO_CONFIG"


class XXssProtectionConfigError(ConfigurationError):
    """Invalid X-XSS-Protection setting."""

    default_code = "XXSS_CONFIG"


class XDOConfigError(ConfigurationError):
    """Invalid X-Download-Options setting."""

    default_code = "XDO_CONFIG"


class XPCDPConfigError(ConfigurationError):
    """Invalid X-Permitted-Cross-Domain-Policies setting."""

    default_code = "XPCDP_CONFIG"


class ContentSecurityPolicyConfigError(ConfigurationError):
    """Invalid Content-Security-Policy setting."""

    default_code = "CSP_CONFIG"


CSPConfigError = ContentSecurityPolicyConfigError


class UnknownDirectiveError(ContentSecurityPolicyConfigError):
    """A CSP directive name is not part of the recognized directive set."""

    default_code = "CSP_UNKNOWN_DIRECTIVE"
