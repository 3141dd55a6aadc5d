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
"""secureheaders — layered security header configuration and resolution.

Module-level functions operate on a process-wide :class:`SecureHeaders`
engine. Applications that need isolated engines (tests, multi-tenant
hosts) can instantiate :class:`SecureHeaders` directly.
"""

from __future__ import annotations

from typing import Any

from secureheaders.configuration import DEFAULT_CONFIG_NAME, Configuration, ConfigurationBuilder, ConfigurationStore
from secureheaders.engine import BuilderFn, SecureHeaders
from secureheaders.exceptions import (
    ConfigurationError,
    ContentSecurityPolicyConfigError,
    CSPConfigError,
    NotConfiguredError,
    PublicKeyPinsConfigError,
    SecureHeadersException,
    STSConfigError,
    UnknownConfigurationError,
    UnknownDirectiveError,
    XContentTypeOptionsConfigError,
    XDOConfigError,
    XFOConfigError,
    XPCDPConfigError,
    XXssProtectionConfigError,
)
from secureheaders.headers import OPT_OUT, UNSET, HeaderKind
from secureheaders.request import RequestContext
from secureheaders.user_agent import CapabilityTier, classify

__version__ = "0.1.0"

default_engine = SecureHeaders()


def configure_default(builder_fn: BuilderFn | None = None) -> Configuration:
    return default_engine.configure_default(builder_fn)


def configure_named(name: str, builder_fn: BuilderFn | None = None, base: str | None = None) -> Configuration:
    return default_engine.configure_named(name, builder_fn, base=base)


def use_configuration(request: RequestContext, name: str) -> None:
    default_engine.use_configuration(request, name)


def opt_out_of_header(request: RequestContext, kind: HeaderKind | str) -> None:
    default_engine.opt_out_of_header(request, kind)


def opt_out_of_all(request: RequestContext) -> None:
    default_engine.opt_out_of_all(request)


def override_header(request: RequestContext, kind: HeaderKind | str, value: Any) -> None:
    default_engine.override_header(request, kind, value)


def append_header(request: RequestContext, kind: HeaderKind | str, partial_value: Any) -> None:
    default_engine.append_header(request, kind, partial_value)


def nonce_for_script(request: RequestContext) -> str:
    return default_engine.nonce_for_script(request)


def nonce_for_style(request: RequestContext) -> str:
    return default_engine.nonce_for_style(request)


def resolve_headers(request: RequestContext) -> dict[str, str]:
    return default_engine.resolve_headers(request)


def reset() -> None:
    default_engine.reset()


__all__ = [
    "DEFAULT_CONFIG_NAME",
    "OPT_OUT",
    "UNSET",
    "CSPConfigError",
    "CapabilityTier",
    "Configuration",
    "ConfigurationBuilder",
    "ConfigurationError",
    "ConfigurationStore",
    "ContentSecurityPolicyConfigError",
    "HeaderKind",
    "NotConfiguredError",
    "PublicKeyPinsConfigError",
    "RequestContext",
    "STSConfigError",
    "SecureHeaders",
    "SecureHeadersException",
    "UnknownConfigurationError",
    "UnknownDirectiveError",
    "XContentTypeOptionsConfigError",
    "XDOConfigError",
    "XFOConfigError",
    "XPCDPConfigError",
    "XXssProtectionConfigError",
    "append_header",
    "classify",
    "configure_default",
    "configure_named",
    "default_engine",
    "nonce_for_script",
    "nonce_for_style",
    "opt_out_of_all",
    "opt_out_of_header",
    "override_header",
    "reset",
    "resolve_headers",
    "use_configuration",
]
