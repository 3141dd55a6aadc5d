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
"""Merges a stored configuration with a request's override record.

Per header kind, in order:

1. HSTS and HPKP are absent on plaintext requests.
2. Start from the stored setting, or the kind's default when unset.
3. Replay the request operations in call order: an opt-out makes the kind
   absent, an override replaces the value wholesale, an append merges CSP
   directives onto the current value. Appends never revive an opted-out kind.
4. Opted-out kinds, and unset kinds without a default, are omitted.

Resolution and serialization are total over validated input.
"""

from __future__ import annotations

from collections.abc import Set
from typing import Any

from secureheaders.configuration import Configuration
from secureheaders.headers import OPT_OUT, POLICIES, TRANSPORT_ONLY_KINDS, UNSET, ContentSecurityPolicy, HeaderKind
from secureheaders.overrides import Append, OptOut, Override, RequestOverrideRecord


def resolve_value(
    config: Configuration,
    record: RequestOverrideRecord,
    kind: HeaderKind,
    request_is_secure: bool,
) -> Any | None:
    """Final value for ``kind``, or ``None`` when the header is absent."""
    if kind in TRANSPORT_ONLY_KINDS and not request_is_secure:
        return None

    value = config.value_for(kind)
    for operation in record.operations(kind):
        if isinstance(operation, OptOut):
            value = OPT_OUT
        elif isinstance(operation, Override):
            value = POLICIES[kind].default_value if operation.value is UNSET else operation.value
        elif isinstance(operation, Append) and value is not OPT_OUT and value is not None:
            value = value.appended(operation.value)

    if value is OPT_OUT:
        return None
    return value


def resolve(
    config: Configuration,
    record: RequestOverrideRecord,
    request_is_secure: bool,
) -> dict[HeaderKind, Any]:
    """Resolved value for every present header kind."""
    resolved: dict[HeaderKind, Any] = {}
    for kind in POLICIES:
        value = resolve_value(config, record, kind, request_is_secure)
        if value is not None:
            resolved[kind] = value
    return resolved


def serialize(
    kind: HeaderKind,
    value: Any,
    nonce: str | None = None,
    nonce_directives: Set[str] = frozenset(),
) -> tuple[str, str]:
    """Render a resolved value as ``(header_name, header_value)``."""
    if kind is HeaderKind.CSP:
        return ContentSecurityPolicy.make_header(value, nonce=nonce, nonce_directives=frozenset(nonce_directives))
    return POLICIES[kind].make_header(value)


def render_headers(
    resolved: dict[HeaderKind, Any],
    nonce: str | None = None,
    nonce_directives: Set[str] = frozenset(),
) -> dict[str, str]:
    """Serialize every resolved header into a ``{header_name: value}`` mapping."""
    headers: dict[str, str] = {}
    for kind, value in resolved.items():
        name, header_value = serialize(kind, value, nonce=nonce, nonce_directives=nonce_directives)
        headers[name] = header_value
    return headers
