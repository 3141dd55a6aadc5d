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
"""Content-Security-Policy.

A policy is an ordered directive table. Source-list directives map to an
ordered, de-duplicated tuple of source tokens; boolean directives map to
``True`` and are omitted when false. Directive order is insertion order
and is preserved through appends so output stays stable.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from secureheaders.exceptions import ContentSecurityPolicyConfigError, UnknownDirectiveError
from secureheaders.headers.base import HeaderKind, HeaderPolicy

HEADER_NAME = "Content-Security-Policy"
REPORT_ONLY_HEADER_NAME = "Content-Security-Policy-Report-Only"

# ---------------------------------------------------------------------------
# Directives and common sources
# ---------------------------------------------------------------------------
DEFAULT_SRC = "default-src"
BASE_URI = "base-uri"
CHILD_SRC = "child-src"
CONNECT_SRC = "connect-src"
FONT_SRC = "font-src"
FORM_ACTION = "form-action"
FRAME_ANCESTORS = "frame-ancestors"
FRAME_SRC = "frame-src"
IMG_SRC = "img-src"
MANIFEST_SRC = "manifest-src"
MEDIA_SRC = "media-src"
OBJECT_SRC = "object-src"
PLUGIN_TYPES = "plugin-types"
REPORT_URI = "report-uri"
SANDBOX = "sandbox"
SCRIPT_SRC = "script-src"
STYLE_SRC = "style-src"
WORKER_SRC = "worker-src"
UPGRADE_INSECURE_REQUESTS = "upgrade-insecure-requests"
BLOCK_ALL_MIXED_CONTENT = "block-all-mixed-content"

SOURCE_LIST_DIRECTIVES: frozenset[str] = frozenset({
    DEFAULT_SRC, BASE_URI, CHILD_SRC, CONNECT_SRC, FONT_SRC, FORM_ACTION,
    FRAME_ANCESTORS, FRAME_SRC, IMG_SRC, MANIFEST_SRC, MEDIA_SRC, OBJECT_SRC,
    PLUGIN_TYPES, REPORT_URI, SANDBOX, SCRIPT_SRC, STYLE_SRC, WORKER_SRC,
})
BOOLEAN_DIRECTIVES: frozenset[str] = frozenset({UPGRADE_INSECURE_REQUESTS, BLOCK_ALL_MIXED_CONTENT})
ALL_DIRECTIVES: frozenset[str] = SOURCE_LIST_DIRECTIVES | BOOLEAN_DIRECTIVES

# Directives that may legitimately be rendered without tokens.
_EMPTY_ALLOWED: frozenset[str] = frozenset({SANDBOX})

NONCE_DIRECTIVES: frozenset[str] = frozenset({SCRIPT_SRC, STYLE_SRC})

REPORT_ONLY = "report_only"

SELF = "'self'"
NONE = "'none'"
UNSAFE_INLINE = "'unsafe-inline'"
UNSAFE_EVAL = "'unsafe-eval'"
DATA_PROTOCOL = "data:"
BLOB_PROTOCOL = "blob:"
HTTPS_PROTOCOL = "https:"

DirectiveValue = tuple[str, ...] | bool


def directive_name(key: Any) -> str:
    """Map a configuration key (``script_src`` or ``script-src``) to a directive name."""
    if not isinstance(key, str):
        raise UnknownDirectiveError(f"Directive keys must be strings, got {key!r}", key=str(key), value=key)
    name = key.strip().lower().replace("_", "-")
    if name not in ALL_DIRECTIVES:
        raise UnknownDirectiveError(f"Unknown CSP directive '{key}'", key=key, value=key)
    return name


def nonce_source(nonce: str) -> str:
    return f"'nonce-{nonce}'"


def _dedupe(tokens: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(tokens))


@dataclass(frozen=True)
class ContentSecurityPolicyConfig:
    """Immutable, validated CSP value."""

    directives: Mapping[str, DirectiveValue] = field(default_factory=lambda: MappingProxyType({}))
    report_only: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.directives, MappingProxyType):
            object.__setattr__(self, "directives", MappingProxyType(dict(self.directives)))

    @property
    def header_name(self) -> str:
        return REPORT_ONLY_HEADER_NAME if self.report_only else HEADER_NAME

    def get(self, name: str) -> DirectiveValue | None:
        return self.directives.get(name)

    def appended(self, partial: CSPAppend) -> ContentSecurityPolicyConfig:
        """Return a new policy with ``partial`` merged on top.

        Tokens are concatenated onto existing directives and de-duplicated;
        directives missing from this policy are added after the existing ones.
        """
        merged: dict[str, DirectiveValue] = dict(self.directives)
        for name, value in partial.directives.items():
            existing = merged.get(name)
            if isinstance(value, bool) or not isinstance(existing, tuple):
                merged[name] = value
            else:
                merged[name] = _dedupe((*existing, *value))
        report_only = self.report_only if partial.report_only is None else partial.report_only
        return ContentSecurityPolicyConfig(directives=merged, report_only=report_only)


@dataclass(frozen=True)
class CSPAppend:
    """A validated partial policy used by request-level appends."""

    directives: Mapping[str, DirectiveValue]
    report_only: bool | None = None


class ContentSecurityPolicy(HeaderPolicy):
    kind = HeaderKind.CSP
    header_name = HEADER_NAME
    error_class = ContentSecurityPolicyConfigError
    default_value = ContentSecurityPolicyConfig(directives={DEFAULT_SRC: (HTTPS_PROTOCOL,)})

    @classmethod
    def validate_value(cls, value: Any) -> ContentSecurityPolicyConfig:
        if isinstance(value, ContentSecurityPolicyConfig):
            return value
        directives, report_only = cls._validate_mapping(value)
        if not directives:
            raise cls.fail("A Content-Security-Policy needs at least one directive", value)
        return ContentSecurityPolicyConfig(directives=directives, report_only=bool(report_only))

    @classmethod
    def validate_append(cls, value: Any) -> CSPAppend:
        """Validate a partial policy for appending onto a resolved one."""
        if isinstance(value, CSPAppend):
            return value
        if isinstance(value, ContentSecurityPolicyConfig):
            return CSPAppend(directives=value.directives, report_only=None)
        directives, report_only = cls._validate_mapping(value)
        return CSPAppend(directives=MappingProxyType(directives), report_only=report_only)

    @classmethod
    def _validate_mapping(cls, value: Any) -> tuple[dict[str, DirectiveValue], bool | None]:
        if not isinstance(value, Mapping):
            raise cls.fail(f"{HEADER_NAME} must be a mapping of directives, got {type(value).__name__}", value)

        directives: dict[str, DirectiveValue] = {}
        report_only: bool | None = None
        for key, raw in value.items():
            if key == REPORT_ONLY:
                if not isinstance(raw, bool):
                    raise cls.fail("report_only must be a boolean", raw, key=REPORT_ONLY)
                report_only = raw
                continue
            name = directive_name(key)
            if name in directives:
                raise cls.fail(f"Directive '{name}' is configured more than once", raw, key=str(key))
            if name in BOOLEAN_DIRECTIVES:
                if not isinstance(raw, bool):
                    raise cls.fail(f"'{name}' must be a boolean, got {raw!r}", raw, key=str(key))
                if raw:
                    directives[name] = True
                continue
            directives[name] = cls._validate_sources(name, raw, key)
        return directives, report_only

    @classmethod
    def _validate_sources(cls, name: str, raw: Any, key: Any) -> tuple[str, ...]:
        if isinstance(raw, (str, bytes)) or not isinstance(raw, (list, tuple)):
            raise cls.fail(f"'{name}' must be a list of source tokens, got {raw!r}", raw, key=str(key))
        if not raw and name not in _EMPTY_ALLOWED:
            raise cls.fail(f"'{name}' must have at least one source, use [\"{NONE}\"] to block all", raw, key=str(key))
        for token in raw:
            if not isinstance(token, str) or not token or any(c.isspace() or c in ";," for c in token):
                raise cls.fail(f"Invalid source {token!r} for '{name}'", raw, key=str(key))
        return _dedupe(raw)

    @classmethod
    def make_header(
        cls,
        value: ContentSecurityPolicyConfig,
        nonce: str | None = None,
        nonce_directives: frozenset[str] = frozenset(),
    ) -> tuple[str, str]:
        """Render the policy.

        When ``nonce`` is given, ``'nonce-<value>'`` is appended to each
        directive in ``nonce_directives`` that the policy defines. The policy
        itself is never modified.
        """
        rendered: list[str] = []
        for name, tokens in value.directives.items():
            if tokens is True:
                rendered.append(name)
                continue
            if nonce is not None and name in nonce_directives:
                tokens = (*tokens, nonce_source(nonce))
            rendered.append(" ".join((name, *tokens)))
        return value.header_name, "; ".join(rendered)
