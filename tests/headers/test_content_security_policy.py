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
"""Tests for Content-Security-Policy validation, merging and rendering."""

from __future__ import annotations

import pytest

from secureheaders.exceptions import ContentSecurityPolicyConfigError, CSPConfigError, UnknownDirectiveError
from secureheaders.headers.content_security_policy import (
    DATA_PROTOCOL,
    DEFAULT_SRC,
    SCRIPT_SRC,
    STYLE_SRC,
    ContentSecurityPolicy,
    ContentSecurityPolicyConfig,
    directive_name,
)


def _render(setting, **kwargs) -> tuple[str, str]:
    return ContentSecurityPolicy.make_header(ContentSecurityPolicy.validate(setting), **kwargs)


class TestDirectiveNames:
    def test_snake_and_header_forms(self) -> None:
        assert directive_name("script_src") == SCRIPT_SRC
        assert directive_name("script-src") == SCRIPT_SRC

    def test_unknown_directive(self) -> None:
        with pytest.raises(UnknownDirectiveError) as exc_info:
            directive_name("made_up_directive")
        assert exc_info.value.key == "made_up_directive"

    def test_unknown_directive_is_a_csp_error(self) -> None:
        assert issubclass(UnknownDirectiveError, ContentSecurityPolicyConfigError)
        assert CSPConfigError is ContentSecurityPolicyConfigError


class TestValidation:
    def test_scalar_directive_value_rejected(self) -> None:
        with pytest.raises(ContentSecurityPolicyConfigError):
            ContentSecurityPolicy.validate({"default_src": "123456"})

    def test_unknown_directive_rejected(self) -> None:
        with pytest.raises(UnknownDirectiveError):
            ContentSecurityPolicy.validate({"made_up_directive": "123456"})

    def test_non_mapping_rejected(self) -> None:
        with pytest.raises(ContentSecurityPolicyConfigError):
            ContentSecurityPolicy.validate("default-src 'self'")

    def test_empty_policy_rejected(self) -> None:
        with pytest.raises(ContentSecurityPolicyConfigError):
            ContentSecurityPolicy.validate({})

    @pytest.mark.parametrize("token", ["", "a b", "'self';", 42])
    def test_bad_tokens_rejected(self, token) -> None:
        with pytest.raises(ContentSecurityPolicyConfigError):
            ContentSecurityPolicy.validate({"default_src": [token]})

    def test_empty_source_list_rejected(self) -> None:
        with pytest.raises(ContentSecurityPolicyConfigError):
            ContentSecurityPolicy.validate({"img_src": []})

    def test_boolean_directive_requires_bool(self) -> None:
        with pytest.raises(ContentSecurityPolicyConfigError):
            ContentSecurityPolicy.validate({"default_src": ["'self'"], "upgrade_insecure_requests": ["yes"]})

    def test_report_only_requires_bool(self) -> None:
        with pytest.raises(ContentSecurityPolicyConfigError) as exc_info:
            ContentSecurityPolicy.validate({"default_src": ["'self'"], "report_only": "true"})
        assert exc_info.value.key == "report_only"

    def test_duplicate_directive_rejected(self) -> None:
        with pytest.raises(ContentSecurityPolicyConfigError):
            ContentSecurityPolicy.validate({"script_src": ["a.com"], "script-src": ["b.com"]})

    def test_tokens_are_deduplicated_in_order(self) -> None:
        value = ContentSecurityPolicy.validate({"script_src": ["a.com", "'self'", "a.com"]})
        assert value.get(SCRIPT_SRC) == ("a.com", "'self'")


class TestRendering:
    def test_default(self) -> None:
        assert ContentSecurityPolicy.make_header(ContentSecurityPolicy.default_value) == (
            "Content-Security-Policy",
            "default-src https:",
        )

    def test_directive_order_is_insertion_order(self) -> None:
        _, value = _render({"default_src": ["'self'"], "script_src": ["mycdn.com", "'unsafe-inline'"]})
        assert value == "default-src 'self'; script-src mycdn.com 'unsafe-inline'"

    def test_report_only(self) -> None:
        name, _ = _render({"default_src": ["'self'"], "report_only": True})
        assert name == "Content-Security-Policy-Report-Only"

    def test_boolean_and_sandbox_directives(self) -> None:
        _, value = _render(
            {
                "default_src": ["'self'"],
                "sandbox": [],
                "upgrade_insecure_requests": True,
                "block_all_mixed_content": False,
            }
        )
        assert value == "default-src 'self'; sandbox; upgrade-insecure-requests"

    def test_nonce_injected_into_requested_directives_only(self) -> None:
        _, value = _render(
            {"default_src": ["'self'"], "script_src": ["mycdn.com"], "style_src": ["'self'"]},
            nonce="abc",
            nonce_directives=frozenset({SCRIPT_SRC}),
        )
        assert value == "default-src 'self'; script-src mycdn.com 'nonce-abc'; style-src 'self'"

    def test_nonce_not_injected_into_missing_directive(self) -> None:
        _, value = _render(
            {"default_src": ["'self'"]},
            nonce="abc",
            nonce_directives=frozenset({SCRIPT_SRC, STYLE_SRC}),
        )
        assert value == "default-src 'self'"

    def test_rendering_does_not_mutate_policy(self) -> None:
        policy = ContentSecurityPolicy.validate({"script_src": ["mycdn.com"]})
        ContentSecurityPolicy.make_header(policy, nonce="abc", nonce_directives=frozenset({SCRIPT_SRC}))
        assert policy.get(SCRIPT_SRC) == ("mycdn.com",)


class TestAppending:
    def test_append_creates_missing_directive(self) -> None:
        base = ContentSecurityPolicy.default_value
        merged = base.appended(ContentSecurityPolicy.validate_append({"img_src": [DATA_PROTOCOL]}))
        assert ContentSecurityPolicy.make_header(merged)[1] == "default-src https:; img-src data:"

    def test_append_concatenates_and_deduplicates(self) -> None:
        base = ContentSecurityPolicy.validate({"default_src": ["'self'"], "script_src": ["a.com"]})
        merged = base.appended(ContentSecurityPolicy.validate_append({"script_src": ["b.com", "a.com"]}))
        merged = merged.appended(ContentSecurityPolicy.validate_append({"script_src": ["c.com"]}))
        assert merged.get(SCRIPT_SRC) == ("a.com", "b.com", "c.com")
        assert list(merged.directives) == [DEFAULT_SRC, SCRIPT_SRC]

    def test_append_returns_new_policy(self) -> None:
        base = ContentSecurityPolicy.validate({"script_src": ["a.com"]})
        base.appended(ContentSecurityPolicy.validate_append({"script_src": ["b.com"]}))
        assert base.get(SCRIPT_SRC) == ("a.com",)

    def test_append_can_switch_report_only(self) -> None:
        base = ContentSecurityPolicy.validate({"default_src": ["'self'"]})
        merged = base.appended(ContentSecurityPolicy.validate_append({"report_only": True}))
        assert merged.report_only is True
        assert merged.get(DEFAULT_SRC) == ("'self'",)

    def test_append_validates_directives(self) -> None:
        with pytest.raises(UnknownDirectiveError):
            ContentSecurityPolicy.validate_append({"made_up_directive": ["x"]})

    def test_policy_instance_accepted(self) -> None:
        policy = ContentSecurityPolicyConfig(directives={DEFAULT_SRC: ("'none'",)})
        assert ContentSecurityPolicy.validate(policy) is policy
