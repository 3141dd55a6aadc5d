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
"""Tests for the per-header validators and serializers (all but CSP)."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from secureheaders.exceptions import (
    ConfigurationError,
    PublicKeyPinsConfigError,
    STSConfigError,
    XContentTypeOptionsConfigError,
    XDOConfigError,
    XFOConfigError,
    XPCDPConfigError,
    XXssProtectionConfigError,
)
from secureheaders.headers import (
    OPT_OUT,
    POLICIES,
    UNSET,
    HeaderKind,
    HPKPSettings,
    HSTSSettings,
    PublicKeyPins,
    StrictTransportSecurity,
    XContentTypeOptions,
    XDownloadOptions,
    XFrameOptions,
    XPermittedCrossDomainPolicies,
    XXssProtection,
)

EXAMPLE_HPKP = {
    "max_age": 1_000_000,
    "include_subdomains": True,
    "report_uri": "//example.com/uri-directive",
    "pins": [{"sha256": "abc"}, {"sha256": "123"}],
}


class TestPolicyRegistry:
    def test_every_kind_has_a_policy(self) -> None:
        assert set(POLICIES) == set(HeaderKind)

    def test_sentinels_pass_through_validation(self) -> None:
        for policy in POLICIES.values():
            assert policy.validate(OPT_OUT) is OPT_OUT
            assert policy.validate(UNSET) is UNSET

    def test_errors_are_value_errors(self) -> None:
        assert issubclass(STSConfigError, ConfigurationError)
        assert issubclass(STSConfigError, ValueError)


class TestStrictTransportSecurity:
    def test_default(self) -> None:
        assert StrictTransportSecurity.make_header(StrictTransportSecurity.default_value) == (
            "Strict-Transport-Security",
            "max-age=631138519",
        )

    def test_string_form(self) -> None:
        value = StrictTransportSecurity.validate("max-age=123456; includeSubDomains; preload")
        assert value == HSTSSettings(max_age=123456, include_subdomains=True, preload=True)
        assert StrictTransportSecurity.make_header(value)[1] == "max-age=123456; includeSubDomains; preload"

    def test_string_form_is_case_insensitive(self) -> None:
        value = StrictTransportSecurity.validate("max-age=10; includesubdomains")
        assert value.include_subdomains is True

    def test_mapping_form(self) -> None:
        value = StrictTransportSecurity.validate({"max_age": 86400, "preload": True})
        assert StrictTransportSecurity.make_header(value)[1] == "max-age=86400; preload"

    @pytest.mark.parametrize(
        "setting",
        ["lol", "max-age=", "max-age=-1", "max-age=10; preload; preload", 12345, ["max-age=1"]],
    )
    def test_rejects_invalid(self, setting) -> None:
        with pytest.raises(STSConfigError) as exc_info:
            StrictTransportSecurity.validate(setting)
        assert exc_info.value.key == "hsts"
        assert exc_info.value.value == setting

    def test_rejects_free_text_max_age_in_mapping(self) -> None:
        with pytest.raises(STSConfigError) as exc_info:
            StrictTransportSecurity.validate({"max_age": "lol"})
        assert "max_age" in str(exc_info.value)
        assert exc_info.value.context["errors"]

    def test_rejects_numeric_string_max_age(self) -> None:
        with pytest.raises(STSConfigError):
            StrictTransportSecurity.validate({"max_age": "123"})

    def test_rejects_unknown_field(self) -> None:
        with pytest.raises(STSConfigError):
            StrictTransportSecurity.validate({"max_age": 1, "include_sub_domains": True})

    def test_settings_are_frozen(self) -> None:
        value = StrictTransportSecurity.validate("max-age=1")
        with pytest.raises(ValidationError):
            value.max_age = 2  # type: ignore[misc]


class TestPublicKeyPins:
    def test_renders_pins_in_order_with_optional_clauses(self) -> None:
        value = PublicKeyPins.validate(EXAMPLE_HPKP)
        assert PublicKeyPins.make_header(value) == (
            "Public-Key-Pins",
            'max-age=1000000; pin-sha256="abc"; pin-sha256="123"; '
            'report-uri="//example.com/uri-directive"; includeSubDomains',
        )

    def test_minimal(self) -> None:
        value = PublicKeyPins.validate({"max_age": 10, "pins": [{"sha256": "abc"}]})
        assert PublicKeyPins.make_header(value)[1] == 'max-age=10; pin-sha256="abc"'

    def test_report_only_header_name(self) -> None:
        value = PublicKeyPins.validate({**EXAMPLE_HPKP, "report_only": True})
        assert PublicKeyPins.make_header(value)[0] == "Public-Key-Pins-Report-Only"

    def test_has_no_default(self) -> None:
        assert PublicKeyPins.default_value is None

    @pytest.mark.parametrize(
        "setting",
        [
            "lol",
            {"pins": [{"sha256": "abc"}]},
            {"max_age": 10, "pins": []},
            {"max_age": 10, "pins": [{"sha1": "abc"}]},
            {"max_age": 10, "pins": [{"sha256": "abc"}], "include_subdomains": "yes"},
        ],
    )
    def test_rejects_invalid(self, setting) -> None:
        with pytest.raises(PublicKeyPinsConfigError):
            PublicKeyPins.validate(setting)

    def test_accepts_settings_instance(self) -> None:
        value = PublicKeyPins.validate(EXAMPLE_HPKP)
        assert isinstance(value, HPKPSettings)
        assert PublicKeyPins.validate(value) is value


class TestXFrameOptions:
    @pytest.mark.parametrize(
        ("setting", "expected"),
        [
            ("DENY", "DENY"),
            ("sameorigin", "SAMEORIGIN"),
            ("allow-from https://example.com", "ALLOW-FROM https://example.com"),
            ("allow-from\thttps://example.com/", "ALLOW-FROM https://example.com/"),
            ("Allow-From   https://Example.com/Path", "ALLOW-FROM https://Example.com/Path"),
        ],
    )
    def test_accepts(self, setting: str, expected: str) -> None:
        assert XFrameOptions.make_header(XFrameOptions.validate(setting)) == ("X-Frame-Options", expected)

    @pytest.mark.parametrize("setting", ["NOPE", "ALLOW-FROM", "", None, 1])
    def test_rejects(self, setting) -> None:
        with pytest.raises(XFOConfigError):
            XFrameOptions.validate(setting)


class TestSimpleTokenHeaders:
    def test_x_content_type_options(self) -> None:
        assert XContentTypeOptions.validate("nosniff") == "nosniff"
        with pytest.raises(XContentTypeOptionsConfigError):
            XContentTypeOptions.validate("lol")

    @pytest.mark.parametrize("setting", ["0", "1", "1; mode=block", "1; mode=block; report=https://r.example.com"])
    def test_x_xss_protection_accepts(self, setting: str) -> None:
        assert XXssProtection.validate(setting) == setting

    @pytest.mark.parametrize("setting", ["lol", "2", "1; mode=allow"])
    def test_x_xss_protection_rejects(self, setting: str) -> None:
        with pytest.raises(XXssProtectionConfigError):
            XXssProtection.validate(setting)

    def test_x_download_options(self) -> None:
        assert XDownloadOptions.make_header(XDownloadOptions.validate("noopen")) == ("X-Download-Options", "noopen")
        with pytest.raises(XDOConfigError):
            XDownloadOptions.validate("lol")

    @pytest.mark.parametrize("setting", ["none", "master-only", "by-content-type", "by-ftp-filename", "all"])
    def test_x_permitted_cross_domain_policies_accepts(self, setting: str) -> None:
        assert XPermittedCrossDomainPolicies.validate(setting) == setting

    def test_x_permitted_cross_domain_policies_rejects(self) -> None:
        with pytest.raises(XPCDPConfigError) as exc_info:
            XPermittedCrossDomainPolicies.validate("lol")
        assert exc_info.value.key == "x_permitted_cross_domain_policies"
