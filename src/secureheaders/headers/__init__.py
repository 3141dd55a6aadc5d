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
"""Header policies, one per header kind."""

from secureheaders.headers.base import OPT_OUT, UNSET, HeaderKind, HeaderPolicy
from secureheaders.headers.content_security_policy import ContentSecurityPolicy, ContentSecurityPolicyConfig
from secureheaders.headers.public_key_pins import HPKPSettings, PublicKeyPins
from secureheaders.headers.strict_transport_security import HSTSSettings, StrictTransportSecurity
from secureheaders.headers.x_content_type_options import XContentTypeOptions
from secureheaders.headers.x_download_options import XDownloadOptions
from secureheaders.headers.x_frame_options import XFrameOptions
from secureheaders.headers.x_permitted_cross_domain_policies import XPermittedCrossDomainPolicies
from secureheaders.headers.x_xss_protection import XXssProtection

POLICIES: dict[HeaderKind, type[HeaderPolicy]] = {
    policy.kind: policy
    for policy in (
        StrictTransportSecurity,
        PublicKeyPins,
        XFrameOptions,
        XContentTypeOptions,
        XXssProtection,
        XDownloadOptions,
        XPermittedCrossDomainPolicies,
        ContentSecurityPolicy,
    )
}
"""Header kind -> policy, in output order."""

TRANSPORT_ONLY_KINDS: frozenset[HeaderKind] = frozenset({HeaderKind.HSTS, HeaderKind.HPKP})
"""Kinds that are never emitted over a plaintext connection."""

__all__ = [
    "OPT_OUT",
    "POLICIES",
    "TRANSPORT_ONLY_KINDS",
    "UNSET",
    "ContentSecurityPolicy",
    "ContentSecurityPolicyConfig",
    "HPKPSettings",
    "HSTSSettings",
    "HeaderKind",
    "HeaderPolicy",
    "PublicKeyPins",
    "StrictTransportSecurity",
    "XContentTypeOptions",
    "XDownloadOptions",
    "XFrameOptions",
    "XPermittedCrossDomainPolicies",
    "XXssProtection",
]
