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
"""Client capability detection from the User-Agent string.

Classification is table driven: ``NONCE_SUPPORT`` lists, in match order,
a browser family pattern and the first major version that honours CSP
Level 2 nonces. Anything unrecognized is treated as nonce-incapable.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class CapabilityTier(str, Enum):
    LEGACY = "legacy"
    NONCE = "nonce"

    @property
    def supports_nonces(self) -> bool:
        return self is CapabilityTier.NONCE


@dataclass(frozen=True)
class BrowserRule:
    family: str
    pattern: re.Pattern[str]
    min_nonce_version: int


def _rule(family: str, pattern: str, min_nonce_version: int) -> BrowserRule:
    return BrowserRule(family, re.compile(pattern), min_nonce_version)


# Order matters: Edge and Opera advertise Chrome, Chrome advertises Safari.
NONCE_SUPPORT: tuple[BrowserRule, ...] = (
    _rule("edge", r"Edge/(\d+)", 15),
    _rule("opera", r"OPR/(\d+)", 27),
    _rule("chrome", r"(?:Chrome|CriOS)/(\d+)", 40),
    _rule("firefox", r"(?:Firefox|FxiOS)/(\d+)", 31),
    _rule("safari", r"Version/(\d+)[.\d]* (?:Mobile/\S+ )?Safari/", 10),
)


def detect_browser(user_agent: str | None) -> tuple[str, int] | None:
    """Return ``(family, major_version)`` for the first matching rule."""
    if not user_agent:
        return None
    for rule in NONCE_SUPPORT:
        match = rule.pattern.search(user_agent)
        if match:
            return rule.family, int(match.group(1))
    return None


def classify(user_agent: str | None) -> CapabilityTier:
    """Classify a User-Agent string. Pure; unknown clients are ``LEGACY``."""
    detected = detect_browser(user_agent)
    if detected is None:
        return CapabilityTier.LEGACY
    family, version = detected
    threshold = next(rule.min_nonce_version for rule in NONCE_SUPPORT if rule.family == family)
    return CapabilityTier.NONCE if version >= threshold else CapabilityTier.LEGACY
