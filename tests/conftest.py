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
"""Shared fixtures for secureheaders tests."""

from __future__ import annotations

import logging

import pytest
import structlog

import secureheaders
from secureheaders import RequestContext, SecureHeaders
from secureheaders.logging import PACKAGE_LOGGER
from secureheaders.nonce import NonceManager

USER_AGENTS = {
    "chrome": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_10_1) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/41.0.2228.0 Safari/537.36"
    ),
    "firefox": "Mozilla/5.0 (Windows NT 6.1; WOW64; rv:40.0) Gecko/20100101 Firefox/40.1",
    "safari5": (
        "Mozilla/5.0 (Macintosh; U; Intel Mac OS X 10_6_8; de-at) AppleWebKit/533.21.1 "
        "(KHTML, like Gecko) Version/5.0.5 Safari/533.21.1"
    ),
    "safari10": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_12) AppleWebKit/602.1.50 "
        "(KHTML, like Gecko) Version/10.0 Safari/602.1.50"
    ),
    "edge12": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/42.0.2311.135 Safari/537.36 Edge/12.10240"
    ),
    "edge15": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/52.0.2743.116 Safari/537.36 Edge/15.15063"
    ),
    "opera": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/45.0.2454.85 Safari/537.36 OPR/32.0.1948.25"
    ),
    "ie11": "Mozilla/5.0 (Windows NT 6.3; Trident/7.0; rv:11.0) like Gecko",
}


class CountingTokens:
    """Deterministic nonce factory: nonce1, nonce2, ..."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        return f"nonce{self.calls}"


@pytest.fixture(autouse=True)
def _reset_default_engine():
    secureheaders.reset()
    yield
    secureheaders.reset()


@pytest.fixture(autouse=True)
def _restore_package_logger():
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    handlers, level, propagate = list(package_logger.handlers), package_logger.level, package_logger.propagate
    yield
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)
    package_logger.propagate = propagate
    logging.getLogger(f"{PACKAGE_LOGGER}.engine").setLevel(logging.NOTSET)
    structlog.reset_defaults()


@pytest.fixture
def tokens() -> CountingTokens:
    return CountingTokens()


@pytest.fixture
def engine(tokens: CountingTokens) -> SecureHeaders:
    return SecureHeaders(nonce_manager=NonceManager(token_factory=tokens))


@pytest.fixture
def secure_request() -> RequestContext:
    return RequestContext(is_secure=True)


@pytest.fixture
def user_agents() -> dict[str, str]:
    return USER_AGENTS
