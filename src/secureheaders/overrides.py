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
"""Request-level override record.

Operations for a header kind are kept in call order. An opt-out or an
override is unconditional: it discards every earlier operation for that
kind. Appends accumulate on top of whatever unconditional operation (or
the stored configuration) is active when the request is resolved.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from secureheaders.headers import OPT_OUT, POLICIES, ContentSecurityPolicy, HeaderKind
from secureheaders.headers.content_security_policy import CSPAppend


@dataclass(frozen=True)
class OptOut:
    pass


@dataclass(frozen=True)
class Override:
    value: Any


@dataclass(frozen=True)
class Append:
    value: CSPAppend


Operation = Union[OptOut, Override, Append]


class RequestOverrideRecord:
    """Ordered per-kind operations recorded during one request.

    Every value is validated when it is recorded, so resolution never sees
    an invalid setting.
    """

    def __init__(self) -> None:
        self._operations: dict[HeaderKind, list[Operation]] = {}

    def opt_out(self, kind: HeaderKind) -> None:
        self._operations[HeaderKind(kind)] = [OptOut()]

    def opt_out_of_all(self) -> None:
        for kind in HeaderKind:
            self.opt_out(kind)

    def override(self, kind: HeaderKind, value: Any) -> None:
        kind = HeaderKind(kind)
        if value is OPT_OUT:
            self.opt_out(kind)
            return
        self._operations[kind] = [Override(POLICIES[kind].validate(value))]

    def append(self, kind: HeaderKind, partial: Any) -> None:
        kind = HeaderKind(kind)
        if kind is not HeaderKind.CSP:
            policy = POLICIES[kind]
            raise policy.fail(f"{policy.header_name} does not support appending, use an override", partial)
        self._operations.setdefault(kind, []).append(Append(ContentSecurityPolicy.validate_append(partial)))

    def operations(self, kind: HeaderKind) -> tuple[Operation, ...]:
        return tuple(self._operations.get(HeaderKind(kind), ()))

    def __contains__(self, kind: object) -> bool:
        return kind in self._operations

    def __bool__(self) -> bool:
        return bool(self._operations)
