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
"""Cross-origin policy value for MovaSafe web applications.

Framework-agnostic: only plain strings go in and out, so the Starlette
adapter is the single place that touches request/response objects.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from movasafe.kernel.exceptions import InvalidCorsPolicyException

ALL = "*"

# Request headers
ORIGIN = "Origin"
ACCESS_CONTROL_REQUEST_METHOD = "Access-Control-Request-Method"
ACCESS_CONTROL_REQUEST_HEADERS = "Access-Control-Request-Headers"

# Response headers
ACCESS_CONTROL_ALLOW_ORIGIN = "Access-Control-Allow-Origin"
ACCESS_CONTROL_ALLOW_METHODS = "Access-Control-Allow-Methods"
ACCESS_CONTROL_ALLOW_HEADERS = "Access-Control-Allow-Headers"
ACCESS_CONTROL_ALLOW_CREDENTIALS = "Access-Control-Allow-Credentials"
ACCESS_CONTROL_EXPOSE_HEADERS = "Access-Control-Expose-Headers"
ACCESS_CONTROL_MAX_AGE = "Access-Control-Max-Age"
VARY = "Vary"


def _as_tuple(values: Iterable[str] | str) -> tuple[str, ...]:
    if isinstance(values, str):
        values = [values]
    return tuple(v.strip() for v in values if v and v.strip())


@dataclass(frozen=True)
class CorsPolicy:
    """Immutable Cross-Origin Resource Sharing policy.

    Defaults mirror Spring's ``CorsRegistration``.  Lists passed in are
    frozen to tuples, origins lose any trailing ``/`` and methods are
    upper-cased.

    Raises:
        InvalidCorsPolicyException: when credentials are allowed together
            with the ``*`` origin, when ``preflight_cache_seconds`` is
            negative, or when no origin is configured.
    """

    path_pattern: str = "/**"
    allowed_origins: tuple[str, ...] = (ALL,)
    allowed_methods: tuple[str, ...] = ("GET", "HEAD", "POST")
    allowed_headers: tuple[str, ...] = (ALL,)
    allow_credentials: bool = False
    preflight_cache_seconds: int = 1800
    exposed_headers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        origins = tuple(o.rstrip("/") if o != ALL else o for o in _as_tuple(self.allowed_origins))
        object.__setattr__(self, "allowed_origins", origins)
        object.__setattr__(self, "allowed_methods", tuple(m.upper() for m in _as_tuple(self.allowed_methods)))
        object.__setattr__(self, "allowed_headers", _as_tuple(self.allowed_headers))
        object.__setattr__(self, "exposed_headers", _as_tuple(self.exposed_headers))

        if not origins:
            raise InvalidCorsPolicyException(
                "At least one allowed origin must be configured",
                code="CORS_003",
            )
        if self.allow_credentials and ALL in origins:
            raise InvalidCorsPolicyException(
                'When allow_credentials is true, allowed_origins cannot contain "*"; '
                "list the permitted origins explicitly",
                code="CORS_001",
                context={"allowed_origins": list(origins)},
            )
        if self.preflight_cache_seconds < 0:
            raise InvalidCorsPolicyException(
                f"preflight_cache_seconds must be >= 0, got {self.preflight_cache_seconds}",
                code="CORS_002",
                context={"preflight_cache_seconds": self.preflight_cache_seconds},
            )

    @property
    def allows_any_origin(self) -> bool:
        return ALL in self.allowed_origins

    @property
    def allows_any_header(self) -> bool:
        return ALL in self.allowed_headers

    def check_origin(self, origin: str | None) -> str | None:
        """Return the ``Access-Control-Allow-Origin`` value for *origin*, or ``None``.

        Matching is exact on scheme, host and port, ignoring case.  The
        origin is echoed back as the browser sent it.
        """
        if not origin:
            return None
        if self.allows_any_origin:
            return ALL
        candidate = origin.rstrip("/").lower()
        for allowed in self.allowed_origins:
            if allowed.lower() == candidate:
                return origin
        return None

    def check_headers(self, requested: Iterable[str]) -> list[str]:
        """Return the requested header names this policy permits, in request order."""
        names = [h.strip() for h in requested if h and h.strip()]
        if self.allows_any_header:
            return names
        allowed = {h.lower() for h in self.allowed_headers}
        return [h for h in names if h.lower() in allowed]

    def allow_methods_value(self) -> str:
        return ", ".join(self.allowed_methods)

    def expose_headers_value(self) -> str | None:
        return ", ".join(self.exposed_headers) if self.exposed_headers else None


def parse_header_list(value: str | None) -> list[str]:
    """Split a comma-separated header value (e.g. ``Access-Control-Request-Headers``)."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]
