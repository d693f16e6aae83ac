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
"""CORS filter — applies a :class:`CorsPolicy` to every matching request."""

from __future__ import annotations

from typing import cast

import structlog
from starlette.datastructures import MutableHeaders
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from movasafe.web.ordering import HIGHEST_PRECEDENCE, order
from movasafe.web.cors import (
    ACCESS_CONTROL_ALLOW_CREDENTIALS,
    ACCESS_CONTROL_ALLOW_HEADERS,
    ACCESS_CONTROL_ALLOW_METHODS,
    ACCESS_CONTROL_ALLOW_ORIGIN,
    ACCESS_CONTROL_EXPOSE_HEADERS,
    ACCESS_CONTROL_MAX_AGE,
    ACCESS_CONTROL_REQUEST_HEADERS,
    ACCESS_CONTROL_REQUEST_METHOD,
    ORIGIN,
    VARY,
    CorsPolicy,
    parse_header_list,
)
from movasafe.web.filters import OncePerRequestFilter
from movasafe.web.ports.filter import CallNext

logger = structlog.get_logger("movasafe.web.cors")

_PREFLIGHT_VARY = (ORIGIN, ACCESS_CONTROL_REQUEST_METHOD, ACCESS_CONTROL_REQUEST_HEADERS)


@order(HIGHEST_PRECEDENCE + 200)
class CorsFilter(OncePerRequestFilter):
    """Answers preflight requests and annotates responses for allowed origins.

    ``OPTIONS`` never reaches the application: it is answered ``200`` with
    the policy headers, or ``403`` when the ``Origin`` is not allowed.  Any
    other method always proceeds; ``Access-Control-Allow-*`` headers are
    added only when the ``Origin`` is on the allow-list.
    """

    def __init__(self, policy: CorsPolicy) -> None:
        self._policy = policy
        self.url_patterns = [policy.path_pattern]

    @property
    def policy(self) -> CorsPolicy:
        return self._policy

    async def do_filter(self, request: Request, call_next: CallNext) -> Response:
        origin = request.headers.get(ORIGIN)
        if request.method == "OPTIONS":
            return self._preflight(request, origin)

        response = cast(Response, await call_next(request))
        _add_vary(response.headers, ORIGIN)

        allow_origin = self._policy.check_origin(origin)
        if allow_origin is None:
            if origin:
                logger.debug(
                    "cors_origin_rejected",
                    origin=origin,
                    method=request.method,
                    path=request.url.path,
                )
            return response

        response.headers[ACCESS_CONTROL_ALLOW_ORIGIN] = allow_origin
        if self._policy.allow_credentials:
            response.headers[ACCESS_CONTROL_ALLOW_CREDENTIALS] = "true"
        expose = self._policy.expose_headers_value()
        if expose is not None:
            response.headers[ACCESS_CONTROL_EXPOSE_HEADERS] = expose
        return response

    def _preflight(self, request: Request, origin: str | None) -> Response:
        requested_method = request.headers.get(ACCESS_CONTROL_REQUEST_METHOD)
        allow_origin = self._policy.check_origin(origin)

        if origin and allow_origin is None:
            logger.debug(
                "cors_origin_rejected",
                origin=origin,
                method=requested_method,
                path=request.url.path,
            )
            response: Response = PlainTextResponse("Invalid CORS request", status_code=403)
            _add_vary(response.headers, *_PREFLIGHT_VARY)
            return response

        logger.debug("cors_preflight", origin=origin, requested_method=requested_method)

        response = Response(status_code=200)
        headers = response.headers
        _add_vary(headers, *_PREFLIGHT_VARY)
        if allow_origin is not None:
            headers[ACCESS_CONTROL_ALLOW_ORIGIN] = allow_origin
        headers[ACCESS_CONTROL_ALLOW_METHODS] = self._policy.allow_methods_value()

        requested_headers = parse_header_list(request.headers.get(ACCESS_CONTROL_REQUEST_HEADERS))
        allowed_headers = self._policy.check_headers(requested_headers)
        if allowed_headers:
            headers[ACCESS_CONTROL_ALLOW_HEADERS] = ", ".join(allowed_headers)

        if self._policy.allow_credentials:
            headers[ACCESS_CONTROL_ALLOW_CREDENTIALS] = "true"
        headers[ACCESS_CONTROL_MAX_AGE] = str(self._policy.preflight_cache_seconds)
        return response


def _add_vary(headers: MutableHeaders, *names: str) -> None:
    """Merge *names* into the ``Vary`` header without duplicating entries."""
    current = [v.strip() for line in headers.getlist(VARY) for v in line.split(",") if v.strip()]
    seen = {v.lower() for v in current}
    for name in names:
        if name.lower() not in seen:
            current.append(name)
            seen.add(name.lower())
    if VARY in headers:
        del headers[VARY]
    headers[VARY] = ", ".join(current)
