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
"""WebFilterChainMiddleware — pure ASGI middleware running a chain of WebFilters."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, cast

from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from movasafe.web.ordering import sort_by_order
from movasafe.web.ports.filter import CallNext, WebFilter


class WebFilterChainMiddleware:
    """Runs :class:`WebFilter` instances, sorted by ``@order``, around the app.

    Filters whose ``should_not_filter()`` returns ``True`` are skipped.  The
    downstream response is buffered into a :class:`Response` so filters can
    read and change its headers.  Non-HTTP scopes pass straight through.
    """

    def __init__(self, app: ASGIApp, filters: Sequence[WebFilter] = ()) -> None:
        self.app = app
        self._filters: list[WebFilter] = sort_by_order(filters)

    @property
    def filters(self) -> list[WebFilter]:
        return list(self._filters)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        chain: CallNext = self._terminal(scope, receive)
        for web_filter in reversed(self._filters):
            chain = _wrap(web_filter, chain)

        response = cast(Response, await chain(Request(scope, receive, send)))
        await response(scope, receive, send)

    def _terminal(self, scope: Scope, receive: Receive) -> CallNext:
        """End of the chain: run the downstream app and capture what it sends."""

        async def _call_app(request: Any) -> Response:
            status_code = 200
            raw_headers: list[tuple[bytes, bytes]] = []
            body = bytearray()

            async def _capture(message: Message) -> None:
                nonlocal status_code, raw_headers
                if message["type"] == "http.response.start":
                    status_code = message["status"]
                    raw_headers = list(message.get("headers", []))
                elif message["type"] == "http.response.body":
                    body.extend(message.get("body", b""))

            await self.app(scope, receive, _capture)

            response = Response(content=bytes(body), status_code=status_code)
            response.raw_headers[:] = raw_headers
            return response

        return _call_app


def _wrap(web_filter: WebFilter, next_call: CallNext) -> CallNext:
    async def _inner(request: Request) -> Response:
        if web_filter.should_not_filter(request):
            return cast(Response, await next_call(request))
        return cast(Response, await web_filter.do_filter(request, next_call))

    return _inner
