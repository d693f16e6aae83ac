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
"""MovaSafe web application factory built on Starlette."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.routing import BaseRoute

from movasafe.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from movasafe.web.adapters.starlette.filters import RequestLoggingFilter
from movasafe.web.ports.filter import WebFilter

if TYPE_CHECKING:
    from movasafe.web.cors import CorsPolicy


def create_app(
    debug: bool = False,
    routes: Sequence[BaseRoute] | None = None,
    filters: Sequence[WebFilter] | None = None,
    cors: CorsPolicy | None = None,
    lifespan: object | None = None,
) -> Starlette:
    """Create a Starlette application with the MovaSafe filter chain.

    Includes:
    - WebFilter chain (request logging + caller-supplied filters, by ``@order``)
    - CORS policy, registered outermost (when ``cors`` is provided)
    """
    chain: list[WebFilter] = [RequestLoggingFilter(), *(filters or [])]

    app = Starlette(
        debug=debug,
        routes=list(routes or []),
        middleware=[Middleware(WebFilterChainMiddleware, filters=chain)],
        lifespan=lifespan,  # type: ignore[arg-type]
    )

    if cors is not None:
        from movasafe.web.cors_provider import CorsPolicyProvider

        CorsPolicyProvider.register(cors, app)

    return app
