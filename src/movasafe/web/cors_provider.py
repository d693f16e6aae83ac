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
"""CorsPolicyProvider — builds the cross-origin policy and installs it on a server.

Usage::

    app = Starlette(routes=...)
    policy = CorsPolicyProvider().build_policy()
    CorsPolicyProvider.register(policy, app)
"""

from __future__ import annotations

import structlog
from starlette.applications import Starlette

from movasafe.config.properties.cors import CorsProperties
from movasafe.core.config import Config
from movasafe.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from movasafe.web.adapters.starlette.filters.cors_filter import CorsFilter
from movasafe.web.cors import CorsPolicy

logger = structlog.get_logger("movasafe.web.cors")


class CorsPolicyProvider:
    """Produces the single :class:`CorsPolicy` of the application.

    Without properties the provider yields the admin portal policy: every
    path, the two portal origins, ``GET POST PUT DELETE OPTIONS PATCH``,
    any request header, credentials allowed and a one hour preflight cache.
    """

    def __init__(self, properties: CorsProperties | None = None) -> None:
        self._properties = properties or CorsProperties()

    @classmethod
    def from_config(cls, config: Config) -> CorsPolicyProvider:
        """Create a provider from the ``movasafe.web.cors`` configuration section."""
        return cls(config.bind(CorsProperties))

    @property
    def properties(self) -> CorsProperties:
        return self._properties

    def build_policy(self) -> CorsPolicy:
        props = self._properties
        return CorsPolicy(
            path_pattern=props.path_pattern,
            allowed_origins=tuple(props.allowed_origins),
            allowed_methods=tuple(props.allowed_methods),
            allowed_headers=tuple(props.allowed_headers),
            allow_credentials=props.allow_credentials,
            preflight_cache_seconds=props.max_age_seconds,
            exposed_headers=tuple(props.exposed_headers),
        )

    @staticmethod
    def register(policy: CorsPolicy, server: Starlette) -> CorsFilter:
        """Install *policy* as the outermost filter of *server*'s middleware stack.

        Must be called before the application serves its first request.
        Returns the installed filter.
        """
        cors_filter = CorsFilter(policy)
        server.add_middleware(WebFilterChainMiddleware, filters=[cors_filter])
        logger.info(
            "cors_policy_registered",
            path_pattern=policy.path_pattern,
            origins=list(policy.allowed_origins),
            methods=list(policy.allowed_methods),
            allow_credentials=policy.allow_credentials,
            max_age=policy.preflight_cache_seconds,
        )
        return cors_filter
