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
"""MovaSafe Web — cross-origin policy and the request filter chain.

Framework-agnostic types are exported directly; the Starlette adapter
exports are re-exported for convenience.
"""

# Framework-agnostic exports
from movasafe.web.cors import CorsPolicy
from movasafe.web.filters import OncePerRequestFilter
from movasafe.web.ordering import HIGHEST_PRECEDENCE, order
from movasafe.web.ports.filter import CallNext, WebFilter

# Default adapter (Starlette) re-exports
from movasafe.web.adapters.starlette import (
    CorsFilter,
    RequestLoggingFilter,
    WebFilterChainMiddleware,
    create_app,
)
from movasafe.web.cors_provider import CorsPolicyProvider

__all__ = [
    # Framework-agnostic
    "CallNext",
    "CorsPolicy",
    "HIGHEST_PRECEDENCE",
    "OncePerRequestFilter",
    "WebFilter",
    "order",
    # Default adapter (Starlette)
    "CorsFilter",
    "CorsPolicyProvider",
    "RequestLoggingFilter",
    "WebFilterChainMiddleware",
    "create_app",
]
