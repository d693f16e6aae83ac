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
"""WebFilter protocol — the ``(request, call_next) -> response`` middleware shape.

Request and response are typed as ``Any`` so Starlette types stay in the
adapter layer.
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import Any, Protocol, runtime_checkable

# Concrete type: Callable[[Request], Coroutine[Any, Any, Response]]
CallNext = Callable[..., Coroutine[Any, Any, Any]]


@runtime_checkable
class WebFilter(Protocol):
    """A request filter run inside ``WebFilterChainMiddleware``.

    A filter may answer the request itself (short-circuit) or delegate to
    ``call_next`` and then adjust the response.
    """

    async def do_filter(self, request: Any, call_next: CallNext) -> Any: ...

    def should_not_filter(self, request: Any) -> bool:
        """Return ``True`` to skip this filter for the given request."""
        ...
