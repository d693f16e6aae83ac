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
"""Cross-origin configuration properties."""

from __future__ import annotations

from dataclasses import dataclass, field

from movasafe.core.config import config_properties

# Admin portal frontends (local dev server and the LAN address it is served on).
DEFAULT_ALLOWED_ORIGINS = ["http://localhost:3000", "http://192.168.206.1:3000"]
DEFAULT_ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"]


@config_properties(prefix="movasafe.web.cors")
@dataclass
class CorsProperties:
    """Configuration for the cross-origin policy (movasafe.web.cors.*)."""

    path_pattern: str = "/**"
    allowed_origins: list[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS))
    allowed_methods: list[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_METHODS))
    allowed_headers: list[str] = field(default_factory=lambda: ["*"])
    allow_credentials: bool = True
    max_age_seconds: int = 3600
    exposed_headers: list[str] = field(default_factory=list)
