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
"""Application bootstrap — configuration, logging, and the web app."""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from movasafe.core.config import Config
from movasafe.logging.port import LoggingPort
from movasafe.logging.structlog_adapter import StructlogAdapter

if TYPE_CHECKING:
    from starlette.applications import Starlette
    from starlette.routing import BaseRoute

    from movasafe.web.cors import CorsPolicy

DEFAULT_CONFIG_PATH = Path("config") / "movasafe.yaml"
PROFILES_ENV = "MOVASAFE_PROFILES_ACTIVE"


class MovaSafeApplication:
    """Bootstraps the backend once per process.

    Startup sequence:
    1. Load configuration (``config/movasafe.yaml`` + profile overlays)
    2. Configure logging from ``movasafe.logging`` (structlog unless another
       :class:`LoggingPort` is supplied)
    3. Build the cross-origin policy from ``movasafe.web.cors``

    The policy is built here, once, and handed to :meth:`create_app`;
    it is never rebuilt per request.
    """

    def __init__(
        self,
        config: Config | None = None,
        config_path: str | Path | None = None,
        active_profiles: list[str] | None = None,
        logging_port: LoggingPort | None = None,
    ) -> None:
        if active_profiles is None:
            active_profiles = [
                p.strip() for p in os.environ.get(PROFILES_ENV, "").split(",") if p.strip()
            ]
        self._active_profiles = active_profiles

        if config is None:
            config = Config.from_file(config_path or DEFAULT_CONFIG_PATH, active_profiles=active_profiles)
        self.config = config

        self._logging: LoggingPort = logging_port or StructlogAdapter()
        self._logging.configure(self.config)
        self._logger = self._logging.get_logger("movasafe.core")

        for source in self.config.loaded_sources:
            self._logger.info("loaded_config", source=source)
        if active_profiles:
            self._logger.info("active_profiles", profiles=active_profiles)

        from movasafe.web.cors_provider import CorsPolicyProvider

        self._cors_policy = CorsPolicyProvider.from_config(self.config).build_policy()

    @property
    def cors_policy(self) -> CorsPolicy:
        return self._cors_policy

    @property
    def active_profiles(self) -> list[str]:
        return list(self._active_profiles)

    def create_app(self, routes: Sequence[BaseRoute] | None = None, debug: bool = False) -> Starlette:
        from movasafe.web.adapters.starlette.app import create_app

        app = create_app(debug=debug, routes=routes, cors=self._cors_policy)
        self._logger.info("application_ready", routes=len(app.routes))
        return app
