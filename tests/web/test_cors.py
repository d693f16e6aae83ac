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
"""Tests for the CorsPolicy value and the CORS filter behaviour over HTTP."""

from __future__ import annotations

import dataclasses

import pytest
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from movasafe.kernel.exceptions import InvalidCorsPolicyException
from movasafe.web.adapters.starlette.app import create_app
from movasafe.web.cors import CorsPolicy, parse_header_list
from movasafe.web.cors_provider import CorsPolicyProvider

LOCALHOST = "http://localhost:3000"
LAN = "http://192.168.206.1:3000"
EVIL = "http://evil.example"
ALL_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"]

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _Handler:
    """Route endpoint that counts how often application logic runs."""

    def __init__(self) -> None:
        self.calls = 0

    async def __call__(self, request: Request) -> JSONResponse:
        self.calls += 1
        return JSONResponse({"path": request.url.path, "method": request.method})


def _make_client(policy: CorsPolicy | None = None) -> tuple[TestClient, _Handler]:
    handler = _Handler()
    app = create_app(
        routes=[Route("/{path:path}", handler.__call__, methods=ALL_METHODS)],
        cors=policy or CorsPolicyProvider().build_policy(),
    )
    return TestClient(app), handler


# ---------------------------------------------------------------------------
# CorsPolicy value tests
# ---------------------------------------------------------------------------


class TestCorsPolicyDefaults:
    def test_defaults_mirror_spring_registration(self):
        policy = CorsPolicy()

        assert policy.path_pattern == "/**"
        assert policy.allowed_origins == ("*",)
        assert policy.allowed_methods == ("GET", "HEAD", "POST")
        assert policy.allowed_headers == ("*",)
        assert policy.allow_credentials is False
        assert policy.preflight_cache_seconds == 1800
        assert policy.exposed_headers == ()


class TestCorsPolicyFrozen:
    def test_cannot_modify_after_creation(self):
        policy = CorsPolicy()

        with pytest.raises(dataclasses.FrozenInstanceError):
            policy.allow_credentials = True  # type: ignore[misc]

        with pytest.raises(dataclasses.FrozenInstanceError):
            policy.preflight_cache_seconds = 1  # type: ignore[misc]

    def test_lists_are_frozen_to_tuples(self):
        policy = CorsPolicy(allowed_origins=[LOCALHOST], allowed_methods=["get", "post"])  # type: ignore[arg-type]

        assert policy.allowed_origins == (LOCALHOST,)
        assert policy.allowed_methods == ("GET", "POST")

    def test_trailing_slash_is_dropped_from_origins(self):
        policy = CorsPolicy(allowed_origins=(LOCALHOST + "/",))
        assert policy.allowed_origins == (LOCALHOST,)


class TestCorsPolicyInvariants:
    def test_wildcard_origin_with_credentials_is_rejected(self):
        with pytest.raises(InvalidCorsPolicyException) as exc_info:
            CorsPolicy(allowed_origins=("*",), allow_credentials=True)

        assert exc_info.value.code == "CORS_001"

    def test_wildcard_origin_without_credentials_is_accepted(self):
        policy = CorsPolicy(allowed_origins=("*",), allow_credentials=False)
        assert policy.allows_any_origin

    def test_negative_max_age_is_rejected(self):
        with pytest.raises(InvalidCorsPolicyException) as exc_info:
            CorsPolicy(allowed_origins=(LOCALHOST,), preflight_cache_seconds=-1)

        assert exc_info.value.code == "CORS_002"

    def test_empty_origin_list_is_rejected(self):
        with pytest.raises(InvalidCorsPolicyException) as exc_info:
            CorsPolicy(allowed_origins=())

        assert exc_info.value.code == "CORS_003"


class TestCorsPolicyMatching:
    def setup_method(self):
        self.policy = CorsPolicy(allowed_origins=(LOCALHOST, LAN), allow_credentials=True)

    def test_exact_origin_is_echoed(self):
        assert self.policy.check_origin(LOCALHOST) == LOCALHOST
        assert self.policy.check_origin(LAN) == LAN

    def test_origin_match_ignores_case(self):
        assert self.policy.check_origin("HTTP://LOCALHOST:3000") == "HTTP://LOCALHOST:3000"

    def test_other_port_does_not_match(self):
        assert self.policy.check_origin("http://localhost:3001") is None

    def test_unknown_or_missing_origin(self):
        assert self.policy.check_origin(EVIL) is None
        assert self.policy.check_origin(None) is None
        assert self.policy.check_origin("") is None

    def test_wildcard_policy_answers_star(self):
        assert CorsPolicy().check_origin(EVIL) == "*"

    def test_wildcard_headers_echo_request(self):
        assert self.policy.check_headers(["X-Token", "Content-Type"]) == ["X-Token", "Content-Type"]

    def test_explicit_headers_filter_request(self):
        policy = CorsPolicy(allowed_headers=("content-type",))
        assert policy.check_headers(["X-Token", "Content-Type"]) == ["Content-Type"]

    def test_parse_header_list(self):
        assert parse_header_list(" x-a ,x-b,, ") == ["x-a", "x-b"]
        assert parse_header_list(None) == []


# ---------------------------------------------------------------------------
# Integration tests: the admin portal policy over HTTP
# ---------------------------------------------------------------------------


class TestAllowedOriginSimpleRequest:
    def setup_method(self):
        self.client, self.handler = _make_client()

    def test_localhost_get_is_annotated(self):
        resp = self.client.get("/api/anything", headers={"Origin": LOCALHOST})

        assert resp.status_code == 200
        assert resp.json() == {"path": "/api/anything", "method": "GET"}
        assert resp.headers["access-control-allow-origin"] == LOCALHOST
        assert resp.headers["access-control-allow-credentials"] == "true"
        assert "Origin" in resp.headers["vary"]

    @pytest.mark.parametrize("method", ["post", "put", "patch", "delete"])
    def test_every_method_gets_exact_origin(self, method):
        resp = self.client.request(method.upper(), "/api/items/1", headers={"Origin": LAN})

        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == LAN
        assert resp.headers["access-control-allow-origin"] != "*"
        assert resp.headers["access-control-allow-credentials"] == "true"

    def test_no_expose_headers_by_default(self):
        resp = self.client.get("/", headers={"Origin": LOCALHOST})
        assert "access-control-expose-headers" not in resp.headers


class TestDisallowedOriginSimpleRequest:
    def setup_method(self):
        self.client, self.handler = _make_client()

    def test_evil_origin_gets_no_cors_headers(self):
        resp = self.client.get("/api/anything", headers={"Origin": EVIL})

        assert resp.status_code == 200
        assert self.handler.calls == 1
        assert "access-control-allow-origin" not in resp.headers
        assert "access-control-allow-credentials" not in resp.headers

    def test_request_without_origin_passes_untouched(self):
        resp = self.client.get("/api/anything")

        assert resp.status_code == 200
        assert "access-control-allow-origin" not in resp.headers


class TestPreflightRequest:
    def setup_method(self):
        self.client, self.handler = _make_client()

    def test_lan_preflight_short_circuits(self):
        resp = self.client.options(
            "/api/transactions",
            headers={
                "Origin": LAN,
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Authorization, Content-Type",
            },
        )

        assert 200 <= resp.status_code < 300
        assert self.handler.calls == 0
        assert resp.headers["access-control-allow-origin"] == LAN
        assert resp.headers["access-control-allow-methods"] == "GET, POST, PUT, DELETE, OPTIONS, PATCH"
        assert resp.headers["access-control-allow-headers"] == "Authorization, Content-Type"
        assert resp.headers["access-control-allow-credentials"] == "true"
        assert resp.headers["access-control-max-age"] == "3600"

    @pytest.mark.parametrize("requested", ["GET", "DELETE", "TRACE"])
    def test_methods_header_is_independent_of_requested_method(self, requested):
        resp = self.client.options(
            "/",
            headers={"Origin": LOCALHOST, "Access-Control-Request-Method": requested},
        )

        methods = {m.strip() for m in resp.headers["access-control-allow-methods"].split(",")}
        assert methods == set(ALL_METHODS)

    def test_preflight_without_requested_headers_omits_allow_headers(self):
        resp = self.client.options(
            "/",
            headers={"Origin": LOCALHOST, "Access-Control-Request-Method": "GET"},
        )

        assert resp.status_code == 200
        assert "access-control-allow-headers" not in resp.headers

    def test_disallowed_origin_preflight_is_refused(self):
        resp = self.client.options(
            "/api/anything",
            headers={"Origin": EVIL, "Access-Control-Request-Method": "GET"},
        )

        assert resp.status_code == 403
        assert resp.text == "Invalid CORS request"
        assert self.handler.calls == 0
        assert "access-control-allow-origin" not in resp.headers

    def test_options_without_origin_still_short_circuits(self):
        resp = self.client.options("/api/anything")

        assert resp.status_code == 200
        assert self.handler.calls == 0
        assert "access-control-allow-origin" not in resp.headers
        assert resp.headers["access-control-max-age"] == "3600"

    @pytest.mark.parametrize("path", ["/", "/api", "/api/users/42/roles", "/admin/settings"])
    def test_every_path_is_covered(self, path):
        resp = self.client.options(path, headers={"Origin": LOCALHOST})

        assert resp.status_code == 200
        assert resp.headers["access-control-max-age"] == "3600"
        assert self.handler.calls == 0


class TestCustomPolicy:
    def test_path_pattern_limits_the_policy(self):
        policy = CorsPolicy(path_pattern="/api/*", allowed_origins=(LOCALHOST,))
        client, handler = _make_client(policy)

        outside = client.get("/health", headers={"Origin": LOCALHOST})
        inside = client.get("/api/health", headers={"Origin": LOCALHOST})

        assert "access-control-allow-origin" not in outside.headers
        assert inside.headers["access-control-allow-origin"] == LOCALHOST

    def test_expose_headers_and_wildcard_origin(self):
        policy = CorsPolicy(exposed_headers=("X-Request-ID", "X-Total-Count"))
        client, _ = _make_client(policy)

        resp = client.get("/", headers={"Origin": EVIL})

        assert resp.headers["access-control-allow-origin"] == "*"
        assert resp.headers["access-control-expose-headers"] == "X-Request-ID, X-Total-Count"
        assert "access-control-allow-credentials" not in resp.headers

    def test_credentials_header_omitted_when_disabled(self):
        policy = CorsPolicy(allowed_origins=(LOCALHOST,), allow_credentials=False)
        client, _ = _make_client(policy)

        resp = client.options("/", headers={"Origin": LOCALHOST})

        assert resp.headers["access-control-allow-origin"] == LOCALHOST
        assert "access-control-allow-credentials" not in resp.headers
