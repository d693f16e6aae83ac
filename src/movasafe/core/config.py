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
"""Type-safe configuration with YAML/TOML files, env vars, and dataclass binding."""

from __future__ import annotations

import dataclasses
import os
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, get_args, get_origin, get_type_hints

import yaml  # type: ignore[import-untyped]

from movasafe.kernel.exceptions import ConfigurationException

T = TypeVar("T")

_CONFIG_PROPERTIES_ATTR = "__movasafe_config_prefix__"
_ENV_PREFIX = "MOVASAFE_"
_TRUE_VALUES = ("true", "1", "yes")


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a dataclass as bindable to a configuration prefix.

    Usage:
        @config_properties(prefix="movasafe.web.cors")
        @dataclass
        class CorsProperties:
            max_age_seconds: int = 3600
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _CONFIG_PROPERTIES_ATTR, prefix)
        return cls

    return decorator


def env_key_for(key: str) -> str:
    """Map a dot-notation key to its environment override name.

    ``movasafe.web.cors.max_age_seconds`` -> ``MOVASAFE_WEB_CORS_MAX_AGE_SECONDS``
    """
    base = key.removeprefix("movasafe.")
    return _ENV_PREFIX + base.upper().replace(".", "_").replace("-", "_")


class Config:
    """Hierarchical configuration with dot-notation access and env var overrides.

    Priority (highest wins):
    1. Environment variables (MOVASAFE_SECTION_KEY format)
    2. Configuration dict / YAML / TOML file values
    3. Dataclass defaults
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._loaded_sources: list[str] = []

    @property
    def loaded_sources(self) -> list[str]:
        """List of config file paths that were loaded, in merge order."""
        return list(self._loaded_sources)

    def to_dict(self) -> dict[str, Any]:
        """Return a shallow copy of the raw configuration data."""
        return dict(self._data)

    @classmethod
    def from_file(cls, path: str | Path, active_profiles: list[str] | None = None) -> Config:
        """Load configuration from a YAML or TOML file plus profile overlays.

        For ``config/movasafe.yaml`` with profile ``dev`` the overlay
        ``config/movasafe-dev.yaml`` is merged on top when it exists.
        A missing base file yields an empty configuration.
        """
        path = Path(path)
        data: dict[str, Any] = {}
        sources: list[str] = []

        if path.exists():
            data = cls._load_config_data(path)
            sources.append(str(path))

            for profile in active_profiles or []:
                profile_path = path.parent / f"{path.stem}-{profile}{path.suffix}"
                if profile_path.exists():
                    data = cls._deep_merge(data, cls._load_config_data(profile_path))
                    sources.append(f"{profile_path} (profile: {profile})")

        instance = cls(data)
        instance._loaded_sources = sources
        return instance

    @staticmethod
    def _load_config_data(path: Path) -> dict[str, Any]:
        """Load config data from a YAML or TOML file."""
        try:
            if path.suffix == ".toml":
                with open(path, "rb") as f:
                    return tomllib.load(f) or {}
            with open(path) as f:
                return yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError, tomllib.TOMLDecodeError) as exc:
            raise ConfigurationException(
                f"Cannot read configuration file '{path}': {exc}",
                code="CONFIG_001",
                context={"path": str(path)},
            ) from exc

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Recursively merge override into base, with override values winning."""
        merged = dict(base)
        for key, value in override.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = Config._deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key, checking env vars first."""
        env_val = os.environ.get(env_key_for(key))
        if env_val is not None:
            return env_val

        current: Any = self._data
        for part in key.split("."):
            if isinstance(current, dict):
                current = current.get(part)
                if current is None:
                    return default
            else:
                return default
        return current

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Get all values under a prefix as a dict."""
        current: Any = self._data
        for part in prefix.split("."):
            if isinstance(current, dict):
                current = current.get(part, {})
            else:
                return {}
        return current if isinstance(current, dict) else {}

    def bind(self, config_cls: type[T]) -> T:
        """Bind configuration to a @config_properties dataclass.

        Each field is looked up as ``<prefix>.<field>`` so environment
        overrides apply per field.  Strings are coerced to the annotated
        ``int``, ``float``, ``bool``, or ``list``/``tuple`` (comma-separated).
        """
        prefix = getattr(config_cls, _CONFIG_PROPERTIES_ATTR, None)
        if prefix is None:
            raise ConfigurationException(
                f"{config_cls.__name__} is not decorated with @config_properties",
                code="CONFIG_002",
            )

        hints = get_type_hints(config_cls)
        kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(config_cls):  # type: ignore[arg-type]
            key = f"{prefix}.{field.name}"
            value = self.get(key)
            if value is None:
                continue
            try:
                kwargs[field.name] = _coerce(value, hints.get(field.name))
            except (TypeError, ValueError) as exc:
                raise ConfigurationException(
                    f"Invalid value for '{key}': {value!r}",
                    code="CONFIG_003",
                    context={"key": key, "value": value},
                ) from exc

        return config_cls(**kwargs)


def _coerce(value: Any, expected_type: Any) -> Any:
    """Coerce a raw config value to the annotated field type."""
    container = get_origin(expected_type)
    if container in (list, tuple):
        if isinstance(value, str):
            items: list[Any] = [p.strip() for p in value.split(",") if p.strip()]
        elif isinstance(value, (list, tuple)):
            items = list(value)
        else:
            raise TypeError(f"expected a list, got {type(value).__name__}")
        args = get_args(expected_type)
        if args and args[0] is str:
            items = [str(item) for item in items]
        return tuple(items) if container is tuple else items

    if expected_type is bool:
        if isinstance(value, str):
            return value.lower() in _TRUE_VALUES
        return bool(value)
    if expected_type is int:
        if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
            raise TypeError(f"expected an integer, got {value!r}")
        return int(value)
    if expected_type is float and isinstance(value, str):
        return float(value)
    return value
