# appbuilder/config.py
from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from pydantic import BaseModel, TypeAdapter, ValidationError

from appbuilder.errors import ConfigurationMissingError, ConfigurationValueError

logger = logging.getLogger("appbuilder.config")

SECTION_SEPARATOR = ":"


def _env_list(name: str, default: str) -> List[str]:
    return [v.strip() for v in os.getenv(name, default).split(",") if v.strip()]


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    # App
    app_name: str = os.getenv("APP_NAME", "appbuilder")
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8080"))

    # CORS
    cors_allow_origins: List[str] = _env_list("CORS_ALLOW_ORIGINS", "*")
    cors_allow_credentials: bool = _env_flag("CORS_ALLOW_CREDENTIALS")

    # HSTS: 30 days unless overridden
    hsts_max_age: int = int(os.getenv("HSTS_MAX_AGE", str(30 * 24 * 60 * 60)))
    hsts_include_subdomains: bool = _env_flag("HSTS_INCLUDE_SUBDOMAINS")
    hsts_preload: bool = _env_flag("HSTS_PRELOAD")

    # HTTPS redirection; None keeps the request's port
    https_redirect_port: Optional[int] = (
        int(os.environ["HTTPS_PORT"]) if os.getenv("HTTPS_PORT") else None
    )


settings = Settings()


@lru_cache(maxsize=None)
def _adapter(type_: Any) -> TypeAdapter:
    return TypeAdapter(type_)


def _type_name(type_: Any) -> str:
    return getattr(type_, "__name__", repr(type_))


class Configuration(Mapping[str, Any]):
    """
    Read-only key/value configuration with case-insensitive keys and two lookup
    modes: get_value_strict (missing -> ConfigurationMissingError) and get_value
    (missing -> default). Values are converted with pydantic in lax mode, so
    "true"/"1"/"yes" become True when a bool is requested.
    """

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values: Dict[str, Tuple[str, Any]] = {}
        for key, value in (values or {}).items():
            self._values[key.casefold()] = (key, value)

    @classmethod
    def from_env(cls, prefix: str = "", environ: Optional[Mapping[str, str]] = None) -> "Configuration":
        """
        Build from environment variables. Variables not starting with `prefix`
        are ignored, the prefix is stripped and "__" maps to the ":" section
        separator (APP_Logging__Level -> Logging:Level).
        """
        environ = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        for name, value in environ.items():
            if prefix and not name.casefold().startswith(prefix.casefold()):
                continue
            key = name[len(prefix):].replace("__", SECTION_SEPARATOR)
            if key:
                values[key] = value
        return cls(values)

    @classmethod
    def chain(cls, *sources: Mapping[str, Any]) -> "Configuration":
        """Layer several sources; later ones override earlier ones."""
        merged: Dict[str, Any] = {}
        for source in sources:
            for key in source.keys():
                # drop an earlier spelling of the same key
                for existing in [k for k in merged if k.casefold() == key.casefold()]:
                    del merged[existing]
                merged[key] = source[key]
        return cls(merged)

    # Mapping protocol
    def __getitem__(self, key: str) -> Any:
        return self._values[key.casefold()][1]

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._values.values())

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.casefold() in self._values

    def __repr__(self) -> str:
        return f"Configuration({dict(self.items())!r})"

    # Typed lookups
    def _raw(self, key: str) -> Any:
        entry = self._values.get(key.casefold())
        return None if entry is None else entry[1]

    def _convert(self, key: str, raw: Any, type_: Any) -> Any:
        # Any: hand back the raw value for the caller to classify
        if type_ is Any:
            return raw
        if isinstance(type_, type) and isinstance(raw, type_):
            return raw
        try:
            return _adapter(type_).validate_python(raw)
        except ValidationError as exc:
            raise ConfigurationValueError(key, raw, _type_name(type_)) from exc

    def get_value_strict(self, key: str, type_: Any = str) -> Any:
        raw = self._raw(key)
        if raw is None:
            raise ConfigurationMissingError(key)
        return self._convert(key, raw, type_)

    def get_value(self, key: str, type_: Any = str, default: Any = None) -> Any:
        """Defaulted lookup: never raises. Unconvertible values fall back to `default` with a warning."""
        raw = self._raw(key)
        if raw is None:
            return default
        try:
            return self._convert(key, raw, type_)
        except ConfigurationValueError:
            logger.warning(
                "Configuration key '%s' has value %r which is not a valid %s; using default %r",
                key,
                raw,
                _type_name(type_),
                default,
            )
            return default
