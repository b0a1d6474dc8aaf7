# appbuilder/errors.py
from __future__ import annotations

from typing import Any, Iterable, Optional


class ConfigurationError(RuntimeError):
    """Base class for configuration resolution failures raised at startup."""

    def __init__(self, message: str, *, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class ConfigurationMissingError(ConfigurationError):
    """A required configuration key is absent."""

    def __init__(self, key: str):
        super().__init__(f"Required configuration key '{key}' is missing", key=key)


class ConfigurationValueError(ConfigurationError):
    """A configuration value is present but cannot be converted to the requested type."""

    def __init__(self, key: str, value: Any, type_name: str):
        super().__init__(
            f"Configuration key '{key}' has value {value!r} which is not a valid {type_name}",
            key=key,
        )
        self.value = value
        self.type_name = type_name


class InvalidEnumValueError(ConfigurationError, ValueError):
    """A configured value does not match any variant of a closed enum such as DeployEnvironment."""

    def __init__(self, value: Any, allowed: Iterable[str], *, enum_name: str = "DeployEnvironment"):
        self.value = value
        self.allowed = tuple(allowed)
        super().__init__(
            f"{value!r} is not a valid {enum_name}; expected one of: {', '.join(self.allowed)}"
        )


class PipelineError(RuntimeError):
    """Raised when the request pipeline is used or modified in an invalid state."""
