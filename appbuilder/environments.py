# appbuilder/environments.py
from __future__ import annotations

from enum import Enum
from typing import Any

from appbuilder.errors import InvalidEnumValueError


class DeployEnvironment(str, Enum):
    LOCAL = "Local"
    DEVELOPMENT = "Development"
    TEST = "Test"
    STAGING = "Staging"
    PRODUCTION = "Production"

    @classmethod
    def from_value(cls, raw: Any) -> "DeployEnvironment":
        """
        Parse a configured value into a variant. Matching is on the variant
        value, case-insensitive, ignoring surrounding whitespace:
            DeployEnvironment.from_value(" production ") -> DeployEnvironment.PRODUCTION
        Anything else raises InvalidEnumValueError.
        """
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, str):
            wanted = raw.strip().lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        raise InvalidEnumValueError(raw, [m.value for m in cls], enum_name=cls.__name__)

    @property
    def is_local_or_test(self) -> bool:
        return self in (DeployEnvironment.LOCAL, DeployEnvironment.TEST)
