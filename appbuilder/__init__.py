# appbuilder/__init__.py
from appbuilder.config import Configuration, Settings, settings
from appbuilder.environments import DeployEnvironment
from appbuilder.errors import (
    ConfigurationError,
    ConfigurationMissingError,
    ConfigurationValueError,
    InvalidEnumValueError,
    PipelineError,
)
from appbuilder.extensions import (
    configure_developer_exception_page,
    configure_hsts_and_redirection,
    use_authz,
    use_cors_policy,
)
from appbuilder.pipeline import PipelineBuilder

__all__ = [
    "Configuration",
    "ConfigurationError",
    "ConfigurationMissingError",
    "ConfigurationValueError",
    "DeployEnvironment",
    "InvalidEnumValueError",
    "PipelineBuilder",
    "PipelineError",
    "Settings",
    "configure_developer_exception_page",
    "configure_hsts_and_redirection",
    "settings",
    "use_authz",
    "use_cors_policy",
]
