# appbuilder/extensions.py
"""
Pipeline configuration helpers.

Each helper takes the PipelineBuilder as its first argument, appends zero or
more pre-built stages to it in place and returns nothing. They are meant to be
called once, at startup, in whatever order the hosting application needs:

    builder = PipelineBuilder(app)
    configure_hsts_and_redirection(builder, configuration)
    use_authz(builder)
    use_cors_policy(builder)
"""
from __future__ import annotations

import logging
from typing import Any

from starlette.middleware.authentication import AuthenticationMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.errors import ServerErrorMiddleware

from appbuilder import pipeline
from appbuilder.config import Configuration
from appbuilder.environments import DeployEnvironment
from appbuilder.middleware.auth import (
    AuthorizationMiddleware,
    get_authentication_backend,
    get_authorization_policy,
    on_auth_error,
)
from appbuilder.middleware.cors import get_cors_policy
from appbuilder.middleware.hsts import HstsMiddleware, get_hsts_options
from appbuilder.middleware.https_redirect import https_redirection_stage
from appbuilder.pipeline import PipelineBuilder

logger = logging.getLogger("appbuilder.extensions")

ENVIRONMENT_KEY = "Environment"
DEVELOPER_EXCEPTION_PAGE_KEY = "DeveloperExceptionPage"


def configure_hsts_and_redirection(builder: PipelineBuilder, configuration: Configuration) -> None:
    """
    Adds HSTS followed by HTTPS redirection unless the deployment environment
    is Local or Test.

    Raises:
        ConfigurationMissingError: `Environment` is not configured.
        InvalidEnumValueError: `Environment` is not a known DeployEnvironment.
    """
    environment = DeployEnvironment.from_value(configuration.get_value_strict(ENVIRONMENT_KEY, Any))

    if environment.is_local_or_test:
        logger.info("Environment %s: skipping HSTS and HTTPS redirection", environment.value)
        return

    redirect_cls, redirect_options = https_redirection_stage(builder.app)
    builder.use(HstsMiddleware, name=pipeline.HSTS, options=get_hsts_options(builder.app))
    builder.use(redirect_cls, name=pipeline.HTTPS_REDIRECTION, **redirect_options)
    logger.info("Environment %s: HSTS and HTTPS redirection enabled", environment.value)


def use_authz(builder: PipelineBuilder) -> None:
    """Adds authentication, then authorization."""
    builder.use(
        AuthenticationMiddleware,
        name=pipeline.AUTHENTICATION,
        backend=get_authentication_backend(builder.app),
        on_error=on_auth_error,
    )
    builder.use(
        AuthorizationMiddleware,
        name=pipeline.AUTHORIZATION,
        policy=get_authorization_policy(builder.app),
    )


def use_cors_policy(builder: PipelineBuilder) -> None:
    """Adds CORS enforcement for the policy registered with add_cors_policy()."""
    policy = get_cors_policy(builder.app)
    builder.use(CORSMiddleware, name=pipeline.CORS, **policy.middleware_options())


def configure_developer_exception_page(builder: PipelineBuilder, configuration: Configuration) -> None:
    """
    Adds the developer exception page (tracebacks rendered in responses) when
    `DeveloperExceptionPage` is true. Missing means false. The environment is
    not consulted here; callers decide where the flag may be set.
    """
    if not configuration.get_value(DEVELOPER_EXCEPTION_PAGE_KEY, bool, False):
        return

    builder.use(ServerErrorMiddleware, name=pipeline.DEVELOPER_EXCEPTION_PAGE, debug=True)
    logger.warning("Developer exception page enabled; unhandled errors will expose tracebacks")
