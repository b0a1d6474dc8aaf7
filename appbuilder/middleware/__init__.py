# appbuilder/middleware/__init__.py
from .auth import (
    AnonymousBackend,
    AuthorizationMiddleware,
    AuthorizationPolicy,
    add_authentication,
    add_authorization,
)
from .cors import CorsPolicy, add_cors_policy
from .error_handlers import add_error_handlers
from .hsts import HstsMiddleware, HstsOptions, add_hsts
from .https_redirect import HttpsPortRedirectMiddleware, add_https_redirection
from .logging import install_request_logging

__all__ = [
    "AnonymousBackend",
    "AuthorizationMiddleware",
    "AuthorizationPolicy",
    "CorsPolicy",
    "HstsMiddleware",
    "HstsOptions",
    "HttpsPortRedirectMiddleware",
    "add_authentication",
    "add_authorization",
    "add_cors_policy",
    "add_error_handlers",
    "add_hsts",
    "add_https_redirection",
    "install_request_logging",
]
