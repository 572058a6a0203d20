"""Pydantic models for the bootstrap OAuth client operator."""

from oauth_clients_operator.models.bootstrap import (
    BootstrapClientSpec,
    SecretPolicy,
    build_desired_clients,
)
from oauth_clients_operator.models.resources import (
    GrantMethod,
    IngressConfig,
    OAuthClient,
    Route,
    ScopeRestriction,
)

__all__ = [
    "BootstrapClientSpec",
    "SecretPolicy",
    "build_desired_clients",
    "GrantMethod",
    "IngressConfig",
    "OAuthClient",
    "Route",
    "ScopeRestriction",
]
