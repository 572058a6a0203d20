"""Pydantic models for the cluster objects the operator reads and manages.

These models mirror the relevant parts of the OpenShift API objects and
convert to and from the raw object bodies returned by the Kubernetes API.
"""

import copy
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from oauth_clients_operator.constants import (
    OAUTH_CLIENT_GROUP,
    OAUTH_CLIENT_KIND,
    OAUTH_CLIENT_VERSION,
    ROUTE_ADMITTED_CONDITION,
)

# =============================================================================
# Cluster ingress configuration
# =============================================================================


class ComponentRoute(BaseModel):
    """A hostname override for a component route."""

    namespace: str
    name: str
    hostname: str = ""


class IngressConfig(BaseModel):
    """The cluster-wide ingress declaration (``ingresses.config.openshift.io``)."""

    model_config = ConfigDict(frozen=True)

    name: str
    domain: str = ""
    componentRoutes: list[ComponentRoute] = Field(default_factory=list)

    def component_hostname(self, namespace: str, name: str) -> str | None:
        """Return the hostname override for a component route.

        Args:
            namespace: The route namespace.
            name: The route name.

        Returns:
            The override hostname, or None if there is no non-empty override.
        """
        for route in self.componentRoutes:
            if route.namespace == namespace and route.name == name and route.hostname:
                return route.hostname
        return None

    @classmethod
    def from_body(cls, body: dict[str, Any]) -> "IngressConfig":
        """Build an IngressConfig from a Kubernetes object body."""
        spec = body.get("spec") or {}
        return cls(
            name=body.get("metadata", {}).get("name", ""),
            domain=spec.get("domain") or "",
            componentRoutes=[
                ComponentRoute(
                    namespace=route.get("namespace", ""),
                    name=route.get("name", ""),
                    hostname=route.get("hostname") or "",
                )
                for route in spec.get("componentRoutes") or []
            ],
        )


# =============================================================================
# Route
# =============================================================================


class RouteIngressCondition(BaseModel):
    """A condition reported by a router for a route."""

    type: str
    status: str = ""


class RouteIngress(BaseModel):
    """A router's view of a route, from the route status."""

    host: str = ""
    routerName: str | None = None
    conditions: list[RouteIngressCondition] = Field(default_factory=list)

    @property
    def admitted(self) -> bool:
        """Whether the router has admitted this host."""
        return any(
            c.type == ROUTE_ADMITTED_CONDITION and c.status == "True" for c in self.conditions
        )


class Route(BaseModel):
    """A ``routes.route.openshift.io`` object."""

    model_config = ConfigDict(frozen=True)

    namespace: str
    name: str
    specHost: str = ""
    ingress: list[RouteIngress] = Field(default_factory=list)

    @property
    def admitted_hosts(self) -> set[str]:
        """Hosts with an ``Admitted=True`` condition in the route status."""
        return {ingress.host for ingress in self.ingress if ingress.host and ingress.admitted}

    @classmethod
    def from_body(cls, body: dict[str, Any]) -> "Route":
        """Build a Route from a Kubernetes object body."""
        metadata = body.get("metadata") or {}
        spec = body.get("spec") or {}
        status = body.get("status") or {}
        return cls(
            namespace=metadata.get("namespace", ""),
            name=metadata.get("name", ""),
            specHost=spec.get("host") or "",
            ingress=[
                RouteIngress(
                    host=ingress.get("host") or "",
                    routerName=ingress.get("routerName"),
                    conditions=[
                        RouteIngressCondition(
                            type=c.get("type") or "",
                            status=c.get("status") or "",
                        )
                        for c in ingress.get("conditions") or []
                    ],
                )
                for ingress in status.get("ingress") or []
            ],
        )


# =============================================================================
# OAuthClient
# =============================================================================


class GrantMethod(StrEnum):
    """How grants are handled for an OAuth client."""

    AUTO = "auto"
    PROMPT = "prompt"
    DENY = "deny"


class ClusterRoleScopeRestriction(BaseModel):
    """Restricts a client to scopes derived from cluster roles."""

    roleNames: list[str] = Field(default_factory=list)
    namespaces: list[str] = Field(default_factory=list)
    allowEscalation: bool = False


class ScopeRestriction(BaseModel):
    """A restriction on the scopes a client may request."""

    literals: list[str] | None = None
    clusterRole: ClusterRoleScopeRestriction | None = None

    def to_body(self) -> dict[str, Any]:
        """Serialize to the API representation."""
        return self.model_dump(exclude_none=True)


class OAuthClient(BaseModel):
    """An ``oauthclients.oauth.openshift.io`` object.

    ``resourceVersion`` is the optimistic-concurrency token read from the
    server. It is empty for objects that have not been read back.

    Objects built with ``from_body`` keep the body they were read from, so
    ``to_body`` only overwrites the modeled fields and leaves labels,
    annotations and unmodeled spec fields as they were.
    """

    name: str = ""
    secret: str = ""
    respondWithChallenges: bool = False
    redirectURIs: list[str] = Field(default_factory=list)
    grantMethod: GrantMethod | None = None
    scopeRestrictions: list[ScopeRestriction] = Field(default_factory=list)
    resourceVersion: str = ""

    _body: dict[str, Any] = PrivateAttr(default_factory=dict)

    def to_body(self) -> dict[str, Any]:
        """Serialize to a Kubernetes object body.

        Empty optional fields are removed, so a replace with an empty secret
        clears the stored secret.
        """
        body = copy.deepcopy(self._body)
        metadata: dict[str, Any] = body.get("metadata") or {}
        metadata["name"] = self.name
        if self.resourceVersion:
            metadata["resourceVersion"] = self.resourceVersion
        else:
            metadata.pop("resourceVersion", None)

        body.update(
            {
                "apiVersion": f"{OAUTH_CLIENT_GROUP}/{OAUTH_CLIENT_VERSION}",
                "kind": OAUTH_CLIENT_KIND,
                "metadata": metadata,
                "respondWithChallenges": self.respondWithChallenges,
            }
        )
        optional: dict[str, Any] = {
            "secret": self.secret,
            "redirectURIs": list(self.redirectURIs),
            "grantMethod": self.grantMethod.value if self.grantMethod is not None else None,
            "scopeRestrictions": [r.to_body() for r in self.scopeRestrictions],
        }
        for key, value in optional.items():
            if value:
                body[key] = value
            else:
                body.pop(key, None)
        return body

    @classmethod
    def from_body(cls, body: dict[str, Any]) -> "OAuthClient":
        """Build an OAuthClient from a Kubernetes object body.

        Raises:
            pydantic.ValidationError: A modeled field has an unexpected value.
        """
        metadata = body.get("metadata") or {}
        oauth_client = cls(
            name=metadata.get("name", ""),
            secret=body.get("secret") or "",
            respondWithChallenges=bool(body.get("respondWithChallenges", False)),
            redirectURIs=list(body.get("redirectURIs") or []),
            grantMethod=body.get("grantMethod") or None,
            scopeRestrictions=[
                ScopeRestriction.model_validate(restriction)
                for restriction in body.get("scopeRestrictions") or []
            ],
            resourceVersion=metadata.get("resourceVersion") or "",
        )
        oauth_client._body = copy.deepcopy(body)
        return oauth_client
