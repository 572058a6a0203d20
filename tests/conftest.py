"""Pytest fixtures for bootstrap OAuth client operator tests."""

from typing import Any

import pytest

from oauth_clients_operator.errors import TransientError, ValidationError
from oauth_clients_operator.models.resources import (
    ComponentRoute,
    IngressConfig,
    OAuthClient,
    Route,
    RouteIngress,
    RouteIngressCondition,
)
from oauth_clients_operator.utils.cluster_state import StaticClusterState
from oauth_clients_operator.utils.k8s_client import CreateOutcome, UpdateOutcome

MASTER_PUBLIC_URL = "oauth-openshift.test.com"


class FakeOAuthClientTransport:
    """In-memory OAuthClient store that behaves like the API server.

    Objects get a new resourceVersion on every write and go through their
    API body, so fields the model does not cover survive only if the body
    carries them. Failures can be injected per verb, and ``conflicts`` makes
    the next N updates conflict.
    """

    def __init__(self) -> None:
        self.objects: dict[str, OAuthClient] = {}
        self.calls: list[tuple[str, str]] = []
        self.create_error: Exception | None = None
        self.get_error: Exception | None = None
        self.update_error: Exception | None = None
        self.conflicts = 0
        self._version = 0

    def _next_version(self) -> str:
        self._version += 1
        return str(self._version)

    def seed(self, oauth_client: OAuthClient) -> OAuthClient:
        """Store an object directly, bypassing validation and call tracking.

        The object is stored as the server would see it: serialized to a body,
        given a new resourceVersion and parsed back.
        """
        body = oauth_client.to_body()
        body["metadata"]["resourceVersion"] = self._next_version()
        stored = OAuthClient.from_body(body)
        self.objects[stored.name] = stored
        return stored

    def writes(self) -> list[tuple[str, str]]:
        """Return the create and update calls made so far."""
        return [call for call in self.calls if call[0] in ("create", "update")]

    def create_oauth_client(self, oauth_client: OAuthClient) -> CreateOutcome:
        self.calls.append(("create", oauth_client.name))
        if self.create_error is not None:
            raise self.create_error
        if not oauth_client.name:
            raise ValidationError("metadata.name: Required value")
        if oauth_client.name in self.objects:
            return CreateOutcome.ALREADY_EXISTS
        if oauth_client.grantMethod is None:
            raise ValidationError("grantMethod: Required value")
        self.seed(oauth_client)
        return CreateOutcome.CREATED

    def get_oauth_client(self, name: str) -> OAuthClient | None:
        self.calls.append(("get", name))
        if self.get_error is not None:
            raise self.get_error
        return self.objects.get(name)

    def update_oauth_client(self, oauth_client: OAuthClient) -> UpdateOutcome:
        self.calls.append(("update", oauth_client.name))
        if self.update_error is not None:
            raise self.update_error
        if self.conflicts > 0:
            self.conflicts -= 1
            # Someone else wrote the object in between
            self.seed(self.objects[oauth_client.name])
            return UpdateOutcome.CONFLICT
        current = self.objects.get(oauth_client.name)
        if current is None:
            raise TransientError(f"OAuthClient {oauth_client.name} not found", 404)
        if current.resourceVersion != oauth_client.resourceVersion:
            return UpdateOutcome.CONFLICT
        self.seed(oauth_client)
        return UpdateOutcome.UPDATED


def make_route(
    host: str = MASTER_PUBLIC_URL,
    namespace: str = "openshift-authentication",
    name: str = "oauth-openshift",
    admitted_hosts: tuple[str, ...] | None = None,
) -> Route:
    """Build a Route whose status admits the given hosts (default: its spec host)."""
    hosts = (host,) if admitted_hosts is None else admitted_hosts
    return Route(
        namespace=namespace,
        name=name,
        specHost=host,
        ingress=[
            RouteIngress(
                host=admitted,
                conditions=[RouteIngressCondition(type="Admitted", status="True")],
            )
            for admitted in hosts
        ],
    )


@pytest.fixture
def fake_transport() -> FakeOAuthClientTransport:
    """Return an empty in-memory OAuthClient transport."""
    return FakeOAuthClientTransport()


@pytest.fixture
def default_ingress() -> IngressConfig:
    """Return a cluster ingress config overriding the OAuth route host."""
    return IngressConfig(
        name="cluster",
        domain="test.com",
        componentRoutes=[
            ComponentRoute(
                namespace="openshift-authentication",
                name="oauth-openshift",
                hostname=MASTER_PUBLIC_URL,
            )
        ],
    )


@pytest.fixture
def ingress_empty_component_routes() -> IngressConfig:
    """Return a cluster ingress config without component route overrides."""
    return IngressConfig(name="cluster", domain="test.com", componentRoutes=[])


@pytest.fixture
def ingress_empty_domain() -> IngressConfig:
    """Return a cluster ingress config with an empty domain."""
    return IngressConfig(name="cluster", domain="")


@pytest.fixture
def default_route() -> Route:
    """Return the OAuth route admitted for its spec host."""
    return make_route()


@pytest.fixture
def default_cluster_state(
    default_ingress: IngressConfig, default_route: Route
) -> StaticClusterState:
    """Return cluster state with the default ingress config and route."""
    return StaticClusterState(ingress_configs=[default_ingress], routes=[default_route])


@pytest.fixture
def sample_route_body() -> dict[str, Any]:
    """Return a raw route object as served by the API."""
    return {
        "apiVersion": "route.openshift.io/v1",
        "kind": "Route",
        "metadata": {"name": "oauth-openshift", "namespace": "openshift-authentication"},
        "spec": {"host": MASTER_PUBLIC_URL, "to": {"kind": "Service", "name": "oauth-openshift"}},
        "status": {
            "ingress": [
                {
                    "host": MASTER_PUBLIC_URL,
                    "routerName": "default",
                    "conditions": [{"type": "Admitted", "status": "True"}],
                },
                {
                    "host": "rejected.test.com",
                    "routerName": "sharded",
                    "conditions": [{"type": "Admitted", "status": "False"}],
                },
            ]
        },
    }


@pytest.fixture
def sample_ingress_body() -> dict[str, Any]:
    """Return a raw cluster ingress config object as served by the API."""
    return {
        "apiVersion": "config.openshift.io/v1",
        "kind": "Ingress",
        "metadata": {"name": "cluster"},
        "spec": {
            "domain": "apps.test.com",
            "componentRoutes": [
                {
                    "namespace": "openshift-authentication",
                    "name": "oauth-openshift",
                    "hostname": MASTER_PUBLIC_URL,
                }
            ],
        },
    }


@pytest.fixture
def route_factory() -> Any:
    """Return a factory for Route objects (see ``make_route``)."""
    return make_route
