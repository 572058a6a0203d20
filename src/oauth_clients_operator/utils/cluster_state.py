"""Read-only access to the cluster objects the hostname resolver depends on.

The controller only sees the ``ClusterStateReader`` protocol. Two readers are
provided:

- ``InformerCache``: kept current by the kopf watch handlers, so lookups hit
  local state rather than the API server.
- ``StaticClusterState``: a fixed in-memory snapshot, for tests and one-off
  runs.

Not found is reported as ``None``, never as an exception.
"""

import threading
from collections.abc import Iterable
from typing import Any, Protocol

from pydantic import ValidationError as ModelValidationError

from oauth_clients_operator.errors import ValidationError
from oauth_clients_operator.models.resources import IngressConfig, Route

DELETED_EVENT = "DELETED"


class ClusterStateReader(Protocol):
    """Point lookups against a snapshot of cluster state."""

    def get_ingress_config(self, name: str) -> IngressConfig | None:
        """Get the cluster ingress configuration by name."""
        ...

    def get_route(self, namespace: str, name: str) -> Route | None:
        """Get a route by namespace and name."""
        ...


class InformerCache:
    """Cluster state cache fed by watch events."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ingress_configs: dict[str, IngressConfig] = {}
        self._routes: dict[tuple[str, str], Route] = {}

    def get_ingress_config(self, name: str) -> IngressConfig | None:
        with self._lock:
            return self._ingress_configs.get(name)

    def get_route(self, namespace: str, name: str) -> Route | None:
        with self._lock:
            return self._routes.get((namespace, name))

    def apply_ingress_config_event(self, event_type: str | None, body: dict[str, Any]) -> None:
        """Record an ingress configuration watch event.

        Args:
            event_type: The watch event type (None for the initial listing).
            body: The object body.

        Raises:
            ValidationError: The object could not be parsed. Any cached copy
                is dropped, since it no longer reflects the cluster.
        """
        name = (body.get("metadata") or {}).get("name", "")
        try:
            config = IngressConfig.from_body(body)
        except ModelValidationError as e:
            with self._lock:
                self._ingress_configs.pop(name, None)
            raise ValidationError(f"ingress config {name!r} could not be parsed: {e}") from e

        with self._lock:
            if event_type == DELETED_EVENT:
                self._ingress_configs.pop(config.name, None)
            else:
                self._ingress_configs[config.name] = config

    def apply_route_event(self, event_type: str | None, body: dict[str, Any]) -> None:
        """Record a route watch event.

        Args:
            event_type: The watch event type (None for the initial listing).
            body: The object body.

        Raises:
            ValidationError: The object could not be parsed. Any cached copy
                is dropped, since it no longer reflects the cluster.
        """
        metadata = body.get("metadata") or {}
        key = (metadata.get("namespace", ""), metadata.get("name", ""))
        try:
            route = Route.from_body(body)
        except ModelValidationError as e:
            with self._lock:
                self._routes.pop(key, None)
            raise ValidationError(f"route {key[0]}/{key[1]} could not be parsed: {e}") from e

        with self._lock:
            if event_type == DELETED_EVENT:
                self._routes.pop(key, None)
            else:
                self._routes[key] = route


class StaticClusterState:
    """An immutable in-memory snapshot of cluster state."""

    def __init__(
        self,
        ingress_configs: Iterable[IngressConfig] = (),
        routes: Iterable[Route] = (),
    ) -> None:
        self._ingress_configs = {config.name: config for config in ingress_configs}
        self._routes = {(route.namespace, route.name): route for route in routes}

    def get_ingress_config(self, name: str) -> IngressConfig | None:
        return self._ingress_configs.get(name)

    def get_route(self, namespace: str, name: str) -> Route | None:
        return self._routes.get((namespace, name))
