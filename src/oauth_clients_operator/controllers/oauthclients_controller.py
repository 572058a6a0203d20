"""Bootstrap OAuth clients controller.

Keeps the bootstrap OAuth clients in line with the cluster's OAuth server
hostname. Responsible for:
- Resolving the canonical hostname from the cluster ingress config and the
  OAuth route's admitted hosts
- Building the desired browser, challenging and CLI clients for that host
- Creating or updating each client
- Re-running the whole sync whenever the ingress config, the route or one of
  the managed clients changes, and periodically
"""

import logging
from typing import Any

import kopf

from oauth_clients_operator.constants import (
    BOOTSTRAP_CLIENT_NAMES,
    INGRESS_CONFIG_GROUP,
    INGRESS_CONFIG_NAME,
    INGRESS_CONFIG_PLURAL,
    INGRESS_CONFIG_VERSION,
    OAUTH_CLIENT_GROUP,
    OAUTH_CLIENT_PLURAL,
    OAUTH_CLIENT_VERSION,
    OAUTH_ROUTE_NAME,
    OAUTH_ROUTE_NAMESPACE,
    ROUTE_GROUP,
    ROUTE_PLURAL,
    ROUTE_VERSION,
)
from oauth_clients_operator.controllers.ensure import DEFAULT_MAX_ATTEMPTS, ensure_oauth_client
from oauth_clients_operator.errors import (
    ConfigurationError,
    DependencyNotFoundError,
    HostMismatchError,
    OperatorError,
)
from oauth_clients_operator.models.bootstrap import build_desired_clients
from oauth_clients_operator.models.resources import IngressConfig
from oauth_clients_operator.settings import get_settings
from oauth_clients_operator.utils.cluster_state import ClusterStateReader, InformerCache
from oauth_clients_operator.utils.k8s_client import OAuthClientTransport, get_k8s_client
from oauth_clients_operator.utils.metrics import SYNC_DURATION, SYNC_TOTAL

logger = logging.getLogger(__name__)


class OAuthClientsController:
    """Reconciles the bootstrap OAuth clients against current cluster state."""

    def __init__(
        self,
        cluster_state: ClusterStateReader,
        oauth_clients: OAuthClientTransport,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        """Initialize the controller.

        Args:
            cluster_state: Reader for the ingress config and the OAuth route.
            oauth_clients: Transport for the managed OAuthClient objects.
            max_attempts: Update attempts per client before giving up on
                write conflicts.
        """
        self.cluster_state = cluster_state
        self.oauth_clients = oauth_clients
        self.max_attempts = max_attempts

    def get_ingress_config(self) -> IngressConfig:
        """Get the cluster ingress config.

        Returns:
            The ingress config.

        Raises:
            ConfigurationError: The config is missing or has an empty domain.
        """
        ingress = self.cluster_state.get_ingress_config(INGRESS_CONFIG_NAME)
        if ingress is None:
            raise ConfigurationError(
                f"ingress config {INGRESS_CONFIG_NAME!r} not found; "
                "the cluster ingress must be configured before OAuth clients can be synced"
            )
        if not ingress.domain:
            raise ConfigurationError(
                f"ingress config {INGRESS_CONFIG_NAME!r} has an empty spec.domain"
            )
        return ingress

    def get_canonical_route_host(self, expected_host: str | None) -> str:
        """Validate a hostname against the OAuth route's admitted hosts.

        Args:
            expected_host: The hostname to look for, or None to use the
                route's own spec.host.

        Returns:
            The canonical hostname.

        Raises:
            DependencyNotFoundError: The OAuth route does not exist.
            HostMismatchError: The hostname is not admitted by the route.
        """
        route = self.cluster_state.get_route(OAUTH_ROUTE_NAMESPACE, OAUTH_ROUTE_NAME)
        if route is None:
            raise DependencyNotFoundError("Route", OAUTH_ROUTE_NAMESPACE, OAUTH_ROUTE_NAME)

        host = expected_host if expected_host else route.specHost
        admitted_hosts = route.admitted_hosts
        if host not in admitted_hosts:
            raise HostMismatchError(host, admitted_hosts)
        return host

    def resolve_hostname(self) -> str:
        """Resolve the canonical OAuth server hostname.

        A component route override in the ingress config takes precedence
        over the route's spec.host. Either way the host must be admitted by
        the route. Nothing is cached between calls.

        Returns:
            The canonical hostname.
        """
        ingress = self.get_ingress_config()
        override = ingress.component_hostname(OAUTH_ROUTE_NAMESPACE, OAUTH_ROUTE_NAME)
        return self.get_canonical_route_host(override)

    def ensure_bootstrapped_oauth_clients(self, hostname: str) -> None:
        """Create or update every bootstrap OAuth client for a hostname.

        Clients are handled in order and the first failure is raised as is.
        Clients handled before the failure keep their new state.

        Args:
            hostname: The canonical OAuth server hostname.
        """
        for spec in build_desired_clients(hostname):
            ensure_oauth_client(self.oauth_clients, spec.to_oauth_client(), self.max_attempts)

    def sync(self) -> None:
        """Run one full reconciliation."""
        with SYNC_DURATION.time():
            try:
                hostname = self.resolve_hostname()
                logger.info(f"Syncing bootstrap OAuth clients for host {hostname}")
                self.ensure_bootstrapped_oauth_clients(hostname)
                SYNC_TOTAL.labels(result="success").inc()
            except Exception:
                SYNC_TOTAL.labels(result="error").inc()
                raise


# Module-level state shared by the kopf handlers (lazy initialization)
_cache = InformerCache()
_controller: OAuthClientsController | None = None


def get_cluster_state_cache() -> InformerCache:
    """Return the watch-fed cluster state cache."""
    return _cache


def get_controller() -> OAuthClientsController:
    """Get or create the singleton controller instance.

    Returns:
        The OAuthClientsController instance.
    """
    global _controller  # noqa: PLW0603
    if _controller is None:
        _controller = OAuthClientsController(
            cluster_state=_cache,
            oauth_clients=get_k8s_client(),
            max_attempts=get_settings().conflict_retry_attempts,
        )
    return _controller


def _run_sync(trigger: str, logger: kopf.Logger) -> None:
    """Run a sync on behalf of a watch event.

    Event handlers are not retried by kopf, so an operator error is logged
    and the next event or resync picks the work up again.
    """
    try:
        get_controller().sync()
    except OperatorError as e:
        logger.warning(f"OAuth client sync triggered by {trigger} failed ({e.category}): {e}")


def _is_cluster_ingress(name: str, **_: object) -> bool:
    return name == INGRESS_CONFIG_NAME


def _is_oauth_route_namespace(namespace: str, **_: object) -> bool:
    return namespace == OAUTH_ROUTE_NAMESPACE


def _is_bootstrap_client(name: str, **_: object) -> bool:
    return name in BOOTSTRAP_CLIENT_NAMES


@kopf.on.event(INGRESS_CONFIG_GROUP, INGRESS_CONFIG_VERSION, INGRESS_CONFIG_PLURAL)
def on_ingress_config_event(
    *,
    event: dict[str, Any],
    name: str,
    logger: kopf.Logger,
    **_: object,
) -> None:
    """Record an ingress config change and resync if it is the cluster config.

    Args:
        event: The raw watch event.
        name: The ingress config name.
        logger: The kopf logger.
        **_: Additional kwargs from kopf.
    """
    try:
        get_cluster_state_cache().apply_ingress_config_event(event.get("type"), event["object"])
    except OperatorError as e:
        logger.warning(f"Dropped ingress config {name} from the cache ({e.category}): {e}")
    if _is_cluster_ingress(name):
        _run_sync(f"ingress config {name}", logger)


@kopf.on.event(ROUTE_GROUP, ROUTE_VERSION, ROUTE_PLURAL, when=_is_oauth_route_namespace)
def on_route_event(
    *,
    event: dict[str, Any],
    name: str,
    namespace: str,
    logger: kopf.Logger,
    **_: object,
) -> None:
    """Record a route change in the OAuth namespace and resync.

    Args:
        event: The raw watch event.
        name: The route name.
        namespace: The route namespace.
        logger: The kopf logger.
        **_: Additional kwargs from kopf.
    """
    try:
        get_cluster_state_cache().apply_route_event(event.get("type"), event["object"])
    except OperatorError as e:
        logger.warning(f"Dropped route {namespace}/{name} from the cache ({e.category}): {e}")
    _run_sync(f"route {namespace}/{name}", logger)


@kopf.on.event(
    OAUTH_CLIENT_GROUP, OAUTH_CLIENT_VERSION, OAUTH_CLIENT_PLURAL, when=_is_bootstrap_client
)
def on_oauth_client_event(
    *,
    name: str,
    logger: kopf.Logger,
    **_: object,
) -> None:
    """Resync when a managed OAuth client changes or disappears.

    Args:
        name: The OAuthClient name.
        logger: The kopf logger.
        **_: Additional kwargs from kopf.
    """
    _run_sync(f"OAuthClient {name}", logger)


@kopf.timer(
    INGRESS_CONFIG_GROUP,
    INGRESS_CONFIG_VERSION,
    INGRESS_CONFIG_PLURAL,
    when=_is_cluster_ingress,
    interval=get_settings().resync_interval_seconds,
)
def periodic_resync(*, logger: kopf.Logger, **_: object) -> None:
    """Periodically resync, letting kopf retry failed runs.

    Args:
        logger: The kopf logger.
        **_: Additional kwargs from kopf.
    """
    try:
        get_controller().sync()
    except OperatorError as e:
        logger.warning(f"Periodic OAuth client sync failed ({e.category}): {e}")
        raise e.as_kopf_error() from e
