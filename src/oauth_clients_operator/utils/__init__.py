"""Bootstrap OAuth client operator utilities."""

from oauth_clients_operator.utils.cluster_state import InformerCache, StaticClusterState
from oauth_clients_operator.utils.k8s_client import K8sClient

__all__ = [
    "InformerCache",
    "K8sClient",
    "StaticClusterState",
]
