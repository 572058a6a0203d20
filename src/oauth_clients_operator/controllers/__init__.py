"""Bootstrap OAuth client controllers."""

from oauth_clients_operator.controllers.ensure import ensure_oauth_client
from oauth_clients_operator.controllers.oauthclients_controller import OAuthClientsController

__all__ = [
    "OAuthClientsController",
    "ensure_oauth_client",
]
