"""Fixed identifiers used by the bootstrap OAuth client operator.

These are part of the operator's behavior, not configuration. Changing any
of them changes which objects the operator reads or manages.
"""

# Cluster ingress configuration singleton
INGRESS_CONFIG_GROUP = "config.openshift.io"
INGRESS_CONFIG_VERSION = "v1"
INGRESS_CONFIG_PLURAL = "ingresses"
INGRESS_CONFIG_NAME = "cluster"

# Authentication route
ROUTE_GROUP = "route.openshift.io"
ROUTE_VERSION = "v1"
ROUTE_PLURAL = "routes"
OAUTH_ROUTE_NAMESPACE = "openshift-authentication"
OAUTH_ROUTE_NAME = "oauth-openshift"
ROUTE_ADMITTED_CONDITION = "Admitted"

# Managed OAuth clients
OAUTH_CLIENT_GROUP = "oauth.openshift.io"
OAUTH_CLIENT_VERSION = "v1"
OAUTH_CLIENT_PLURAL = "oauthclients"
OAUTH_CLIENT_KIND = "OAuthClient"

BROWSER_CLIENT_NAME = "openshift-browser-client"
CHALLENGING_CLIENT_NAME = "openshift-challenging-client"
CLI_CLIENT_NAME = "openshift-cli-client"

BOOTSTRAP_CLIENT_NAMES = (
    BROWSER_CLIENT_NAME,
    CHALLENGING_CLIENT_NAME,
    CLI_CLIENT_NAME,
)

# Redirect targets
TOKEN_DISPLAY_PATH = "/oauth/token/display"
TOKEN_IMPLICIT_PATH = "/oauth/token/implicit"
CLI_REDIRECT_URIS = ("http://127.0.0.1/callback", "http://[::1]/callback")

BROWSER_CLIENT_SECRET_BITS = 256
