"""Desired state of the bootstrap OAuth clients.

``build_desired_clients`` maps the canonical authentication hostname to the
fixed set of bootstrap client specs. It does no I/O and draws no randomness;
secrets are generated only when a spec is materialized with
``BootstrapClientSpec.to_oauth_client``.
"""

import base64
import math
import secrets
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from oauth_clients_operator.constants import (
    BROWSER_CLIENT_NAME,
    BROWSER_CLIENT_SECRET_BITS,
    CHALLENGING_CLIENT_NAME,
    CLI_CLIENT_NAME,
    CLI_REDIRECT_URIS,
    TOKEN_DISPLAY_PATH,
    TOKEN_IMPLICIT_PATH,
)
from oauth_clients_operator.models.resources import GrantMethod, OAuthClient, ScopeRestriction


class SecretPolicy(StrEnum):
    """How the secret of a bootstrap client is produced."""

    GENERATE_RANDOM = "generate-random"
    NONE = "none"


class BootstrapClientSpec(BaseModel):
    """Desired field values for one bootstrap OAuth client."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    secretPolicy: SecretPolicy = SecretPolicy.NONE
    secretBits: int = Field(default=0, ge=0)
    respondWithChallenges: bool = False
    redirectURIs: tuple[str, ...] = ()
    grantMethod: GrantMethod = GrantMethod.AUTO
    scopeRestrictions: tuple[ScopeRestriction, ...] = ()

    def to_oauth_client(self) -> OAuthClient:
        """Materialize the spec as an OAuthClient.

        Returns:
            The desired OAuthClient. Specs with the generate-random policy get
            a freshly generated secret on every call.
        """
        secret = ""
        if self.secretPolicy is SecretPolicy.GENERATE_RANDOM:
            secret = generate_secret(self.secretBits)

        return OAuthClient(
            name=self.name,
            secret=secret,
            respondWithChallenges=self.respondWithChallenges,
            redirectURIs=list(self.redirectURIs),
            grantMethod=self.grantMethod,
            scopeRestrictions=list(self.scopeRestrictions),
        )


def token_display_url(hostname: str) -> str:
    """Return the token display callback URL for an OAuth server host."""
    return f"https://{hostname}{TOKEN_DISPLAY_PATH}"


def token_implicit_url(hostname: str) -> str:
    """Return the implicit-flow callback URL for an OAuth server host."""
    return f"https://{hostname}{TOKEN_IMPLICIT_PATH}"


def random_bits(bits: int) -> bytes:
    """Return enough cryptographically strong random bytes to hold ``bits`` bits.

    Args:
        bits: Number of random bits requested.

    Returns:
        ``ceil(bits / 8)`` random bytes.

    Raises:
        ValueError: If bits is negative.
    """
    if bits < 0:
        raise ValueError(f"bits must not be negative, got {bits}")
    return secrets.token_bytes(math.ceil(bits / 8))


def generate_secret(bits: int) -> str:
    """Return a base64url (unpadded) encoded secret of ``bits`` random bits."""
    return base64.urlsafe_b64encode(random_bits(bits)).rstrip(b"=").decode("ascii")


def build_desired_clients(hostname: str) -> list[BootstrapClientSpec]:
    """Build the desired specs of the bootstrap OAuth clients.

    Args:
        hostname: The canonical OAuth server hostname.

    Returns:
        The browser, challenging and CLI client specs, in that order.
    """
    return [
        BootstrapClientSpec(
            name=BROWSER_CLIENT_NAME,
            secretPolicy=SecretPolicy.GENERATE_RANDOM,
            secretBits=BROWSER_CLIENT_SECRET_BITS,
            respondWithChallenges=False,
            redirectURIs=(token_display_url(hostname),),
            grantMethod=GrantMethod.AUTO,
        ),
        BootstrapClientSpec(
            name=CHALLENGING_CLIENT_NAME,
            secretPolicy=SecretPolicy.NONE,
            respondWithChallenges=True,
            redirectURIs=(token_implicit_url(hostname),),
            grantMethod=GrantMethod.AUTO,
        ),
        BootstrapClientSpec(
            name=CLI_CLIENT_NAME,
            secretPolicy=SecretPolicy.NONE,
            respondWithChallenges=False,
            redirectURIs=CLI_REDIRECT_URIS,
            grantMethod=GrantMethod.AUTO,
        ),
    ]
