"""Create-or-update protocol for OAuthClient objects.

``ensure_oauth_client`` creates the client if it is absent. If it exists, the
current object is fetched, the desired fields are merged onto it, and the
result is written back only when something changed. A write that loses an
optimistic-concurrency race is retried from the fetch, a bounded number of
times.
"""

import logging
from enum import Enum

from oauth_clients_operator.errors import ConflictError, TransientError
from oauth_clients_operator.models.resources import OAuthClient
from oauth_clients_operator.utils.k8s_client import (
    CreateOutcome,
    OAuthClientTransport,
    UpdateOutcome,
)
from oauth_clients_operator.utils.metrics import ENSURE_TOTAL, UPDATE_CONFLICTS

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5


class EnsureResult(Enum):
    """What ensure_oauth_client did."""

    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


def merge_oauth_client(existing: OAuthClient, desired: OAuthClient) -> OAuthClient:
    """Apply the desired fields onto an existing OAuthClient.

    The secret is only replaced when the desired secret is empty or longer
    than the existing one. A non-empty desired secret of equal or shorter
    length leaves the existing secret in place.

    Args:
        existing: The object as read from the server.
        desired: The desired object.

    Returns:
        The existing object with the desired fields applied. Identity and
        resourceVersion are kept from ``existing``.
    """
    secret = existing.secret
    if not desired.secret or len(desired.secret) > len(existing.secret):
        secret = desired.secret

    return existing.model_copy(
        update={
            "secret": secret,
            "respondWithChallenges": desired.respondWithChallenges,
            "redirectURIs": list(desired.redirectURIs),
            "grantMethod": desired.grantMethod,
            "scopeRestrictions": list(desired.scopeRestrictions),
        }
    )


def ensure_oauth_client(
    transport: OAuthClientTransport,
    desired: OAuthClient,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> EnsureResult:
    """Make sure an OAuthClient exists with the desired fields.

    Args:
        transport: The OAuthClient transport.
        desired: The desired client. Required fields are validated by the API
            server on create, not here.
        max_attempts: Fetch-compare-update attempts before giving up on
            write conflicts.

    Returns:
        What was done to the object.

    Raises:
        ValidationError: The API server rejected the object.
        TransientError: A create, get or update call failed, or the object
            disappeared between create and get.
        ConflictError: Every update attempt hit a write conflict.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

    if transport.create_oauth_client(desired) is CreateOutcome.CREATED:
        logger.info(f"Created OAuthClient {desired.name}")
        ENSURE_TOTAL.labels(client=desired.name, outcome=EnsureResult.CREATED.value).inc()
        return EnsureResult.CREATED

    for attempt in range(1, max_attempts + 1):
        existing = transport.get_oauth_client(desired.name)
        if existing is None:
            raise TransientError(f"OAuthClient {desired.name!r} already exists but was not found")

        merged = merge_oauth_client(existing, desired)
        if merged == existing:
            logger.debug(f"OAuthClient {desired.name} is up to date")
            ENSURE_TOTAL.labels(client=desired.name, outcome=EnsureResult.UNCHANGED.value).inc()
            return EnsureResult.UNCHANGED

        if transport.update_oauth_client(merged) is UpdateOutcome.UPDATED:
            logger.info(f"Updated OAuthClient {desired.name}")
            ENSURE_TOTAL.labels(client=desired.name, outcome=EnsureResult.UPDATED.value).inc()
            return EnsureResult.UPDATED

        logger.info(
            f"Conflict updating OAuthClient {desired.name} (attempt {attempt}/{max_attempts})"
        )
        UPDATE_CONFLICTS.labels(client=desired.name).inc()

    raise ConflictError(desired.name, max_attempts)
