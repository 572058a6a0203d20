"""Kubernetes client utilities.

Provides the create/get/update transport for OAuthClient objects on top of
the kubernetes client, mapping API failures onto the operator's error types.
"""

import json
from enum import Enum
from typing import Any, Protocol, cast

from kubernetes import client, config
from kubernetes.client.exceptions import ApiException
from pydantic import ValidationError as ModelValidationError

from oauth_clients_operator.constants import (
    OAUTH_CLIENT_GROUP,
    OAUTH_CLIENT_PLURAL,
    OAUTH_CLIENT_VERSION,
)
from oauth_clients_operator.errors import TransientError, ValidationError
from oauth_clients_operator.models.resources import OAuthClient

VALIDATION_STATUSES = frozenset({400, 422})


class CreateOutcome(Enum):
    """Result of a create call that did not fail."""

    CREATED = "created"
    ALREADY_EXISTS = "already_exists"


class UpdateOutcome(Enum):
    """Result of an update call that did not fail."""

    UPDATED = "updated"
    CONFLICT = "conflict"


class OAuthClientTransport(Protocol):
    """Create/get/update access to OAuthClient objects."""

    def create_oauth_client(self, oauth_client: OAuthClient) -> CreateOutcome:
        """Create an OAuthClient."""
        ...

    def get_oauth_client(self, name: str) -> OAuthClient | None:
        """Get an OAuthClient by name, or None if it does not exist."""
        ...

    def update_oauth_client(self, oauth_client: OAuthClient) -> UpdateOutcome:
        """Replace an OAuthClient, guarded by its resourceVersion."""
        ...


def _error_message(e: ApiException) -> str:
    """Extract the most useful message from an ApiException.

    Args:
        e: The exception.

    Returns:
        The Status message from the response body, or the HTTP reason.
    """
    if e.body:
        try:
            status = json.loads(e.body)
        except (TypeError, ValueError):
            return str(e.reason)
        if isinstance(status, dict) and status.get("message"):
            return str(status["message"])
    return str(e.reason)


class K8sClient:
    """Kubernetes client wrapper for OAuthClient operations."""

    def __init__(self) -> None:
        """Initialize the Kubernetes client.

        Attempts to load in-cluster config first, falls back to kubeconfig.
        """
        try:
            config.load_incluster_config()
        except config.ConfigException:
            config.load_kube_config()

        self.custom_objects = client.CustomObjectsApi()

    def create_oauth_client(self, oauth_client: OAuthClient) -> CreateOutcome:
        """Create an OAuthClient.

        Args:
            oauth_client: The client to create.

        Returns:
            CREATED, or ALREADY_EXISTS if an object with that name exists.

        Raises:
            ValidationError: The API server rejected the object.
            TransientError: Any other API failure.
        """
        try:
            self.custom_objects.create_cluster_custom_object(
                group=OAUTH_CLIENT_GROUP,
                version=OAUTH_CLIENT_VERSION,
                plural=OAUTH_CLIENT_PLURAL,
                body=oauth_client.to_body(),
            )
        except ApiException as e:
            if e.status == 409:
                return CreateOutcome.ALREADY_EXISTS
            if e.status in VALIDATION_STATUSES:
                raise ValidationError(
                    f"OAuthClient {oauth_client.name!r} is invalid: {_error_message(e)}"
                ) from e
            raise TransientError(
                f"creating OAuthClient {oauth_client.name!r}: {_error_message(e)}", e.status
            ) from e
        return CreateOutcome.CREATED

    def get_oauth_client(self, name: str) -> OAuthClient | None:
        """Get an OAuthClient by name.

        Args:
            name: The client name.

        Returns:
            The client, or None if not found.

        Raises:
            ValidationError: The stored object could not be parsed.
            TransientError: Any API failure other than not found.
        """
        try:
            result = self.custom_objects.get_cluster_custom_object(
                group=OAUTH_CLIENT_GROUP,
                version=OAUTH_CLIENT_VERSION,
                plural=OAUTH_CLIENT_PLURAL,
                name=name,
            )
        except ApiException as e:
            if e.status == 404:
                return None
            raise TransientError(
                f"getting OAuthClient {name!r}: {_error_message(e)}", e.status
            ) from e
        try:
            return OAuthClient.from_body(cast(dict[str, Any], result))
        except ModelValidationError as e:
            raise ValidationError(
                f"OAuthClient {name!r} could not be parsed: {e.error_count()} invalid field(s)"
            ) from e

    def update_oauth_client(self, oauth_client: OAuthClient) -> UpdateOutcome:
        """Replace an OAuthClient.

        The body carries the resourceVersion read earlier, so the API server
        rejects the write if the object changed in between.

        Args:
            oauth_client: The client, including its resourceVersion.

        Returns:
            UPDATED, or CONFLICT if the resourceVersion is stale.

        Raises:
            ValidationError: The API server rejected the object.
            TransientError: Any other API failure.
        """
        try:
            self.custom_objects.replace_cluster_custom_object(
                group=OAUTH_CLIENT_GROUP,
                version=OAUTH_CLIENT_VERSION,
                plural=OAUTH_CLIENT_PLURAL,
                name=oauth_client.name,
                body=oauth_client.to_body(),
            )
        except ApiException as e:
            if e.status == 409:
                return UpdateOutcome.CONFLICT
            if e.status in VALIDATION_STATUSES:
                raise ValidationError(
                    f"OAuthClient {oauth_client.name!r} is invalid: {_error_message(e)}"
                ) from e
            raise TransientError(
                f"updating OAuthClient {oauth_client.name!r}: {_error_message(e)}", e.status
            ) from e
        return UpdateOutcome.UPDATED


# Module-level client instance (lazy initialization)
_client: K8sClient | None = None


def get_k8s_client() -> K8sClient:
    """Get or create the singleton K8s client instance.

    Returns:
        The K8sClient instance.
    """
    global _client  # noqa: PLW0603
    if _client is None:
        _client = K8sClient()
    return _client
