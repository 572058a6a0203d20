"""Unit tests for the operator error hierarchy."""

import kopf
import pytest

from oauth_clients_operator.errors import (
    ConfigurationError,
    ConflictError,
    DependencyNotFoundError,
    HostMismatchError,
    OperatorError,
    TransientError,
    ValidationError,
)


class TestOperatorErrors:
    """Tests for error categories and messages."""

    @pytest.mark.parametrize(
        ("error", "category", "retryable"),
        [
            (ConfigurationError("missing"), "configuration", False),
            (DependencyNotFoundError("Route", "ns", "name"), "dependency", True),
            (HostMismatchError("a.test.com", set()), "dependency", True),
            (ValidationError("bad"), "validation", False),
            (ConflictError("openshift-cli-client", 5), "conflict", True),
            (TransientError("boom", 500), "transient", True),
        ],
    )
    def test_categories(self, error: OperatorError, category: str, retryable: bool) -> None:
        """Test that each error carries its category and retry flag."""
        assert error.category == category
        assert error.retryable is retryable

    def test_dependency_not_found_message(self) -> None:
        """Test the namespaced and cluster-scoped messages."""
        assert str(DependencyNotFoundError("Route", "ns", "r")) == "Route ns/r not found"
        assert str(DependencyNotFoundError("Ingress", None, "cluster")) == (
            "Ingress cluster not found"
        )

    def test_host_mismatch_lists_admitted_hosts(self) -> None:
        """Test that the admitted hosts appear sorted in the message."""
        error = HostMismatchError("redhat.com", {"b.test.com", "a.test.com"})
        assert "a.test.com, b.test.com" in str(error)
        assert "<none>" in str(HostMismatchError("redhat.com", set()))

    def test_transient_error_status_prefix(self) -> None:
        """Test that the HTTP status is prefixed when known."""
        assert str(TransientError("boom", 503)) == "HTTP 503: boom"
        assert str(TransientError("boom")) == "boom"

    def test_conflict_error_attributes(self) -> None:
        """Test that conflict errors keep the client name and attempt count."""
        error = ConflictError("openshift-cli-client", 5)
        assert error.name == "openshift-cli-client"
        assert error.attempts == 5
        assert error.delay == 5


class TestAsKopfError:
    """Tests for conversion to kopf exceptions."""

    def test_retryable_is_temporary(self) -> None:
        """Test that retryable errors become TemporaryError with the delay."""
        kopf_error = TransientError("boom", 500).as_kopf_error()
        assert isinstance(kopf_error, kopf.TemporaryError)
        assert kopf_error.delay == 30

    def test_not_retryable_is_permanent(self) -> None:
        """Test that non-retryable errors become PermanentError."""
        kopf_error = ConfigurationError("missing").as_kopf_error()
        assert isinstance(kopf_error, kopf.PermanentError)
        assert str(kopf_error) == "missing"
