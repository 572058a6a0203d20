"""Operator error hierarchy.

Every failure raised by the reconciliation core is an ``OperatorError``
subclass. The category and retry flag travel with the error so the outermost
kopf handler can decide whether kopf should requeue the run.
"""

import kopf


class OperatorError(Exception):
    """Base error class for all operator errors."""

    def __init__(
        self,
        message: str,
        category: str,
        retryable: bool = True,
        delay: int = 30,
    ) -> None:
        """Initialize an operator error.

        Args:
            message: Human-readable error description.
            category: Error category (configuration, dependency, validation, ...).
            retryable: Whether kopf should retry the run that raised this error.
            delay: Suggested retry delay in seconds.
        """
        super().__init__(message)
        self.category = category
        self.retryable = retryable
        self.delay = delay

    def as_kopf_error(self) -> kopf.TemporaryError | kopf.PermanentError:
        """Convert to the matching kopf exception type."""
        if self.retryable:
            return kopf.TemporaryError(str(self), delay=self.delay)
        return kopf.PermanentError(str(self))


class ConfigurationError(OperatorError):
    """Required cluster-level configuration is missing or empty."""

    def __init__(self, message: str) -> None:
        super().__init__(message=message, category="configuration", retryable=False)


class DependencyNotFoundError(OperatorError):
    """A referenced singleton object does not exist."""

    def __init__(self, kind: str, namespace: str | None, name: str) -> None:
        key = f"{namespace}/{name}" if namespace else name
        super().__init__(message=f"{kind} {key} not found", category="dependency")
        self.kind = kind
        self.namespace = namespace
        self.name = name


class HostMismatchError(OperatorError):
    """The candidate hostname is not among the route's admitted hosts."""

    def __init__(self, host: str, admitted_hosts: set[str]) -> None:
        admitted = ", ".join(sorted(admitted_hosts)) or "<none>"
        super().__init__(
            message=f"host {host!r} is not admitted by the route (admitted: {admitted})",
            category="dependency",
        )
        self.host = host
        self.admitted_hosts = admitted_hosts


class ValidationError(OperatorError):
    """The API server rejected an object as invalid."""

    def __init__(self, message: str) -> None:
        super().__init__(message=message, category="validation", retryable=False)


class ConflictError(OperatorError):
    """Optimistic-concurrency conflicts persisted past the retry bound."""

    def __init__(self, name: str, attempts: int) -> None:
        super().__init__(
            message=f"OAuthClient {name} update still conflicting after {attempts} attempt(s)",
            category="conflict",
            delay=5,
        )
        self.name = name
        self.attempts = attempts


class TransientError(OperatorError):
    """An API call failed for a reason that may go away on its own."""

    def __init__(self, message: str, status: int | None = None) -> None:
        if status is not None:
            message = f"HTTP {status}: {message}"
        super().__init__(message=message, category="transient")
        self.status = status
