"""Error taxonomy shared by every object storage backend."""

from __future__ import annotations


class ObjectStorageError(RuntimeError):
    """Base class for all object storage failures."""


class TransportError(ObjectStorageError):
    """Raised when the remote service could not be reached (DNS, connect, timeout)."""


class BackendError(ObjectStorageError):
    """Raised when the remote service answers with a non-success status.

    Attributes:
        status_code: Raw HTTP status returned by the service.
        kind: Machine readable error code, from the body or derived from the status.
        message: Human readable message reported by the service.
        retryable: Retry hint from the service, ``None`` when it gave none.
    """

    def __init__(
        self,
        status_code: int,
        kind: str,
        message: str,
        retryable: bool | None = None,
    ) -> None:
        self.status_code = status_code
        self.kind = kind
        self.message = message
        self.retryable = retryable
        super().__init__(f"status: {status_code}, kind: {kind}, message: {message}")


class ObjectNotFoundError(BackendError):
    """Raised when the requested key does not exist."""


class NotSupportedError(ObjectStorageError):
    """Raised for capabilities a backend declines to implement."""


class UnknownBackendError(ObjectStorageError):
    """Raised when a backend name is not registered."""


class BackendAlreadyRegisteredError(ObjectStorageError):
    """Raised when a backend name is registered twice."""


class BodyReadError(ObjectStorageError):
    """Raised when the request body could not be read before sending."""
