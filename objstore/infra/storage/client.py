"""Object storage interface and data types.

Every backend subclasses ``ObjectStorage``. Optional capabilities are
separate runtime-checkable protocols, so callers probe them with
``isinstance`` instead of relying on no-op methods on the base class.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, Protocol, Union, runtime_checkable

from objstore.infra.storage.errors import BodyReadError, NotSupportedError

Body = Union[bytes, bytearray, BinaryIO]


@dataclass(frozen=True, slots=True)
class ObjectInfo:
    """Metadata of one stored object."""

    key: str
    size: int
    mtime: datetime | None
    is_dir: bool = False
    storage_class: str | None = None


def read_body(body: Body) -> bytes:
    """Buffer a request body into memory.

    Raises:
        BodyReadError: If reading the stream fails, including reads from
            a closed stream.
    """
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    try:
        data = body.read()
    except (OSError, ValueError) as exc:
        raise BodyReadError(f"Failed to read request body: {exc}") from exc
    if isinstance(data, str):
        raise BodyReadError("Request body must be opened in binary mode")
    return data


class ObjectStorage(ABC):
    """Uniform operation set every backend must satisfy."""

    def create(self) -> None:
        """Create the bucket or namespace if the service needs it."""

    @abstractmethod
    def head(self, key: str) -> ObjectInfo:
        """Return metadata for ``key``.

        Raises:
            ObjectNotFoundError: If the key does not exist.
        """

    @abstractmethod
    def get(self, key: str, offset: int = 0, limit: int = -1) -> bytes:
        """Read ``limit`` bytes of ``key`` starting at ``offset`` (-1 reads to the end)."""

    @abstractmethod
    def put(self, key: str, body: Body) -> None:
        """Store ``body`` under ``key``."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete ``key``; deleting a missing key is not an error."""

    def list(
        self,
        prefix: str = "",
        marker: str = "",
        delimiter: str = "",
        limit: int = 1000,
    ) -> list[ObjectInfo]:
        raise NotSupportedError(f"{self} does not support listing")

    def list_all(self, prefix: str = "", marker: str = "") -> list[ObjectInfo]:
        raise NotSupportedError(f"{self} does not support listing")


@runtime_checkable
class SupportsStorageClass(Protocol):
    """Capability: the backend can route writes to a storage class."""

    def set_storage_class(self, storage_class: str) -> None:
        ...
