"""Backend registry: backend name to constructor."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from objstore.infra.storage.client import ObjectStorage
from objstore.infra.storage.errors import (
    BackendAlreadyRegisteredError,
    UnknownBackendError,
)

logger = logging.getLogger("objstore.storage")

BackendConstructor = Callable[[str, str, str, str], ObjectStorage]


@dataclass(frozen=True, slots=True)
class BackendDescriptor:
    name: str
    constructor: BackendConstructor


class BackendRegistry:
    """Maps backend names to their constructors.

    Names are unique: registering a name twice raises instead of silently
    replacing the earlier backend.
    """

    def __init__(self) -> None:
        self._backends: dict[str, BackendDescriptor] = {}

    def register(self, name: str, constructor: BackendConstructor) -> None:
        if name in self._backends:
            raise BackendAlreadyRegisteredError(
                f"Storage backend '{name}' is already registered"
            )
        self._backends[name] = BackendDescriptor(name=name, constructor=constructor)
        logger.debug("registered storage backend %s", name)

    def get(self, name: str) -> BackendDescriptor:
        try:
            return self._backends[name]
        except KeyError:
            available = ", ".join(sorted(self._backends)) or "<none>"
            raise UnknownBackendError(
                f"Unknown storage backend '{name}'. Available backends: {available}"
            ) from None

    def create(
        self,
        name: str,
        endpoint: str,
        access_key: str,
        secret_key: str,
        token: str = "",
    ) -> ObjectStorage:
        """Instantiate backend ``name``; constructor errors propagate unchanged."""
        descriptor = self.get(name)
        return descriptor.constructor(endpoint, access_key, secret_key, token)

    def names(self) -> list[str]:
        return sorted(self._backends)

    def __contains__(self, name: object) -> bool:
        return name in self._backends

    def __len__(self) -> int:
        return len(self._backends)
