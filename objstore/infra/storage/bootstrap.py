"""Startup wiring: built-in backends and settings driven construction."""

from __future__ import annotations

import logging

from objstore.common.config import Settings, get_settings
from objstore.infra.storage.client import ObjectStorage, SupportsStorageClass
from objstore.infra.storage.labstore import new_labstore
from objstore.infra.storage.registry import BackendRegistry
from objstore.infra.storage.restful import new_restful
from objstore.infra.storage.s3_client import new_s3

logger = logging.getLogger("objstore.storage")


def register_builtin_backends(registry: BackendRegistry) -> BackendRegistry:
    """Register the bundled backends; call once per registry at startup."""
    registry.register("labstore", new_labstore)
    registry.register("restful", new_restful)
    registry.register("s3", new_s3)
    return registry


def build_registry() -> BackendRegistry:
    return register_builtin_backends(BackendRegistry())


def create_storage(
    settings: Settings | None = None,
    registry: BackendRegistry | None = None,
) -> ObjectStorage:
    """Build the backend described by ``settings``.

    A configured storage class is applied when the backend supports it and
    ignored with a warning otherwise.
    """
    settings = settings or get_settings()
    registry = registry or build_registry()
    storage = registry.create(
        settings.STORAGE_BACKEND,
        settings.STORAGE_ENDPOINT,
        settings.STORAGE_ACCESS_KEY,
        settings.STORAGE_SECRET_KEY,
        settings.STORAGE_SESSION_TOKEN,
    )
    if settings.STORAGE_CLASS:
        if isinstance(storage, SupportsStorageClass):
            storage.set_storage_class(settings.STORAGE_CLASS)
        else:
            logger.warning(
                "storage class %s is not supported by %s, ignored",
                settings.STORAGE_CLASS,
                storage,
            )
    logger.info("object storage ready: %s", storage)
    return storage
