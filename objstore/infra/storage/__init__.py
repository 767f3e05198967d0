"""Object storage abstraction layer.

One uniform interface over heterogeneous object stores. Backends are looked
up by name in a ``BackendRegistry``; REST style backends share the
``RestfulStorage`` executor and differ only in endpoint shape, signer and
write headers.
"""

from .bootstrap import build_registry, create_storage, register_builtin_backends
from .client import Body, ObjectInfo, ObjectStorage, SupportsStorageClass
from .errors import (
    BackendAlreadyRegisteredError,
    BackendError,
    BodyReadError,
    NotSupportedError,
    ObjectNotFoundError,
    ObjectStorageError,
    TransportError,
    UnknownBackendError,
)
from .labstore import LabStore
from .registry import BackendDescriptor, BackendRegistry
from .restful import RestfulStorage, parse_error
from .s3_client import S3Storage
from .signers import Signer, bearer_signer, hmac_signer

__all__ = [
    "BackendAlreadyRegisteredError",
    "BackendDescriptor",
    "BackendError",
    "BackendRegistry",
    "Body",
    "BodyReadError",
    "LabStore",
    "NotSupportedError",
    "ObjectInfo",
    "ObjectNotFoundError",
    "ObjectStorage",
    "ObjectStorageError",
    "RestfulStorage",
    "S3Storage",
    "Signer",
    "SupportsStorageClass",
    "TransportError",
    "UnknownBackendError",
    "bearer_signer",
    "build_registry",
    "create_storage",
    "hmac_signer",
    "parse_error",
    "register_builtin_backends",
]
