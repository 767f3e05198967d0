"""LabStore backend.

Token authenticated REST store. Every upload carries the selected storage
configuration and a SHA-256 digest of the body so the service can verify
what it received.
"""

from __future__ import annotations

import base64
import hashlib
import threading

import requests

from objstore.infra.storage.client import Body, read_body
from objstore.infra.storage.restful import RestfulStorage, parse_error
from objstore.infra.storage.signers import bearer_signer

DEFAULT_STORAGE_CLASS = "default"
CONFIG_ID_HEADER = "X-LabStore-ConfigId"
SHA256_HEADER = "X-LabStore-SHA256"


def normalize_endpoint(endpoint: str) -> str:
    """Bare hosts get the default scheme and the ``/objects`` base path."""
    if "://" not in endpoint:
        return f"https://{endpoint}/objects"
    return endpoint


def content_digest(data: bytes) -> str:
    """URL-safe base64 of the SHA-256 digest, without padding."""
    digest = hashlib.sha256(data).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


class LabStore(RestfulStorage):
    name = "labstore"

    def __init__(
        self,
        endpoint: str,
        access_key: str,
        secret_key: str,
        token: str = "",
        *,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(
            normalize_endpoint(endpoint),
            access_key,
            secret_key,
            token,
            signer=bearer_signer,
            session=session,
        )
        self._storage_class = DEFAULT_STORAGE_CLASS
        self._lock = threading.Lock()

    @property
    def storage_class(self) -> str:
        with self._lock:
            return self._storage_class

    def set_storage_class(self, storage_class: str) -> None:
        with self._lock:
            self._storage_class = storage_class or DEFAULT_STORAGE_CLASS

    def put(self, key: str, body: Body) -> None:
        data = read_body(body)
        headers = {
            "Content-Length": str(len(data)),
            CONFIG_ID_HEADER: self.storage_class,
            SHA256_HEADER: content_digest(data),
        }
        with self.request("PUT", key, data, headers) as response:
            if response.status_code != 200:
                raise parse_error(response)


def new_labstore(
    endpoint: str, access_key: str, secret_key: str, token: str
) -> LabStore:
    return LabStore(endpoint, access_key, secret_key, token)
