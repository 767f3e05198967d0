"""S3-compatible storage backend.

Works with AWS S3, MinIO and other S3-compatible services using path-style
addressing. Request signing (SigV4) and transport are delegated to botocore;
its failures are mapped onto the shared error taxonomy.

Dependencies:
    - boto3
    - botocore
"""

from __future__ import annotations

import threading
from typing import Any
from urllib.parse import urlsplit

from botocore.exceptions import ClientError
from botocore.exceptions import ConnectionError as BotoConnectionError
from botocore.exceptions import HTTPClientError

from objstore.infra.storage.client import Body, ObjectInfo, ObjectStorage, read_body
from objstore.infra.storage.errors import (
    BackendError,
    ObjectNotFoundError,
    ObjectStorageError,
    TransportError,
)

NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


def _map_error(exc: Exception, action: str) -> ObjectStorageError:
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {})
        metadata = exc.response.get("ResponseMetadata", {})
        code = str(error.get("Code") or "unknown_error")
        status_code = int(metadata.get("HTTPStatusCode") or 0)
        message = str(error.get("Message") or f"Failed to {action}")
        error_cls = (
            ObjectNotFoundError
            if code in NOT_FOUND_CODES or status_code == 404
            else BackendError
        )
        return error_cls(status_code, code, message)
    return TransportError(f"Failed to {action}: {exc}")


_BOTO_ERRORS = (ClientError, BotoConnectionError, HTTPClientError)


def _to_info(item: dict[str, Any]) -> ObjectInfo:
    return ObjectInfo(
        key=item["Key"],
        size=int(item.get("Size") or 0),
        mtime=item.get("LastModified"),
        is_dir=item["Key"].endswith("/"),
        storage_class=item.get("StorageClass"),
    )


class S3Storage(ObjectStorage):
    """S3-compatible object storage backend.

    The endpoint is ``<scheme>://<host>[:port]/<bucket>``.
    """

    name = "s3"

    def __init__(
        self, endpoint: str, access_key: str, secret_key: str, token: str = ""
    ) -> None:
        if "://" not in endpoint:
            endpoint = f"https://{endpoint}"
        parts = urlsplit(endpoint)
        bucket = parts.path.strip("/").split("/")[0]
        if not bucket:
            raise ValueError(f"S3 endpoint {endpoint!r} must include a bucket name")

        self._endpoint = endpoint
        self._bucket = bucket
        self._storage_class = ""
        self._lock = threading.Lock()
        self._client = self._build_client(
            f"{parts.scheme}://{parts.netloc}", access_key, secret_key, token
        )

    @staticmethod
    def _build_client(
        endpoint_url: str, access_key: str, secret_key: str, token: str
    ) -> Any:
        """Create a boto3 S3 client; no request is sent here."""
        try:
            import boto3
            from botocore.config import Config
        except ImportError as exc:
            raise ObjectStorageError(
                "boto3 is required for the s3 backend. Install with: pip install boto3"
            ) from exc

        return boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key or None,
            aws_secret_access_key=secret_key or None,
            aws_session_token=token or None,
            config=Config(s3={"addressing_style": "path"}, retries={"max_attempts": 1}),
        )

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def __str__(self) -> str:
        return f"s3://{self._bucket}/"

    def set_storage_class(self, storage_class: str) -> None:
        with self._lock:
            self._storage_class = storage_class

    def create(self) -> None:
        """Create the bucket; an already existing bucket is fine."""
        try:
            self._client.create_bucket(Bucket=self._bucket)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code")
            if code in {"BucketAlreadyOwnedByYou", "BucketAlreadyExists"}:
                return
            raise _map_error(exc, "create bucket") from exc
        except _BOTO_ERRORS as exc:
            raise _map_error(exc, "create bucket") from exc

    def head(self, key: str) -> ObjectInfo:
        try:
            response = self._client.head_object(Bucket=self._bucket, Key=key)
        except _BOTO_ERRORS as exc:
            raise _map_error(exc, "get object metadata") from exc

        size = response.get("ContentLength")
        return ObjectInfo(
            key=key,
            size=int(size) if size is not None else 0,
            mtime=response.get("LastModified"),
            is_dir=key.endswith("/"),
            storage_class=response.get("StorageClass"),
        )

    def get(self, key: str, offset: int = 0, limit: int = -1) -> bytes:
        params: dict[str, Any] = {"Bucket": self._bucket, "Key": key}
        if offset > 0 or limit > 0:
            end = str(offset + limit - 1) if limit > 0 else ""
            params["Range"] = f"bytes={offset}-{end}"
        try:
            response = self._client.get_object(**params)
        except _BOTO_ERRORS as exc:
            raise _map_error(exc, "get object") from exc

        stream = response["Body"]
        try:
            return stream.read()
        except _BOTO_ERRORS as exc:
            raise _map_error(exc, "read object body") from exc
        finally:
            stream.close()

    def put(self, key: str, body: Body) -> None:
        data = read_body(body)
        params: dict[str, Any] = {"Bucket": self._bucket, "Key": key, "Body": data}
        with self._lock:
            storage_class = self._storage_class
        if storage_class:
            params["StorageClass"] = storage_class
        try:
            self._client.put_object(**params)
        except _BOTO_ERRORS as exc:
            raise _map_error(exc, "put object") from exc

    def delete(self, key: str) -> None:
        try:
            self._client.delete_object(Bucket=self._bucket, Key=key)
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in NOT_FOUND_CODES:
                return
            raise _map_error(exc, "delete object") from exc
        except _BOTO_ERRORS as exc:
            raise _map_error(exc, "delete object") from exc

    def list(
        self,
        prefix: str = "",
        marker: str = "",
        delimiter: str = "",
        limit: int = 1000,
    ) -> list[ObjectInfo]:
        params: dict[str, Any] = {
            "Bucket": self._bucket,
            "Prefix": prefix,
            "MaxKeys": int(limit),
        }
        if marker:
            params["StartAfter"] = marker
        if delimiter:
            params["Delimiter"] = delimiter
        try:
            response = self._client.list_objects_v2(**params)
        except _BOTO_ERRORS as exc:
            raise _map_error(exc, "list objects") from exc

        objects = [_to_info(item) for item in response.get("Contents", [])]
        objects.extend(
            ObjectInfo(key=entry["Prefix"], size=0, mtime=None, is_dir=True)
            for entry in response.get("CommonPrefixes", [])
        )
        return sorted(objects, key=lambda obj: obj.key)

    def list_all(self, prefix: str = "", marker: str = "") -> list[ObjectInfo]:
        params: dict[str, Any] = {"Bucket": self._bucket, "Prefix": prefix}
        if marker:
            params["StartAfter"] = marker
        objects: list[ObjectInfo] = []
        try:
            paginator = self._client.get_paginator("list_objects_v2")
            for page in paginator.paginate(**params):
                objects.extend(_to_info(item) for item in page.get("Contents", []))
        except _BOTO_ERRORS as exc:
            raise _map_error(exc, "list objects") from exc
        return objects


def new_s3(endpoint: str, access_key: str, secret_key: str, token: str) -> S3Storage:
    return S3Storage(endpoint, access_key, secret_key, token)
