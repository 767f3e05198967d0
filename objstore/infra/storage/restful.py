"""Shared HTTP executor for REST style object storage backends.

``RestfulStorage`` builds one request per operation, lets the configured
signer authenticate it, sends it through the shared ``requests`` session and
maps the response status onto the error taxonomy in ``errors``. Backends
subclass it and override only what differs (endpoint shape, signer, extra
headers on writes).
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from datetime import datetime
from email.utils import formatdate, parsedate_to_datetime
from typing import Iterator, Mapping
from urllib.parse import urlsplit

import requests

from objstore.common.config import Settings, get_settings
from objstore.infra.http.session import get_http_session
from objstore.infra.observability.metrics import LATENCY, REQUESTS
from objstore.infra.storage.client import Body, ObjectInfo, ObjectStorage, read_body
from objstore.infra.storage.errors import (
    BackendError,
    ObjectNotFoundError,
    TransportError,
)
from objstore.infra.storage.signers import Signer, hmac_signer

logger = logging.getLogger("objstore.http")

ERROR_CODE_BY_STATUS = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    411: "length_required",
    412: "precondition_failed",
    413: "payload_too_large",
    416: "range_not_satisfiable",
    429: "too_many_requests",
    500: "internal_error",
    502: "bad_gateway",
    503: "service_unavailable",
    504: "gateway_timeout",
}

SENSITIVE_HEADERS = {
    "authorization",
    "proxy-authorization",
    "cookie",
    "x-auth-token",
    "x-amz-security-token",
}


def _resolve_error_kind(status_code: int, override: str | None = None) -> str:
    if override:
        return override
    return ERROR_CODE_BY_STATUS.get(status_code, "unknown_error")


def parse_error(response: requests.Response) -> BackendError:
    """Convert a non-success response into a ``BackendError``.

    JSON bodies may carry ``code``/``kind``/``error``, ``message``/``msg``/
    ``detail`` and ``retryable``; anything else is kept as the raw message.
    """
    status_code = response.status_code
    message = (response.text or "").strip()
    kind: str | None = None
    retryable: bool | None = None

    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        raw_kind = payload.get("code") or payload.get("kind") or payload.get("error")
        if isinstance(raw_kind, str):
            kind = raw_kind
        raw_message = (
            payload.get("message") or payload.get("msg") or payload.get("detail")
        )
        if isinstance(raw_message, str):
            message = raw_message
        raw_retryable = payload.get("retryable")
        if isinstance(raw_retryable, bool):
            retryable = raw_retryable

    if not message:
        message = response.reason or ""
    error_cls = ObjectNotFoundError if status_code == 404 else BackendError
    return error_cls(
        status_code, _resolve_error_kind(status_code, kind), message, retryable
    )


def _parse_mtime(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None


def _mask_headers(headers: Mapping[str, str]) -> dict[str, str]:
    return {
        name: "***" if name.lower() in SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }


class RestfulStorage(ObjectStorage):
    """Object storage reachable through plain ``<endpoint>/<key>`` HTTP requests."""

    name = "restful"

    def __init__(
        self,
        endpoint: str,
        access_key: str,
        secret_key: str,
        token: str = "",
        *,
        signer: Signer = hmac_signer,
        sign_name: str = "",
        session: requests.Session | None = None,
        timeout: float | tuple[float, float] | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._access_key = access_key
        self._secret_key = secret_key
        self._token = token
        self._signer = signer
        self._sign_name = sign_name
        self._session = session
        self._timeout = timeout

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def __str__(self) -> str:
        return f"{self.name}://{urlsplit(self._endpoint).netloc}/"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(endpoint={self._endpoint!r})"

    @contextmanager
    def request(
        self,
        method: str,
        key: str,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Iterator[requests.Response]:
        """Send one signed request and yield the response.

        The response is closed when the ``with`` block exits, whatever the
        outcome.

        Raises:
            TransportError: If the request could not be delivered.
        """
        url = f"{self._endpoint.rstrip('/')}/{key}"
        request_headers = {"Date": formatdate(usegmt=True)}
        request_headers.update(headers or {})
        prepared = requests.Request(
            method, url, data=body, headers=request_headers
        ).prepare()
        self._signer(prepared, self._access_key, self._secret_key, self._sign_name)

        settings = get_settings()
        session = self._session or get_http_session()
        timeout = self._timeout or settings.http_timeout
        start = time.perf_counter()
        try:
            response = session.send(prepared, timeout=timeout)
        except requests.RequestException as exc:
            self._observe(
                prepared, key, None, time.perf_counter() - start, settings, exc
            )
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        self._observe(
            prepared, key, response.status_code, time.perf_counter() - start, settings
        )
        try:
            yield response
        finally:
            response.close()

    def _observe(
        self,
        prepared: requests.PreparedRequest,
        key: str,
        status_code: int | None,
        elapsed: float,
        settings: Settings,
        exc: Exception | None = None,
    ) -> None:
        method = prepared.method or ""
        status = str(status_code) if status_code is not None else "error"
        if settings.ENABLE_METRICS:
            REQUESTS.labels(self.name, method, status).inc()
            LATENCY.labels(self.name, method).observe(elapsed)

        duration_ms = round(elapsed * 1000, 3)
        extra_payload: dict[str, object] = {
            "backend": self.name,
            "method": method,
            "key": key,
            "status": status,
            "duration_ms": duration_ms,
        }
        if settings.TRACE_HTTP:
            extra_payload["request_headers"] = _mask_headers(prepared.headers)

        if exc is not None:
            extra_payload["exception"] = repr(exc)
            level = logging.ERROR
        elif status_code is not None and status_code >= 500:
            level = logging.ERROR
        elif status_code is not None and status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        logger.log(
            level,
            "object_request backend=%s method=%s key=%s status=%s duration_ms=%.3f",
            self.name,
            method,
            key,
            status,
            duration_ms,
            extra={"extra": extra_payload},
        )

    def head(self, key: str) -> ObjectInfo:
        with self.request("HEAD", key) as response:
            if response.status_code != 200:
                raise parse_error(response)
            return ObjectInfo(
                key=key,
                size=int(response.headers.get("Content-Length", 0)),
                mtime=_parse_mtime(response.headers.get("Last-Modified")),
                is_dir=key.endswith("/"),
            )

    def get(self, key: str, offset: int = 0, limit: int = -1) -> bytes:
        headers: dict[str, str] = {}
        if offset > 0 or limit > 0:
            end = str(offset + limit - 1) if limit > 0 else ""
            headers["Range"] = f"bytes={offset}-{end}"
        with self.request("GET", key, headers=headers) as response:
            if response.status_code not in (200, 206):
                raise parse_error(response)
            return response.content

    def put(self, key: str, body: Body) -> None:
        data = read_body(body)
        with self.request(
            "PUT", key, data, {"Content-Length": str(len(data))}
        ) as response:
            if response.status_code not in (200, 201):
                raise parse_error(response)

    def delete(self, key: str) -> None:
        with self.request("DELETE", key) as response:
            if response.status_code not in (200, 204, 404):
                raise parse_error(response)


def new_restful(
    endpoint: str, access_key: str, secret_key: str, token: str
) -> RestfulStorage:
    if "://" not in endpoint:
        endpoint = f"https://{endpoint}"
    return RestfulStorage(endpoint, access_key, secret_key, token, sign_name="AWS")
