"""Request signing strategies.

A signer receives the prepared request together with the instance
credentials and mutates the request headers in place. Every signer accepts
the same four arguments even when it only needs some of them, so the
executor never has to know which scheme a backend uses.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
from typing import Protocol
from urllib.parse import urlsplit

from requests import PreparedRequest

SIGNED_HEADER_NAMES = ("Content-MD5", "Content-Type", "Date")


class Signer(Protocol):
    def __call__(
        self,
        request: PreparedRequest,
        access_key: str,
        secret_key: str,
        sign_name: str,
    ) -> None:
        ...


def bearer_signer(
    request: PreparedRequest, access_key: str, secret_key: str, sign_name: str
) -> None:
    """Token authentication: the secret key is sent as a bearer token."""
    request.headers["Authorization"] = f"Bearer {secret_key}"


def _canonical_vendor_headers(request: PreparedRequest, sign_name: str) -> str:
    prefix = f"x-{sign_name.lower()}-"
    names = sorted(
        name.lower() for name in request.headers if name.lower().startswith(prefix)
    )
    return "".join(f"{name}:{request.headers[name]}\n" for name in names)


def string_to_sign(request: PreparedRequest, sign_name: str) -> str:
    parts = urlsplit(request.url or "")
    bucket = (parts.hostname or "").split(".")[0]
    lines = [request.method or ""]
    lines.extend(request.headers.get(name, "") for name in SIGNED_HEADER_NAMES)
    head = "\n".join(lines) + "\n"
    return head + _canonical_vendor_headers(request, sign_name) + f"/{bucket}{parts.path}"


def hmac_signer(
    request: PreparedRequest, access_key: str, secret_key: str, sign_name: str
) -> None:
    """HMAC-SHA1 header signing in the ``<name> <access>:<signature>`` form.

    Anonymous access (empty access key) leaves the request unsigned.
    """
    if not access_key:
        return
    digest = hmac.new(
        secret_key.encode("utf-8"),
        string_to_sign(request, sign_name).encode("utf-8"),
        hashlib.sha1,
    ).digest()
    signature = base64.b64encode(digest).decode("ascii")
    request.headers["Authorization"] = f"{sign_name} {access_key}:{signature}"
