from __future__ import annotations

import pytest

from objstore.common import config
from objstore.common.config import get_settings
from objstore.infra.http.session import reset_http_session

STORAGE_ENV_VARS = (
    "STORAGE_BACKEND",
    "STORAGE_ENDPOINT",
    "STORAGE_ACCESS_KEY",
    "STORAGE_SECRET_KEY",
    "STORAGE_SESSION_TOKEN",
    "STORAGE_CLASS",
    "HTTP_CONNECT_TIMEOUT",
    "HTTP_READ_TIMEOUT",
    "HTTP_POOL_SIZE",
    "ENABLE_METRICS",
    "TRACE_HTTP",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Every test starts from default settings and a fresh HTTP session."""
    for name in STORAGE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "ENV_FILE", tmp_path / ".env")
    get_settings.cache_clear()  # type: ignore[attr-defined]
    reset_http_session()
    yield
    get_settings.cache_clear()  # type: ignore[attr-defined]
    reset_http_session()
