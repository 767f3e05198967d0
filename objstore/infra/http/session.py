from __future__ import annotations

import threading

import requests
from requests.adapters import HTTPAdapter

from objstore.common.config import get_settings

_session: requests.Session | None = None
_session_lock = threading.Lock()


def _build_adapter(pool_size: int) -> HTTPAdapter:
    # 重试由调用方负责，这里显式关闭
    return HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size, max_retries=0)


def get_http_session() -> requests.Session:
    global _session
    if _session is not None:
        return _session
    with _session_lock:
        if _session is None:
            settings = get_settings()
            session = requests.Session()
            adapter = _build_adapter(settings.HTTP_POOL_SIZE)
            session.mount("http://", adapter)
            session.mount("https://", adapter)
            _session = session
        return _session


def reset_http_session() -> None:
    global _session
    with _session_lock:
        if _session is not None:
            _session.close()
        _session = None
