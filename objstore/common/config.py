from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

ENV_FILE = Path(".env")


def _load_env_file() -> None:
    if not ENV_FILE.exists():
        return
    for raw_line in ENV_FILE.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "y", "on"}


@dataclass
class Settings:
    STORAGE_BACKEND: str = "labstore"
    STORAGE_ENDPOINT: str = "localhost:8080"
    STORAGE_ACCESS_KEY: str = ""
    STORAGE_SECRET_KEY: str = ""
    STORAGE_SESSION_TOKEN: str = ""
    STORAGE_CLASS: str = ""
    HTTP_CONNECT_TIMEOUT: float = 5.0
    HTTP_READ_TIMEOUT: float = 60.0
    HTTP_POOL_SIZE: int = 32
    ENABLE_METRICS: bool = True
    TRACE_HTTP: bool = False
    LOG_LEVEL: str = "INFO"

    def __post_init__(self) -> None:
        if self.HTTP_CONNECT_TIMEOUT <= 0 or self.HTTP_READ_TIMEOUT <= 0:
            raise ValueError("HTTP timeouts must be positive numbers of seconds.")
        if self.HTTP_POOL_SIZE <= 0:
            raise ValueError("HTTP_POOL_SIZE must be a positive integer.")

    @property
    def http_timeout(self) -> tuple[float, float]:
        return (self.HTTP_CONNECT_TIMEOUT, self.HTTP_READ_TIMEOUT)

    @classmethod
    def from_environment(cls) -> "Settings":
        _load_env_file()
        return cls(
            STORAGE_BACKEND=os.environ.get("STORAGE_BACKEND", cls.STORAGE_BACKEND),
            STORAGE_ENDPOINT=os.environ.get("STORAGE_ENDPOINT", cls.STORAGE_ENDPOINT),
            STORAGE_ACCESS_KEY=os.environ.get("STORAGE_ACCESS_KEY", ""),
            STORAGE_SECRET_KEY=os.environ.get("STORAGE_SECRET_KEY", ""),
            STORAGE_SESSION_TOKEN=os.environ.get("STORAGE_SESSION_TOKEN", ""),
            STORAGE_CLASS=os.environ.get("STORAGE_CLASS", ""),
            HTTP_CONNECT_TIMEOUT=float(
                os.environ.get("HTTP_CONNECT_TIMEOUT", cls.HTTP_CONNECT_TIMEOUT)
            ),
            HTTP_READ_TIMEOUT=float(
                os.environ.get("HTTP_READ_TIMEOUT", cls.HTTP_READ_TIMEOUT)
            ),
            HTTP_POOL_SIZE=int(os.environ.get("HTTP_POOL_SIZE", cls.HTTP_POOL_SIZE)),
            ENABLE_METRICS=_as_bool(
                os.environ.get("ENABLE_METRICS"), cls.ENABLE_METRICS
            ),
            TRACE_HTTP=_as_bool(os.environ.get("TRACE_HTTP"), cls.TRACE_HTTP),
            LOG_LEVEL=os.environ.get("LOG_LEVEL", cls.LOG_LEVEL).upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_environment()
