"""In-memory ObjectStorage for tests that do not care about HTTP."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from objstore.infra.storage.client import Body, ObjectInfo, ObjectStorage, read_body
from objstore.infra.storage.errors import ObjectNotFoundError


@dataclass
class MemoryStorage(ObjectStorage):
    objects: dict[str, bytes] = field(default_factory=dict)
    mtimes: dict[str, datetime] = field(default_factory=dict)

    def __str__(self) -> str:
        return "memory://test/"

    def head(self, key: str) -> ObjectInfo:
        if key not in self.objects:
            raise ObjectNotFoundError(404, "not_found", f"{key} not found")
        return ObjectInfo(
            key=key,
            size=len(self.objects[key]),
            mtime=self.mtimes[key],
            is_dir=key.endswith("/"),
        )

    def get(self, key: str, offset: int = 0, limit: int = -1) -> bytes:
        if key not in self.objects:
            raise ObjectNotFoundError(404, "not_found", f"{key} not found")
        data = self.objects[key][offset:]
        return data if limit < 0 else data[:limit]

    def put(self, key: str, body: Body) -> None:
        self.objects[key] = read_body(body)
        self.mtimes[key] = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def delete(self, key: str) -> None:
        self.objects.pop(key, None)
        self.mtimes.pop(key, None)

    def list_all(self, prefix: str = "", marker: str = "") -> list[ObjectInfo]:
        return [
            self.head(key)
            for key in sorted(self.objects)
            if key.startswith(prefix) and key > marker
        ]
