"""Tests for the backend registry."""

from __future__ import annotations

import pytest

from objstore.infra.storage.errors import (
    BackendAlreadyRegisteredError,
    UnknownBackendError,
)
from objstore.infra.storage.registry import BackendDescriptor, BackendRegistry
from tests.infra.memory_storage import MemoryStorage


def _memory_constructor(endpoint, access_key, secret_key, token):
    return MemoryStorage()


class TestBackendRegistry:
    def test_register_and_create(self) -> None:
        registry = BackendRegistry()
        registry.register("memory", _memory_constructor)

        storage = registry.create("memory", "endpoint", "ak", "sk")

        assert isinstance(storage, MemoryStorage)
        assert "memory" in registry
        assert len(registry) == 1

    def test_constructor_receives_connection_parameters(self) -> None:
        seen = []

        def constructor(endpoint, access_key, secret_key, token):
            seen.append((endpoint, access_key, secret_key, token))
            return MemoryStorage()

        registry = BackendRegistry()
        registry.register("memory", constructor)
        registry.create("memory", "host:1", "ak", "sk", "tok")

        assert seen == [("host:1", "ak", "sk", "tok")]

    def test_duplicate_name_is_rejected(self) -> None:
        registry = BackendRegistry()
        registry.register("memory", _memory_constructor)

        with pytest.raises(BackendAlreadyRegisteredError, match="memory"):
            registry.register("memory", lambda *args: MemoryStorage())

        # 原有注册不被覆盖
        assert registry.get("memory").constructor is _memory_constructor

    def test_unknown_name(self) -> None:
        registry = BackendRegistry()
        registry.register("memory", _memory_constructor)

        with pytest.raises(UnknownBackendError, match="Available backends: memory"):
            registry.create("nope", "endpoint", "", "")

    def test_unknown_name_on_empty_registry(self) -> None:
        with pytest.raises(UnknownBackendError, match="<none>"):
            BackendRegistry().get("nope")

    def test_constructor_errors_propagate_unchanged(self) -> None:
        failure = ValueError("bad endpoint")

        def constructor(endpoint, access_key, secret_key, token):
            raise failure

        registry = BackendRegistry()
        registry.register("broken", constructor)

        with pytest.raises(ValueError) as exc_info:
            registry.create("broken", "endpoint", "", "")
        assert exc_info.value is failure

    def test_descriptor_is_immutable(self) -> None:
        registry = BackendRegistry()
        registry.register("memory", _memory_constructor)
        descriptor = registry.get("memory")

        assert descriptor == BackendDescriptor("memory", _memory_constructor)
        with pytest.raises(AttributeError):
            descriptor.name = "other"  # type: ignore[misc]

    def test_names_are_sorted(self) -> None:
        registry = BackendRegistry()
        registry.register("zeta", _memory_constructor)
        registry.register("alpha", _memory_constructor)
        assert registry.names() == ["alpha", "zeta"]

    def test_registries_are_independent(self) -> None:
        first = BackendRegistry()
        second = BackendRegistry()
        first.register("memory", _memory_constructor)
        second.register("memory", _memory_constructor)
        assert "memory" in first and "memory" in second
