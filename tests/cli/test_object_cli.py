from __future__ import annotations

import argparse

import pytest

from scripts import object_cli
from scripts.object_cli import main, run
from tests.infra.memory_storage import MemoryStorage


@pytest.fixture
def storage(monkeypatch) -> MemoryStorage:
    memory = MemoryStorage()
    monkeypatch.setattr(object_cli, "create_storage", lambda settings: memory)
    monkeypatch.setattr(object_cli, "setup_logging", lambda level, **kwargs: None)
    return memory


def test_put_get_delete_roundtrip(storage, tmp_path, capsys) -> None:
    source = tmp_path / "report.csv"
    source.write_bytes(b"a,b\n1,2\n")
    target = tmp_path / "copy.csv"

    assert main(["put", "reports/report.csv", str(source)]) == 0
    assert storage.objects["reports/report.csv"] == b"a,b\n1,2\n"

    assert main(["get", "reports/report.csv", "--output", str(target)]) == 0
    assert target.read_bytes() == b"a,b\n1,2\n"

    assert main(["delete", "reports/report.csv"]) == 0
    assert "reports/report.csv" not in storage.objects
    assert "Deleted reports/report.csv" in capsys.readouterr().out


def test_head_and_list(storage, capsys) -> None:
    storage.put("logs/a.txt", b"12345")
    storage.put("logs/b.txt", b"1")
    storage.put("other", b"")

    assert main(["head", "logs/a.txt"]) == 0
    assert main(["list", "--prefix", "logs/"]) == 0

    out = capsys.readouterr().out.splitlines()
    assert out[0] == "logs/a.txt\t5\t2024-01-01T00:00:00+00:00"
    assert out[1:] == ["logs/a.txt\t5", "logs/b.txt\t1"]


def test_storage_errors_exit_with_status_one(storage, capsys) -> None:
    assert main(["head", "missing"]) == 1
    assert "error:" in capsys.readouterr().err


def test_unknown_backend_exits_with_status_one(monkeypatch, capsys) -> None:
    monkeypatch.setenv("STORAGE_BACKEND", "ftp")
    monkeypatch.setattr(object_cli, "setup_logging", lambda level, **kwargs: None)

    assert main(["head", "k"]) == 1
    assert "Unknown storage backend 'ftp'" in capsys.readouterr().err


def test_run_get_to_stdout(capsysbinary) -> None:
    memory = MemoryStorage()
    memory.put("k", b"raw bytes")

    run(memory, argparse.Namespace(command="get", key="k", output=None))

    assert capsysbinary.readouterr().out == b"raw bytes"


@pytest.mark.parametrize(
    ("trace", "expected"),
    [("false", "WARNING"), ("true", None)],
)
def test_request_logs_follow_trace_setting(storage, monkeypatch, trace, expected) -> None:
    calls: list[tuple[str, str | None]] = []
    monkeypatch.setenv("TRACE_HTTP", trace)
    monkeypatch.setattr(
        object_cli,
        "setup_logging",
        lambda level, http_level=None: calls.append((level, http_level)),
    )

    assert main(["head", "missing"]) == 1
    assert calls == [("INFO", expected)]
