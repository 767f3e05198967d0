#!/usr/bin/env python3
"""Run single object operations against the configured storage backend.

Usage:
  .venv/bin/python scripts/object_cli.py put reports/2024.csv ./2024.csv
  .venv/bin/python scripts/object_cli.py get reports/2024.csv --output ./copy.csv
  .venv/bin/python scripts/object_cli.py head reports/2024.csv
  .venv/bin/python scripts/object_cli.py delete reports/2024.csv
  .venv/bin/python scripts/object_cli.py list --prefix reports/

The backend, endpoint and credentials come from STORAGE_* environment
variables (or .env).
"""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from objstore.common.config import get_settings
from objstore.common.logging import setup_logging
from objstore.infra.storage import ObjectStorage, ObjectStorageError, create_storage


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Object storage command line client")
    sub = parser.add_subparsers(dest="command", required=True)

    put = sub.add_parser("put", help="Upload a local file")
    put.add_argument("key")
    put.add_argument("path", help="Local file to upload")

    get = sub.add_parser("get", help="Download an object")
    get.add_argument("key")
    get.add_argument(
        "--output", default=None, help="Write to this file instead of stdout"
    )

    head = sub.add_parser("head", help="Show object metadata")
    head.add_argument("key")

    delete = sub.add_parser("delete", help="Delete an object")
    delete.add_argument("key")

    listing = sub.add_parser("list", help="List objects")
    listing.add_argument("--prefix", default="")
    return parser


def run(storage: ObjectStorage, args: argparse.Namespace) -> None:
    if args.command == "put":
        with open(args.path, "rb") as fh:
            storage.put(args.key, fh)
        print(f"Uploaded {args.path} to {storage}{args.key}")
    elif args.command == "get":
        data = storage.get(args.key)
        if args.output:
            with open(args.output, "wb") as fh:
                fh.write(data)
        else:
            sys.stdout.buffer.write(data)
            sys.stdout.flush()
    elif args.command == "head":
        info = storage.head(args.key)
        mtime = info.mtime.isoformat() if info.mtime else "-"
        print(f"{info.key}\t{info.size}\t{mtime}")
    elif args.command == "delete":
        storage.delete(args.key)
        print(f"Deleted {args.key}")
    elif args.command == "list":
        for info in storage.list_all(prefix=args.prefix):
            print(f"{info.key}\t{info.size}")


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(
        settings.LOG_LEVEL,
        http_level=None if settings.TRACE_HTTP else "WARNING",
    )
    try:
        storage = create_storage(settings)
        run(storage, args)
    except ObjectStorageError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
