"""Command-line entry point.

Usage:
    python -m monitor serve                      # run the HTTP API
    python -m monitor probe                      # local snapshot as JSON
    python -m monitor probe --host 10.0.0.5 --username root --password x
    python -m monitor probe --host 10.0.0.5 --username root --key-file ~/.ssh/id_ed25519
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from monitor.collectors import LocalCollector, RemoteCollector
from monitor.config import settings
from monitor.errors import MonitorError
from monitor.ssh.auth import build_connection_request


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="monitor", description="Live system metrics, local or over SSH")
    parser.add_argument("--log-level", default=settings.log_level)
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=settings.host)
    serve.add_argument("--port", type=int, default=settings.port)

    probe = sub.add_parser("probe", help="Print one snapshot as JSON")
    probe.add_argument("--host", help="Remote host; omit for the local machine")
    probe.add_argument("--port", type=int, default=22)
    probe.add_argument("--username")
    creds = probe.add_mutually_exclusive_group()
    creds.add_argument("--password")
    creds.add_argument("--key-file", type=Path, help="Private key in OpenSSH/PEM format")
    probe.add_argument("--passphrase")
    return parser


async def _probe(args: argparse.Namespace) -> dict:
    if not args.host:
        snapshot = await LocalCollector(disk_path=settings.disk_path).poll()
    else:
        payload = {
            "host": args.host,
            "port": args.port,
            "username": args.username,
            "password": args.password,
            "privateKey": args.key_file.expanduser().read_text() if args.key_file else None,
            "passphrase": args.passphrase,
        }
        request = build_connection_request(payload)
        snapshot = await RemoteCollector.from_settings(request, settings).poll()
    return snapshot.model_dump(mode="json", by_alias=True)


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if args.command == "serve":
        import uvicorn

        uvicorn.run("monitor.main:app", host=args.host, port=args.port, log_level=args.log_level.lower())
        return 0

    try:
        data = asyncio.run(_probe(args))
    except MonitorError as exc:
        print(exc.message, file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Failed to fetch system info: {exc}", file=sys.stderr)
        return 1
    print(json.dumps(data, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
