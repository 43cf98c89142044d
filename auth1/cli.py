"""Command-line entry point: configure, migrate and serve."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Sequence

import uvicorn

from .app import Application, create_api
from .config import Config, new_configuration
from .migration.db import connect
from .migration.migrate import migrate

SCHEMA_PATH = "./schema.sql"
CERT_PATH = "./cert.pem"
KEY_PATH = "./key.pem"

_LEVEL_NAMES = {"WARNING": "WARN", "CRITICAL": "ERROR"}


class _JsonFormatter(logging.Formatter):
    """Render records as one JSON object per line."""

    def __init__(self, add_source: bool) -> None:
        super().__init__()
        self.add_source = add_source

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).astimezone().isoformat(),
            "level": _LEVEL_NAMES.get(record.levelname, record.levelname),
        }
        if self.add_source:
            entry["source"] = {
                "function": record.funcName,
                "file": record.pathname,
                "line": record.lineno,
            }
        entry["msg"] = record.getMessage()
        entry.update(getattr(record, "attrs", {}) or {})
        return json.dumps(entry, default=str)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line options."""
    parser = argparse.ArgumentParser(prog="auth1")
    parser.add_argument("-name", "--name", default="Auth 1", help="Application name")
    parser.add_argument("-addr", "--addr", default="127.0.0.1:3000", help="HTTP network address")
    parser.add_argument("-debug", "--debug", action="store_true", help="Enable debug mode")
    parser.add_argument("-dsn", "--dsn", default="file:auth1.sqlite3", help="Path for Sqlite database")
    return parser.parse_args(argv)


def build_logger(debug: bool) -> logging.Logger:
    """Return the application logger writing JSON lines to standard output."""
    logger = logging.getLogger("auth1")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_JsonFormatter(add_source=debug))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.propagate = False
    return logger


def main(argv: Sequence[str] | None = None) -> None:
    """Run the service."""
    args = parse_args(argv)
    logger = build_logger(args.debug)

    try:
        config = new_configuration(
            Config(name=args.name, addr=args.addr, debug=args.debug, db_dsn=args.dsn)
        )
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    conn = connect(args.dsn)
    try:
        migrate(conn, SCHEMA_PATH)
        application = Application(db=conn, logger=logger, config=config, debug=args.debug)
        api = create_api(application)
        host = config.host or "0.0.0.0"

        if not os.path.exists(CERT_PATH):
            logger.info("starting server", extra={"attrs": {"addr": "http://" + args.addr}})
            uvicorn.run(api, host=host, port=config.port)
            return

        logger.info("starting server", extra={"attrs": {"addr": "https://" + args.addr}})
        uvicorn.run(
            api,
            host=host,
            port=config.port,
            ssl_certfile=CERT_PATH,
            ssl_keyfile=KEY_PATH,
        )
    finally:
        conn.close()


if __name__ == "__main__":
    main()