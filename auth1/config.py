"""Application configuration derived from command-line parameters."""

from __future__ import annotations

import re
from dataclasses import dataclass

_INTEGER = re.compile(r"[+-]?[0-9]+")


@dataclass
class Config:
    """Runtime settings for the service."""

    name: str = ""
    addr: str = ""
    host: str = ""
    port: int = 0
    debug: bool = False
    db_dsn: str = ""


def new_configuration(params: Config) -> Config:
    """Build a configuration whose host and port are split out of ``params.addr``.

    Only the address and the values derived from it are carried over.
    Raises ``ValueError`` when the address has no port or the port is not an integer.
    """
    parts = params.addr.split(":")
    if len(parts) < 2:
        raise ValueError(f"address {params.addr!r} has no port")

    port_text = parts[1]
    if not _INTEGER.fullmatch(port_text):
        raise ValueError(f"invalid port {port_text!r} in address {params.addr!r}")

    return Config(addr=params.addr, host=parts[0], port=int(port_text))