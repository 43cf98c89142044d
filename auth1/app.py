"""HTTP API: the home page and the greeting endpoint."""

import logging
import sqlite3
import threading
from dataclasses import dataclass, field
from typing import Annotated, Any, Optional

from fastapi import FastAPI, Path, Response

from .config import Config

API_TITLE = "My API"
API_VERSION = "1.0.0"
MAX_NAME_LENGTH = 30


@dataclass
class Application:
    """Shared state for request handlers."""

    db: sqlite3.Connection
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("auth1"))
    config: Optional[Config] = None
    debug: bool = False
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def _log(self, level: int, message: str, **attrs: Any) -> None:
        self.logger.log(level, message, extra={"attrs": attrs})

    def home(self) -> bytes:
        """Return the body of the home page."""
        self._log(logging.INFO, "home")
        return b"Hello world!"

    def greeting(self, name: str) -> dict[str, str]:
        """Greet ``name``, recording it on first sight, and report its row id."""
        self._log(logging.INFO, "greeting", name=name)

        with self._lock:
            try:
                rows = self.db.execute(
                    "SELECT id FROM sample_table WHERE name = ?", (name,)
                ).fetchall()
            except sqlite3.Error as exc:
                self._log(logging.ERROR, "something bad happened", err=str(exc))
                raise

            row_id = 0
            for (found,) in rows:
                self._log(logging.INFO, "found", name=name)
                if found is None:
                    self._log(logging.ERROR, "something bad happened", err="NULL id")
                    continue
                row_id = found
                self._log(logging.INFO, "found id", id=row_id)

            if row_id == 0:
                self._log(logging.INFO, "inserting", name=name)
                try:
                    cursor = self.db.execute(
                        "INSERT INTO sample_table (name) VALUES (?)", (name,)
                    )
                except sqlite3.Error as exc:
                    self._log(logging.ERROR, "something bad happened", err=str(exc))
                    raise
                row_id = cursor.lastrowid or 0
                self._log(logging.INFO, "inserted id", id=row_id)

        return {"message": f"Hello, {name}! ({row_id})"}


def create_api(application: Application) -> FastAPI:
    """Build the HTTP API serving ``application``'s handlers."""
    api = FastAPI(title=API_TITLE, version=API_VERSION)

    @api.get("/", response_class=Response)
    def home() -> Response:
        return Response(content=application.home(), media_type="application/octet-stream")

    @api.get("/greeting/{name}")
    def greeting(
        name: Annotated[str, Path(max_length=MAX_NAME_LENGTH, description="Name to greet")],
    ) -> dict[str, str]:
        return application.greeting(name)

    return api