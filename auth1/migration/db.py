"""SQLite schema inspection and table-level schema synchronisation."""

from __future__ import annotations

import logging
import os
import sqlite3
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from .utilities import diff, read_schema_file

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Index:
    """An index definition as stored in the SQLite schema table."""

    name: str
    table_name: str
    sql: str


@dataclass(frozen=True)
class TableColumn:
    """A column as reported by ``PRAGMA table_info``."""

    name: str
    type: str
    not_null: bool = False
    default_value: Any = None
    primary_key: bool = False


@dataclass
class Table:
    """A table definition and, once inspected, its columns."""

    name: str
    sql: str
    columns: dict[str, TableColumn] = field(default_factory=dict)


@dataclass
class Schema:
    """Tables and indices of a database."""

    tables: dict[str, Table] = field(default_factory=dict)
    indices: list[Index] = field(default_factory=list)

    def get_table_indices(self, table_name: str) -> dict[str, Index]:
        """Return the indices defined on ``table_name``, keyed by index name."""
        return {index.name: index for index in self.indices if index.table_name == table_name}


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


def connect(dsn: str) -> sqlite3.Connection:
    """Open an SQLite connection; ``dsn`` may be a path or a ``file:`` URI."""
    return sqlite3.connect(dsn, uri=True, isolation_level=None, check_same_thread=False)


class Database:
    """An SQLite connection together with its last inspected schema."""

    def __init__(self, connection: sqlite3.Connection, schema: Schema | None = None) -> None:
        self.connection = connection
        self.schema = schema if schema is not None else Schema()

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self.connection.close()

    def get_schema(self) -> Schema:
        """Read tables and indices from the schema table.

        Internal ``sqlite_`` objects and automatic indices (which have no SQL) are skipped.
        """
        rows = self.connection.execute(
            "SELECT type, name, tbl_name, sql FROM sqlite_master"
        ).fetchall()
        schema = Schema()
        for kind, name, table_name, sql in rows:
            if sql is None or name.startswith("sqlite_"):
                continue
            if kind == "table":
                schema.tables[table_name] = Table(name=name, sql=sql)
            elif kind == "index":
                schema.indices.append(Index(name=name, table_name=table_name, sql=sql))
        self.schema = schema
        return schema

    def exec(self, sql: str) -> None:
        """Execute one or more SQL statements."""
        try:
            self.connection.executescript(sql)
        except sqlite3.Error as exc:
            log.error("%r: %s", str(exc), sql)
            raise

    def query(self, sql: str) -> sqlite3.Cursor:
        """Run a single statement and return its cursor."""
        try:
            return self.connection.execute(sql)
        except sqlite3.Error as exc:
            log.error("%r: %s", str(exc), sql)
            raise

    def remove_tables(self, tables: Iterable[str]) -> None:
        """Drop every named table."""
        for name in tables:
            try:
                self.connection.execute(f"DROP TABLE {_quote(name)}")
            except sqlite3.Error as exc:
                log.error("%r: %s", str(exc), name)
                raise

    def create_tables(self, tables: Mapping[str, Table]) -> None:
        """Create every table from its stored definition."""
        for table in tables.values():
            self.exec(table.sql)

    def apply_schema_changes(self, clean_db: Database) -> None:
        """Create tables missing here and drop tables absent from ``clean_db``.

        Newly created tables also receive their indices from ``clean_db``.
        """
        clean_schema = clean_db.get_schema()
        new_tables, tables_to_drop = diff(clean_schema.tables, self.get_schema().tables)

        self.remove_tables(tables_to_drop)
        self.create_tables(new_tables)

        for table_name in new_tables:
            for index in clean_schema.get_table_indices(table_name).values():
                self.exec(index.sql)

    def disable_foreign_keys(self) -> None:
        self.exec("PRAGMA foreign_keys = OFF")

    def get_columns(self, table_name: str) -> dict[str, TableColumn]:
        """Return the columns of ``table_name``, keyed by column name."""
        columns: dict[str, TableColumn] = {}
        for _cid, name, col_type, not_null, default, pk in self.query(
            f"PRAGMA table_info({_quote(table_name)})"
        ):
            columns[name] = TableColumn(
                name=name,
                type=col_type,
                not_null=not_null == 1,
                default_value=default,
                primary_key=pk == 1,
            )
        table = self.schema.tables.get(table_name)
        if table is not None:
            table.columns = columns
        return columns

    def find_altered_tables(self, clean_db: Database) -> dict[str, Table]:
        """Return the clean definitions of tables whose column names differ here."""
        clean_schema = clean_db.get_schema()
        altered: dict[str, Table] = {}
        for name in self.get_schema().tables:
            clean_table = clean_schema.tables.get(name)
            if clean_table is None:
                continue
            add, remove = diff(clean_db.get_columns(name), self.get_columns(name))
            if add or remove:
                altered[name] = clean_table
        return altered


def new_db(dsn: str, schema_file: str | os.PathLike[str] | None = None) -> Database:
    """Open a database and, when a schema file is given, execute it."""
    db = Database(connect(dsn))
    if schema_file is not None:
        try:
            db.exec(read_schema_file(schema_file))
        except BaseException:
            db.close()
            raise
    return db