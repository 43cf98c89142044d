"""Bring a live SQLite database in line with a schema file."""

from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator

from .db import Database, Table, _quote, new_db
from .utilities import intersect

CLEAN_DSN = "file:clean.sqlite3?mode=memory"


@contextmanager
def _transaction(connection: sqlite3.Connection) -> Iterator[None]:
    if connection.in_transaction:
        connection.commit()
    connection.execute("BEGIN")
    try:
        yield
    except BaseException:
        connection.rollback()
        raise
    else:
        connection.commit()


def _create_table(connection: sqlite3.Connection, table_name: str, new_name: str, table: Table) -> None:
    print(f"creating table {new_name}")
    statement = table.sql.replace(table_name, new_name, 1)
    print(statement)
    connection.execute(statement)


def _migrate_content(
    connection: sqlite3.Connection,
    clean_db: Database,
    current_db: Database,
    table_name: str,
    new_name: str,
) -> None:
    print(f"migrating content from {table_name} to {new_name}...")
    shared = intersect(clean_db.get_columns(table_name), current_db.get_columns(table_name))
    if not shared:
        return
    columns = ", ".join(_quote(column) for column in shared)
    connection.execute(
        f"INSERT INTO {_quote(new_name)} ({columns}) SELECT {columns} FROM {_quote(table_name)}"
    )
    print(f"inserted {new_name}")


def _drop_table(connection: sqlite3.Connection, table_name: str) -> None:
    print(f"dropping {table_name}")
    connection.execute(f"DROP TABLE IF EXISTS {_quote(table_name)}")
    print(f"dropped {table_name}")


def _rename_table(connection: sqlite3.Connection, table_name: str, new_name: str) -> None:
    print(f"renaming table {table_name}")
    connection.execute(f"ALTER TABLE {_quote(new_name)} RENAME TO {_quote(table_name)}")
    print(f"renamed {new_name} to {table_name}")


def _create_indices_on_table(connection: sqlite3.Connection, table_name: str, clean_db: Database) -> None:
    for index in clean_db.get_schema().get_table_indices(table_name).values():
        connection.execute(index.sql)


def migrate(connection: sqlite3.Connection, schema_path: str | os.PathLike[str]) -> None:
    """Migrate ``connection`` to the schema described in ``schema_path``.

    Tables are created or dropped to match; tables whose columns changed are
    rebuilt, keeping the data of the columns both versions share.
    """
    print("migrating...")
    current = Database(connection)

    with new_db(CLEAN_DSN, schema_path) as clean:
        current.apply_schema_changes(clean)
        current.disable_foreign_keys()

        for table_name, table in current.find_altered_tables(clean).items():
            print(f"found altered table {table_name}")
            new_name = f"{table_name}_new"
            with _transaction(connection):
                _create_table(connection, table_name, new_name, table)
                _migrate_content(connection, clean, current, table_name, new_name)
                _drop_table(connection, table_name)
                _rename_table(connection, table_name, new_name)
                _create_indices_on_table(connection, table_name, clean)
                connection.execute("PRAGMA foreign_key_check").fetchall()

        current.exec("PRAGMA foreign_keys = ON")

    print("migration complete.")