# auth1

A small HTTP API service backed by SQLite. At startup it updates the database
to match a `schema.sql` file in the working directory. Then it serves two
endpoints with FastAPI and uvicorn.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running the server

```
auth1
```

Options. Each option can be given with one dash or two, for example `-addr` or
`--addr`.

| Option    | Default                | Meaning                                         |
|-----------|------------------------|-------------------------------------------------|
| `-name`   | `Auth 1`               | Application name. It is accepted but not used.  |
| `-addr`   | `127.0.0.1:3000`       | Address to listen on, as `host:port`            |
| `-debug`  | off                    | Debug-level logging, with the source location   |
| `-dsn`    | `file:auth1.sqlite3`   | SQLite database, as a path or a `file:` URI     |

For development, listen on all interfaces with debug logging:

```
auth1 -debug -addr 0.0.0.0:4000
```

The address must contain a port, and the port must be a whole number.
Otherwise the command exits with an error. If the host part is empty, as in
`:3000`, the server listens on `0.0.0.0`.

Logs go to standard output as JSON lines. Each line has `time`, `level` and
`msg` fields, plus any attributes of the message. In debug mode each line also
has a `source` field.

If `cert.pem` is in the working directory, the server uses HTTPS with
`cert.pem` and `key.pem`. Otherwise it uses plain HTTP.

## Endpoints

- `GET /` returns the bytes `Hello world!` with type `application/octet-stream`.
- `GET /greeting/{name}` looks up `name` in `sample_table` and inserts it if it
  is not there yet. It returns JSON such as `{"message": "Hello, world! (1)"}`,
  where the number is the row id. A name longer than 30 characters is rejected
  with status 422.

The schema file must declare `sample_table`, for example:

```sql
CREATE TABLE sample_table (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL
);
```

## Migrations

`auth1.migration.migrate.migrate(connection, schema_path)` does the following:

1. Loads the schema file into an in-memory database.
2. Compares that database with the live one.
3. Creates the tables that are declared but missing, along with their indexes.
4. Drops the tables that are no longer declared.
5. Rebuilds each table whose set of column names has changed. The rebuild
   happens in a transaction and copies the data in the columns that both
   versions share. Afterwards the indexes are created again.

Foreign keys are turned off while the migration runs and turned on again at
the end. Progress messages are printed to standard output.

The migration can also be used on its own:

```python
from auth1.migration.db import connect
from auth1.migration.migrate import migrate

connection = connect("app.sqlite3")
migrate(connection, "schema.sql")
```

`auth1.migration.db.Database` wraps a connection and can inspect its schema:

- `get_schema()` returns the tables and indexes.
- `get_columns(table_name)` returns the columns of a table.

`auth1.migration.utilities` provides `diff`, `intersect` and
`read_schema_file`.

## Limitations

- Despite its name, the service has no authentication or user accounts. It only
  serves the two endpoints above.
- A table is rebuilt only when its column names change. A change in the type,
  default or constraints of a column that keeps its name is not detected.
- Views and triggers are not rebuilt. Indexes on a table that already exists
  are not compared or updated.
- `PRAGMA foreign_key_check` is run after each rebuild, but any violations it
  reports are ignored.