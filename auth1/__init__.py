"""HTTP API service backed by SQLite with declarative schema migrations."""

__version__ = "0.1.0"