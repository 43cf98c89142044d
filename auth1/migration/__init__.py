"""Bring a SQLite database in line with a declared schema file."""