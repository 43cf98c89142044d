"""Helpers for comparing keyed collections and loading schema files."""

from __future__ import annotations

import os
from typing import Mapping, TypeVar

T = TypeVar("T")


def diff(a: Mapping[str, T], b: Mapping[str, T]) -> tuple[dict[str, T], dict[str, T]]:
    """Return the entries only in ``a`` (to add) and only in ``b`` (to remove)."""
    add = {key: value for key, value in a.items() if key not in b}
    remove = {key: value for key, value in b.items() if key not in a}
    return add, remove


def intersect(a: Mapping[str, T], b: Mapping[str, T]) -> list[str]:
    """Return the keys present in both mappings, in the order of the smaller one."""
    if len(a) > len(b):
        a, b = b, a
    return [key for key in a if key in b]


def read_schema_file(path: str | os.PathLike[str]) -> str:
    """Return the text of a schema file."""
    with open(path, encoding="utf-8") as handle:
        return handle.read()