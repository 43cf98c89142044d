import pytest

from auth1.migration.utilities import diff, intersect, read_schema_file


def test_diff_splits_added_and_removed():
    add, remove = diff({"a": 1, "b": 2}, {"b": 3, "c": 4})
    assert add == {"a": 1}
    assert remove == {"c": 4}


def test_diff_of_equal_key_sets_is_empty():
    add, remove = diff({"x": 1}, {"x": 99})
    assert add == {}
    assert remove == {}


def test_diff_against_empty():
    add, remove = diff({}, {"k": "v"})
    assert add == {}
    assert remove == {"k": "v"}


def test_intersect_returns_common_keys():
    assert sorted(intersect({"a": 1, "b": 2, "c": 3}, {"b": 0, "c": 0, "d": 0})) == ["b", "c"]


def test_intersect_is_symmetric_in_content():
    left = {"id": 1, "name": 2, "email": 3}
    right = {"name": 1, "id": 2}
    assert sorted(intersect(left, right)) == sorted(intersect(right, left))


def test_intersect_disjoint_is_empty():
    assert intersect({"a": 1}, {"b": 2}) == []


def test_read_schema_file_round_trip(tmp_path):
    path = tmp_path / "schema.sql"
    text = "CREATE TABLE sample_table (id INTEGER PRIMARY KEY);\n"
    path.write_text(text, encoding="utf-8")
    assert read_schema_file(path) == text


def test_read_schema_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_schema_file(tmp_path / "missing.sql")