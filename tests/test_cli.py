import json
from unittest import mock

import pytest

from auth1.cli import build_logger, main, parse_args

SCHEMA = "CREATE TABLE sample_table (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT NOT NULL);\n"


def _json_lines(text):
    return [json.loads(line) for line in text.splitlines() if line.startswith("{")]


def test_parse_args_defaults():
    args = parse_args([])
    assert args.name == "Auth 1"
    assert args.addr == "127.0.0.1:3000"
    assert args.debug is False
    assert args.dsn == "file:auth1.sqlite3"


def test_parse_args_single_dash_flags():
    args = parse_args(["-debug", "-addr", "0.0.0.0:4000"])
    assert args.debug is True
    assert args.addr == "0.0.0.0:4000"


def test_parse_args_double_dash_flags():
    args = parse_args(["--name", "svc", "--dsn", "file:other.db"])
    assert args.name == "svc"
    assert args.dsn == "file:other.db"


def test_build_logger_info_json(capsys):
    logger = build_logger(False)
    logger.info("hello", extra={"attrs": {"key": "value"}})
    logger.debug("hidden")
    entries = _json_lines(capsys.readouterr().out)
    assert len(entries) == 1
    entry = entries[0]
    assert entry["msg"] == "hello"
    assert entry["level"] == "INFO"
    assert entry["key"] == "value"
    assert "source" not in entry


def test_build_logger_debug_adds_source(capsys):
    logger = build_logger(True)
    logger.debug("details")
    entries = _json_lines(capsys.readouterr().out)
    assert len(entries) == 1
    assert entries[0]["level"] == "DEBUG"
    assert entries[0]["source"]["file"].endswith("test_cli.py")


def test_build_logger_does_not_duplicate_handlers(capsys):
    build_logger(False)
    logger = build_logger(False)
    logger.info("once")
    entries = _json_lines(capsys.readouterr().out)
    assert [entry["msg"] for entry in entries] == ["once"]


def test_main_rejects_address_without_port():
    with pytest.raises(SystemExit):
        main(["-addr", "localhost"])


def test_main_rejects_non_numeric_port():
    with pytest.raises(SystemExit):
        main(["-addr", "localhost:http"])


def test_main_serves_http(tmp_path, monkeypatch, capsys):
    (tmp_path / "schema.sql").write_text(SCHEMA, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    with mock.patch("uvicorn.run") as run:
        main(["-dsn", "file:cli_http?mode=memory", "-addr", "127.0.0.1:3000"])
    assert run.call_count == 1
    kwargs = run.call_args.kwargs
    assert kwargs["host"] == "127.0.0.1"
    assert kwargs["port"] == 3000
    assert "ssl_certfile" not in kwargs
    entries = _json_lines(capsys.readouterr().out)
    assert entries[-1]["addr"] == "http://127.0.0.1:3000"


def test_main_serves_https_when_cert_present(tmp_path, monkeypatch, capsys):
    (tmp_path / "schema.sql").write_text(SCHEMA, encoding="utf-8")
    (tmp_path / "cert.pem").write_text("", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    with mock.patch("uvicorn.run") as run:
        main(["-dsn", "file:cli_https?mode=memory", "-addr", "0.0.0.0:4000"])
    kwargs = run.call_args.kwargs
    assert kwargs["ssl_certfile"] == "./cert.pem"
    assert kwargs["ssl_keyfile"] == "./key.pem"
    assert kwargs["port"] == 4000
    entries = _json_lines(capsys.readouterr().out)
    assert entries[-1]["addr"] == "https://0.0.0.0:4000"


def test_main_empty_host_listens_everywhere(tmp_path, monkeypatch, capsys):
    (tmp_path / "schema.sql").write_text(SCHEMA, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    with mock.patch("uvicorn.run") as run:
        main(["-dsn", "file:cli_any?mode=memory", "-addr", ":6666"])
    assert run.call_count == 1
    kwargs = run.call_args.kwargs
    assert kwargs["host"] == "0.0.0.0"
    assert kwargs["port"] == 6666
    assert "ssl_certfile" not in kwargs
    entries = _json_lines(capsys.readouterr().out)
    assert entries[-1]["addr"] == "http://:6666"