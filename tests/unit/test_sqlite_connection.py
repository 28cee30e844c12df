from __future__ import annotations

import logging
import sqlite3
from contextlib import closing
from pathlib import Path

import pytest

from dbconnect.infrastructure.connectors import new_sqlite_connection


def test_creates_missing_file_and_opens_shared_cache_uri(
    tmp_path: Path, monkeypatch, caplog
) -> None:
    caplog.set_level(logging.INFO)
    monkeypatch.chdir(tmp_path)
    assert not (tmp_path / "test.db").exists()

    conn = new_sqlite_connection("", "test.db")
    try:
        assert (tmp_path / "test.db").exists()
        assert conn.execute("PRAGMA schema_version").fetchone() == (0,)
        conn.execute("CREATE TABLE probe (id INTEGER PRIMARY KEY)")
        conn.commit()
    finally:
        conn.close()

    messages = [record.getMessage() for record in caplog.records]
    assert any("creating new database at test.db" in message for message in messages)
    assert "Opening SQLite database file:test.db?cache=shared&mode=rwc" in messages
    assert "Successfully connected to SQLite database" in messages

    with closing(sqlite3.connect(tmp_path / "test.db")) as check:
        assert check.execute("PRAGMA integrity_check").fetchone() == ("ok",)
        assert check.execute("SELECT name FROM sqlite_master").fetchall() == [("probe",)]


def test_reuses_existing_database_file(tmp_path: Path, caplog) -> None:
    caplog.set_level(logging.INFO)
    db_path = tmp_path / "existing.db"
    with closing(sqlite3.connect(db_path)) as seed:
        seed.execute("CREATE TABLE items (name TEXT)")
        seed.execute("INSERT INTO items VALUES ('kept')")
        seed.commit()
    inode_before = db_path.stat().st_ino

    conn = new_sqlite_connection("", db_path)
    try:
        assert conn.execute("SELECT name FROM items").fetchall() == [("kept",)]
    finally:
        conn.close()

    assert db_path.stat().st_ino == inode_before
    assert not any("does not exist" in record.getMessage() for record in caplog.records)


def test_dsn_takes_precedence_over_file_path(tmp_path: Path) -> None:
    dsn_target = tmp_path / "from_dsn.db"
    ignored = tmp_path / "ignored.db"

    conn = new_sqlite_connection(f"file:{dsn_target}?mode=rwc", ignored)
    conn.close()

    assert dsn_target.exists()
    assert not ignored.exists()


def test_plain_dsn_is_used_verbatim() -> None:
    conn = new_sqlite_connection(":memory:")
    try:
        assert conn.execute("SELECT 1").fetchone() == (1,)
    finally:
        conn.close()


def test_both_inputs_empty_is_fatal(critical_records) -> None:
    with pytest.raises(SystemExit) as exc_info:
        new_sqlite_connection("", "")

    assert exc_info.value.code == 1
    record = critical_records()[0]
    assert record.stage == "config"
    assert "Both connection string and file path are empty" in record.getMessage()


def test_file_creation_failure_is_fatal(tmp_path: Path, critical_records) -> None:
    target = tmp_path / "missing-dir" / "app.db"

    with pytest.raises(SystemExit):
        new_sqlite_connection("", target)

    assert not target.exists()
    assert critical_records()[0].stage == "create"


def test_file_that_is_not_a_database_fails_ping(tmp_path: Path, critical_records) -> None:
    target = tmp_path / "notes.txt"
    target.write_bytes(b"this is not an sqlite database\n" * 64)

    with pytest.raises(SystemExit):
        new_sqlite_connection("", target)

    assert critical_records()[0].stage == "ping"


def test_unopenable_dsn_is_fatal(tmp_path: Path, critical_records) -> None:
    missing = tmp_path / "absent.db"

    with pytest.raises(SystemExit):
        new_sqlite_connection(f"file:{missing}?mode=ro")

    assert not missing.exists()
    assert critical_records()[0].stage == "open"


def test_rejects_non_string_input(critical_records) -> None:
    with pytest.raises(SystemExit):
        new_sqlite_connection(42)  # type: ignore[arg-type]

    assert critical_records()[0].stage == "config"
