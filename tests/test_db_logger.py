"""Tests for the SQLite operation history."""

import sqlite3

import pytest

from db_logger import PREVIEW_CHARS, DBLogger


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "history.db")


@pytest.fixture
def logger(db_path):
    db = DBLogger(db_path, settings_path="base64clip.ini")
    yield db
    db.stop()


def test_entries_round_trip(logger):
    logger.log("'hello' -> 'aGVsbG8='", tag="ok", operation="encode")
    logger.log("InvalidInputError: empty", tag="err", operation="decode")
    logger.flush()

    entries = logger.get_entries(session_id=logger.session_id)
    assert [e["tag"] for e in entries] == ["ok", "err"]
    assert entries[0]["operation"] == "encode"
    assert entries[1]["message"] == "InvalidInputError: empty"


def test_tag_filter_and_limit(logger):
    for i in range(5):
        logger.log(f"entry {i}", tag="ok" if i % 2 == 0 else "err")
    logger.flush()

    assert len(logger.get_entries(tag="err")) == 2
    latest = logger.get_entries(limit=2)
    assert [e["message"] for e in latest] == ["entry 3", "entry 4"]


def test_sessions_are_separate(db_path, logger):
    logger.log("first session")
    logger.flush()

    second = DBLogger(db_path)
    try:
        second.log("second session")
        second.flush()
        assert {s["id"] for s in second.get_sessions()} == {logger.session_id, second.session_id}
        assert [e["message"] for e in second.get_entries(session_id=second.session_id)] == [
            "second session"
        ]
        assert len(second.get_entries()) == 2
    finally:
        second.stop()


def test_clear_session(logger):
    logger.log("gone")
    logger.log("also gone")
    logger.flush()
    assert logger.clear_session(logger.session_id) == 2
    assert logger.get_entries(session_id=logger.session_id) == []


def test_stop_drains_queue(db_path):
    db = DBLogger(db_path)
    for i in range(20):
        db.log(f"line {i}")
    db.stop()
    assert len(db.get_entries(session_id=db.session_id)) == 20


def test_browse_only_does_not_start_a_session(db_path, logger):
    logger.log("recorded")
    logger.flush()

    reader = DBLogger(db_path, record=False)
    assert reader.session_id is None
    assert len(reader.get_sessions()) == 1
    assert [e["message"] for e in reader.get_entries()] == ["recorded"]
    with pytest.raises(RuntimeError):
        reader.log("nope")
    reader.stop()


def test_operation_filter_and_previews(logger):
    logger.log("ok", tag="ok", operation="encode", source="hello", result="aGVsbG8=")
    logger.log("ok", tag="ok", operation="decode", source="aGVsbG8=", result="hello")
    logger.flush()

    [entry] = logger.get_entries(operation="decode")
    assert entry["source_preview"] == "aGVsbG8="
    assert entry["result_preview"] == "hello"


def test_long_previews_are_cut(logger):
    logger.log("ok", tag="ok", operation="encode", source="x" * (PREVIEW_CHARS + 50))
    logger.flush()
    [entry] = logger.get_entries()
    assert entry["source_preview"] == "x" * PREVIEW_CHARS + "…"
    assert entry["result_preview"] == ""


def test_stats_per_operation_and_tag(db_path, logger):
    for op, tag in [("encode", "ok"), ("encode", "ok"), ("encode", "err"),
                    ("decode", "err"), ("", "info")]:
        logger.log("x", tag=tag, operation=op)
    logger.flush()

    other = DBLogger(db_path)
    try:
        other.log("x", tag="ok", operation="decode")
        other.flush()
        assert logger.get_stats(logger.session_id) == {
            ("encode", "ok"): 2, ("encode", "err"): 1, ("decode", "err"): 1,
        }
        assert other.get_stats()[("decode", "ok")] == 1
    finally:
        other.stop()


def test_older_database_gains_preview_columns(db_path):
    conn = sqlite3.connect(db_path)
    conn.executescript("""
        CREATE TABLE log_entries (
            id INTEGER PRIMARY KEY AUTOINCREMENT, session_id TEXT NOT NULL,
            timestamp TEXT NOT NULL, tag TEXT NOT NULL, message TEXT NOT NULL,
            operation TEXT
        );
        INSERT INTO log_entries(session_id, timestamp, tag, message, operation)
            VALUES ('old', '2999-01-01T00:00:00', 'ok', 'before upgrade', 'encode');
    """)
    conn.commit()
    conn.close()

    db = DBLogger(db_path, record=False)
    [entry] = db.get_entries(session_id="old")
    assert entry["message"] == "before upgrade"
    assert entry["source_preview"] == ""
