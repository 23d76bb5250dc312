#!/usr/bin/env python3
"""
db_logger.py — SQLite operation history for Base64Clip.

Creates base64clip.db next to base64clip.py unless another path is given.
Thread-safe via a dedicated writer thread and queue.

Schema:
    log_entries(id, session_id, timestamp, tag, message, operation,
                source_preview, result_preview)
    sessions(id, started_at, settings_path)

Auto-purges entries older than RETAIN_DAYS (default 30).
"""

import sqlite3
import threading
import queue
import uuid
from datetime import datetime, timedelta
from pathlib import Path

RETAIN_DAYS  = 30
DB_NAME      = "base64clip.db"
PREVIEW_CHARS = 200

# Columns added after the first release; older files get them on open.
_LATE_COLUMNS = {
    "source_preview": "TEXT NOT NULL DEFAULT ''",
    "result_preview": "TEXT NOT NULL DEFAULT ''",
}

_ENTRY_COLUMNS = (
    "id, session_id, timestamp, tag, message, operation, "
    "source_preview, result_preview"
)


def default_db_path() -> str:
    return str(Path(__file__).resolve().parent / DB_NAME)


def preview(text: str, width: int = PREVIEW_CHARS) -> str:
    text = text or ""
    return text if len(text) <= width else text[:width] + "…"


class DBLogger:
    def __init__(self, db_path: str = None, settings_path: str = "",
                 record: bool = True):
        self._db_path      = str(db_path or default_db_path())
        self._queue        = queue.Queue()
        self._session      = None
        self._writer       = None
        self.write_errors  = 0
        self.last_error    = None

        self._init_db()
        if not record:
            # browse-only: no session row, no writer
            return
        self._session = str(uuid.uuid4())[:8]
        self._start_session(settings_path)
        self._purge_old()

        self._writer = threading.Thread(target=self._writer_loop, daemon=True)
        self._writer.start()

    # ── Setup ─────────────────────────────────────────────────────────────────

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, timeout=10)
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _init_db(self):
        Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS sessions (
                    id            TEXT PRIMARY KEY,
                    started_at    TEXT NOT NULL,
                    settings_path TEXT
                );
                CREATE TABLE IF NOT EXISTS log_entries (
                    id          INTEGER PRIMARY KEY AUTOINCREMENT,
                    session_id  TEXT NOT NULL,
                    timestamp   TEXT NOT NULL,
                    tag         TEXT NOT NULL,
                    message     TEXT NOT NULL,
                    operation   TEXT
                );
                CREATE INDEX IF NOT EXISTS idx_log_session
                    ON log_entries(session_id);
                CREATE INDEX IF NOT EXISTS idx_log_op_tag
                    ON log_entries(operation, tag);
            """)
            existing = {row[1] for row in conn.execute("PRAGMA table_info(log_entries)")}
            for column, decl in _LATE_COLUMNS.items():
                if column not in existing:
                    conn.execute(f"ALTER TABLE log_entries ADD COLUMN {column} {decl}")

    def _start_session(self, settings_path: str):
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO sessions(id, started_at, settings_path) VALUES(?,?,?)",
                (self._session, datetime.now().isoformat(), settings_path)
            )

    def _purge_old(self):
        cutoff = (datetime.now() - timedelta(days=RETAIN_DAYS)).isoformat()
        with self._connect() as conn:
            conn.execute("DELETE FROM log_entries WHERE timestamp < ?", (cutoff,))
            conn.execute(
                "DELETE FROM sessions WHERE started_at < ? "
                "AND id NOT IN (SELECT DISTINCT session_id FROM log_entries)",
                (cutoff,)
            )

    # ── Writer thread ─────────────────────────────────────────────────────────

    def _writer_loop(self):
        conn = self._connect()
        try:
            while True:
                item = self._queue.get()
                try:
                    if item is None:
                        break
                    conn.execute(
                        "INSERT INTO log_entries(session_id, timestamp, tag, message,"
                        " operation, source_preview, result_preview)"
                        " VALUES(?,?,?,?,?,?,?)",
                        item
                    )
                    conn.commit()
                except sqlite3.Error as exc:
                    # counted, not raised
                    self.write_errors += 1
                    self.last_error = exc
                finally:
                    self._queue.task_done()
        finally:
            conn.close()

    # ── Public API ────────────────────────────────────────────────────────────

    def log(self, message: str, tag: str = "info", operation: str = "",
            source: str = "", result: str = ""):
        """Queue one entry; source and result are stored as previews."""
        if self._writer is None:
            raise RuntimeError("DBLogger was opened with record=False")
        self._queue.put((
            self._session,
            datetime.now().isoformat(),
            tag,
            message,
            operation,
            preview(source),
            preview(result),
        ))

    def flush(self):
        """Block until every queued entry has been written."""
        self._queue.join()

    def get_entries(self, session_id: str = None, tag: str = None,
                    operation: str = None, limit: int = 500) -> list:
        """
        Fetch log entries, oldest first. Returns list of dicts:
            {id, session_id, timestamp, tag, message, operation,
             source_preview, result_preview}
        """
        filters = {"session_id": session_id, "tag": tag, "operation": operation}
        clauses = [f"{col} = ?" for col, val in filters.items() if val]
        params  = [val for val in filters.values() if val]
        where = ("WHERE " + " AND ".join(clauses)) if clauses else ""
        params.append(limit)
        with self._connect() as conn:
            conn.row_factory = sqlite3.Row
            rows = conn.execute(
                f"SELECT {_ENTRY_COLUMNS} FROM log_entries {where} "
                f"ORDER BY id DESC LIMIT ?",
                params
            ).fetchall()
        return [dict(r) for r in reversed(rows)]

    def get_stats(self, session_id: str = None) -> dict:
        """
        Count entries per (operation, tag), e.g.
            {("encode", "ok"): 3, ("decode", "err"): 1}
        Entries without an operation are left out.
        """
        where, params = "WHERE operation != ''", []
        if session_id:
            where += " AND session_id = ?"
            params.append(session_id)
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT operation, tag, COUNT(*) FROM log_entries {where} "
                f"GROUP BY operation, tag",
                params
            ).fetchall()
        return {(op, tag): count for op, tag, count in rows}

    def get_sessions(self, limit: int = 50) -> list:
        with self._connect() as conn:
            conn.row_factory = sqlite3.Row
            rows = conn.execute(
                "SELECT id, started_at, settings_path FROM sessions "
                "ORDER BY started_at DESC LIMIT ?",
                (limit,)
            ).fetchall()
        return [dict(r) for r in rows]

    def clear_session(self, session_id: str) -> int:
        with self._connect() as conn:
            cur = conn.execute(
                "DELETE FROM log_entries WHERE session_id = ?", (session_id,)
            )
            return cur.rowcount

    @property
    def session_id(self) -> str:
        return self._session

    @property
    def db_path(self) -> str:
        return self._db_path

    def stop(self):
        if self._writer is not None and self._writer.is_alive():
            self._queue.put(None)
            self._writer.join(timeout=3)
