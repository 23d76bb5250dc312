#!/usr/bin/env python3
"""
log_browser.py — Encode/decode history for Base64Clip (PySide6).

Sessions are listed on the left with their ok/error counts. The right side
shows the selected session's operations with input and output previews,
filtered by operation or narrowed to failures. It refreshes every few
seconds while Base64Clip keeps writing.

Usage:
    python log_browser.py [--db path/to/base64clip.db] [--session ID]

Base64Clip starts it with --session set to the running session.
"""

import argparse
import sys

from PySide6.QtWidgets import (
    QApplication, QCheckBox, QComboBox, QHBoxLayout, QLabel, QListWidget,
    QListWidgetItem, QPushButton, QSplitter, QTableWidget, QTableWidgetItem,
    QTextEdit, QVBoxLayout, QWidget, QHeaderView, QAbstractItemView,
)
from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QColor

from db_logger import DBLogger, default_db_path

C = {
    "bg_dark":  "#1e2127",
    "bg_mid":   "#282a36",
    "bg_input": "#44475a",
    "fg":       "#f8f8f2",
    "fg_dim":   "#6272a4",
    "ok":       "#50fa7b",
    "err":      "#ff5555",
}

OPERATIONS = ["all", "encode", "decode"]
REFRESH_MS = 3000

STYLESHEET = f"""
QWidget {{
    background-color: {C["bg_dark"]};
    color: {C["fg"]};
    font-family: "Menlo", "Courier New", monospace;
    font-size: 11px;
}}
QPushButton, QComboBox {{
    background-color: {C["bg_input"]};
    border: none;
    border-radius: 4px;
    padding: 4px 10px;
}}
QListWidget, QTableWidget, QTextEdit {{
    background-color: {C["bg_mid"]};
    border: none;
}}
QHeaderView::section {{
    background-color: {C["bg_input"]};
    color: {C["fg_dim"]};
    border: none;
}}
"""


def format_stats(stats: dict) -> str:
    """'encode 3 ok / 1 err  ·  decode 0 ok / 2 err' from get_stats() output."""
    parts = []
    for op in OPERATIONS[1:]:
        ok  = stats.get((op, "ok"), 0)
        err = stats.get((op, "err"), 0)
        parts.append(f"{op} {ok} ok / {err} err")
    return "  ·  ".join(parts)


def session_label(session: dict, stats: dict, current: str = None) -> str:
    ok  = sum(n for (_, tag), n in stats.items() if tag == "ok")
    err = sum(n for (_, tag), n in stats.items() if tag == "err")
    started = session["started_at"][:16].replace("T", " ")
    marker = " ●" if session["id"] == current else ""
    return f"{started}  {ok}✓ {err}✗{marker}"


def entry_cells(entry: dict) -> list:
    """Table cells for one history row: time, operation, input, output or error."""
    if entry["tag"] == "err":
        outcome = entry["message"]
    else:
        outcome = entry["result_preview"]
    return [
        entry["timestamp"][11:19],
        entry["operation"] or "",
        entry["source_preview"].replace("\n", "↵"),
        outcome.replace("\n", "↵"),
    ]


class HistoryWindow(QWidget):
    def __init__(self, history: DBLogger, current_session: str = None):
        super().__init__()
        self._db      = history
        self._current = current_session
        self._entries = []

        self.setWindowTitle("Base64Clip — History")
        self.setStyleSheet(STYLESHEET)
        self.resize(960, 560)

        self._build_ui()
        self._load_sessions()

        self._timer = QTimer(self)
        self._timer.timeout.connect(self._refresh)
        self._timer.start(REFRESH_MS)

    def _build_ui(self):
        splitter = QSplitter(Qt.Horizontal)

        self.sessions = QListWidget()
        self.sessions.currentItemChanged.connect(lambda *_: self._refresh())
        splitter.addWidget(self.sessions)

        right = QWidget()
        col = QVBoxLayout(right)
        col.setContentsMargins(0, 0, 0, 0)

        bar = QHBoxLayout()
        self.op_combo = QComboBox()
        self.op_combo.addItems(OPERATIONS)
        self.op_combo.currentIndexChanged.connect(self._refresh)
        bar.addWidget(self.op_combo)

        self.errors_only = QCheckBox("Errors only")
        self.errors_only.toggled.connect(self._refresh)
        bar.addWidget(self.errors_only)

        self.stats_label = QLabel("")
        bar.addWidget(self.stats_label, 1)

        clear_btn = QPushButton("🗑 Clear session")
        clear_btn.clicked.connect(self._clear_session)
        bar.addWidget(clear_btn)
        col.addLayout(bar)

        self.table = QTableWidget(0, 4)
        self.table.setHorizontalHeaderLabels(["Time", "Op", "Input", "Output / error"])
        header = self.table.horizontalHeader()
        header.setSectionResizeMode(2, QHeaderView.Stretch)
        header.setSectionResizeMode(3, QHeaderView.Stretch)
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.verticalHeader().setVisible(False)
        self.table.itemSelectionChanged.connect(self._show_detail)
        col.addWidget(self.table, 3)

        self.detail = QTextEdit()
        self.detail.setReadOnly(True)
        col.addWidget(self.detail, 1)

        splitter.addWidget(right)
        splitter.setSizes([240, 720])
        QVBoxLayout(self).addWidget(splitter)

    # ── Data ──────────────────────────────────────────────────────────────────

    def _load_sessions(self):
        self.sessions.blockSignals(True)
        self.sessions.clear()
        everything = QListWidgetItem(f"All sessions  ({format_stats(self._db.get_stats())})")
        everything.setData(Qt.UserRole, None)
        self.sessions.addItem(everything)

        select = everything
        for session in self._db.get_sessions(limit=50):
            stats = self._db.get_stats(session["id"])
            item = QListWidgetItem(session_label(session, stats, self._current))
            item.setData(Qt.UserRole, session["id"])
            item.setToolTip(f"{session['id']}  {session['settings_path'] or ''}")
            self.sessions.addItem(item)
            if session["id"] == self._current:
                select = item
        self.sessions.blockSignals(False)
        self.sessions.setCurrentItem(select)
        self._refresh()

    def _selected_session(self):
        item = self.sessions.currentItem()
        return item.data(Qt.UserRole) if item else None

    def _refresh(self):
        session_id = self._selected_session()
        op = self.op_combo.currentText()
        self._entries = self._db.get_entries(
            session_id=session_id,
            operation=None if op == "all" else op,
            tag="err" if self.errors_only.isChecked() else None,
        )
        # app notes without an operation are not history rows
        self._entries = [e for e in self._entries if e["operation"]]
        self.stats_label.setText(format_stats(self._db.get_stats(session_id)))
        self._fill_table()

    def _fill_table(self):
        self.table.setUpdatesEnabled(False)
        self.table.setRowCount(len(self._entries))
        for row, entry in enumerate(self._entries):
            colour = QColor(C["err"] if entry["tag"] == "err" else C["ok"])
            for column, text in enumerate(entry_cells(entry)):
                cell = QTableWidgetItem(text)
                cell.setForeground(colour)
                self.table.setItem(row, column, cell)
        self.table.setUpdatesEnabled(True)
        if self._entries:
            self.table.scrollToBottom()

    def _show_detail(self):
        row = self.table.currentRow()
        if not 0 <= row < len(self._entries):
            return
        entry = self._entries[row]
        self.detail.setPlainText(
            f"{entry['timestamp'].replace('T', ' ')}  {entry['operation']}  "
            f"[{entry['tag']}]  session {entry['session_id']}\n\n"
            f"Input:\n{entry['source_preview']}\n\n"
            f"Output:\n{entry['result_preview'] or entry['message']}"
        )

    def _clear_session(self):
        session_id = self._selected_session()
        if session_id:
            self._db.clear_session(session_id)
            self._load_sessions()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Browse the Base64Clip encode/decode history.")
    parser.add_argument("--db", default=default_db_path(),
                        help="History database (default: <script dir>/base64clip.db).")
    parser.add_argument("--session", default=None,
                        help="Session to select on open.")
    args = parser.parse_args(argv)

    app = QApplication.instance() or QApplication(sys.argv[:1])
    window = HistoryWindow(DBLogger(args.db, record=False), current_session=args.session)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
