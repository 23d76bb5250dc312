#!/usr/bin/env python3
"""
base64clip.py - Base64 encoder/decoder with clipboard output.

Type or paste text into the source pane, hit Encode or Decode, and the
result lands in the target pane and on the clipboard. Every outcome shows
up as a notification that fades in, holds for a few seconds and fades out.

Features:
  - Encode (Ctrl+E) / Decode (Ctrl+D), Swap and Clear
  - Fading info/error notifications, newest on top
  - Activity log pane and SQLite operation history (see log_browser.py)
  - Optional global hotkeys that encode/decode the clipboard in place
  - Settings from base64clip.ini, overridden by command-line flags

Usage:
    python base64clip.py [--config base64clip.ini] [--hold 5000]
                         [--no-history] [--db path/to/history.db]
                         [--hotkey-encode ctrl+alt+e] [--hotkey-decode ctrl+alt+d]
                         [--no-decode-notice]
"""

import argparse
import configparser
import sqlite3
import subprocess
import sys
from datetime import datetime

try:
    import tkinter as tk
    from tkinter import scrolledtext
except ImportError:
    print("tkinter not available - install python3-tk")
    sys.exit(1)

try:
    from clipboard import ClipboardError, PyperclipClipboard
except ImportError:
    print("Missing dependency: pip install pyperclip")
    sys.exit(1)

try:
    import keyboard
    KEYBOARD_AVAILABLE = True
except ImportError:
    KEYBOARD_AVAILABLE = False

from db_logger import DBLogger
from notifications import FadeTiming, NotificationQueue, Severity
from service import Base64Service
from settings import apply_overrides, default_ini_path, load_settings

# ── Colours ───────────────────────────────────────────────────────────────────
C = {
    "bg_dark":   "#1e2127",
    "bg_mid":    "#282a36",
    "bg_input":  "#44475a",
    "bg_log":    "#21222c",
    "fg":        "#f8f8f2",
    "fg_dim":    "#6272a4",
    "fg_accent": "#8be9fd",
    "ok":        "#50fa7b",
    "err":       "#ff5555",
    "warn":      "#ffb86c",
}

SEVERITY_COLOURS = {
    Severity.INFO:  C["ok"],
    Severity.ERROR: C["err"],
}

FRAME_MS = 40


def blend(fg: str, bg: str, alpha: float) -> str:
    """Mix two #rrggbb colours; alpha 1.0 is pure fg, 0.0 pure bg."""
    alpha = min(1.0, max(0.0, alpha))
    f = [int(fg[i:i + 2], 16) for i in (1, 3, 5)]
    b = [int(bg[i:i + 2], 16) for i in (1, 3, 5)]
    mixed = [round(bv + (fv - bv) * alpha) for fv, bv in zip(f, b)]
    return "#" + "".join(f"{v:02x}" for v in mixed)


# ─── Notification strip ───────────────────────────────────────────────────────

class NotificationStrip:
    """Draws a NotificationQueue as a stack of labels, fading by colour."""

    def __init__(self, parent, root: tk.Tk, queue: NotificationQueue):
        self.root    = root
        self.queue   = queue
        self._labels = {}
        self._ticking = False

        self.frame = tk.Frame(parent, bg=C["bg_dark"])
        self.frame.pack(fill=tk.X, padx=4, pady=2)
        queue.subscribe(self._on_change)

    def _on_change(self, _queue=None):
        live = self.queue.visible()
        for note in list(self._labels):
            if note not in live:
                self._labels.pop(note).destroy()
        for note in live:
            if note not in self._labels:
                self._labels[note] = tk.Label(
                    self.frame, text=note.message, anchor=tk.W,
                    bg=C["bg_dark"], fg=C["bg_dark"],
                    font=("Courier", 10, "bold"), padx=8, pady=2,
                )
        # newest first
        for note in live:
            self._labels[note].pack_forget()
        for note in live:
            self._labels[note].pack(fill=tk.X)
        self._paint()
        if live and not self._ticking:
            self._ticking = True
            self.root.after(FRAME_MS, self._tick)

    def _paint(self):
        now = self.queue.now()
        for note, label in self._labels.items():
            colour = blend(SEVERITY_COLOURS[note.severity], C["bg_dark"],
                           note.opacity(now))
            label.config(fg=colour)

    def _tick(self):
        if not self._labels:
            self._ticking = False
            return
        self._paint()
        self.root.after(FRAME_MS, self._tick)


# ─── Main application ─────────────────────────────────────────────────────────

class Base64ClipApp:
    MAX_LOG_LINES = 300

    def __init__(self, root: tk.Tk, settings: dict, history: DBLogger = None):
        self.root      = root
        self.settings  = settings
        self.history   = history
        self.clipboard = PyperclipClipboard()
        self.hotkeys   = {}

        notes = settings["notifications"]
        self.notifications = NotificationQueue(
            timing=FadeTiming(
                fade_in_ms=int(notes["fade_in_ms"]),
                hold_ms=int(notes["hold_ms"]),
                fade_out_ms=int(notes["fade_out_ms"]),
            ),
            scheduler=root.after,
        )
        self.service = Base64Service(
            self.clipboard, self.notifications, history=history,
            notify_on_decode=bool(notes["notify_on_decode"]),
        )

        self._build_ui()
        self._register_hotkeys()
        self._log(f"Settings: {settings['path']}", "info")
        if history is not None:
            self._log(f"History: {history.db_path} [session {history.session_id}]", "info")
        else:
            self._log("History: off", "warn")

    # ── UI ────────────────────────────────────────────────────────────────────

    def _build_ui(self):
        self.root.title("Base64Clip")
        self.root.geometry("640x620")
        self.root.minsize(480, 420)
        self.root.resizable(True, True)
        self.root.protocol("WM_DELETE_WINDOW", self._on_close)
        self.root.configure(bg=C["bg_dark"])

        # ── Header ────────────────────────────────────────────────────────────
        header = tk.Frame(self.root, bg=C["bg_dark"], padx=8, pady=6)
        header.pack(fill=tk.X)

        tk.Label(
            header, text="Base64Clip", fg=C["fg"], bg=C["bg_dark"],
            font=("Helvetica", 12, "bold")
        ).pack(side=tk.LEFT)

        self.mode_label = tk.Label(
            header, text=self._mode_text(), fg=C["fg_accent"], bg=C["bg_dark"],
            font=("Helvetica", 10)
        )
        self.mode_label.pack(side=tk.LEFT, padx=6)

        if self.history is not None:
            tk.Button(
                header, text="🕘 History", command=self._open_history,
                bg=C["bg_input"], fg=C["fg"], relief=tk.FLAT,
                activebackground="#6272a4", cursor="hand2", padx=6
            ).pack(side=tk.RIGHT, padx=3)

        # ── Source ────────────────────────────────────────────────────────────
        self.source_text = self._text_pane("Source")

        # ── Actions ───────────────────────────────────────────────────────────
        actions = tk.Frame(self.root, bg=C["bg_mid"], padx=8, pady=4)
        actions.pack(fill=tk.X)
        for text, command, side in [
            ("⇩ Encode", self._on_encode, tk.LEFT),
            ("⇧ Decode", self._on_decode, tk.LEFT),
            ("✕ Clear",  self._on_clear,  tk.RIGHT),
            ("⇅ Swap",   self._on_swap,   tk.RIGHT),
        ]:
            tk.Button(
                actions, text=text, command=command,
                bg=C["bg_input"], fg=C["fg"], relief=tk.FLAT,
                activebackground="#6272a4", cursor="hand2", padx=8
            ).pack(side=side, padx=3)

        # ── Target ────────────────────────────────────────────────────────────
        self.target_text = self._text_pane("Result")

        # ── Notifications ─────────────────────────────────────────────────────
        self.messages = NotificationStrip(self.root, self.root, self.notifications)

        # ── Log ───────────────────────────────────────────────────────────────
        log_frame = tk.Frame(self.root, bg=C["bg_log"])
        log_frame.pack(fill=tk.BOTH, expand=True, padx=4, pady=(4, 0))

        self.log = scrolledtext.ScrolledText(
            log_frame, bg=C["bg_log"], fg=C["fg"],
            font=("Courier", 9), state=tk.DISABLED,
            wrap=tk.WORD, relief=tk.FLAT, height=6,
        )
        self.log.pack(fill=tk.BOTH, expand=True)

        for tag, colour in [
            ("ts", C["fg_dim"]), ("ok", C["ok"]), ("err", C["err"]),
            ("info", C["fg_accent"]), ("warn", C["warn"]),
        ]:
            self.log.tag_config(tag, foreground=colour)

        # ── Status bar ────────────────────────────────────────────────────────
        self.statusbar = tk.Label(
            self.root, text="Ready", anchor=tk.W,
            bg=C["bg_dark"], fg=C["fg_dim"], font=("Courier", 9), padx=6
        )
        self.statusbar.pack(fill=tk.X, side=tk.BOTTOM)

        for widget in (self.root, self.source_text, self.target_text):
            widget.bind("<Control-e>", lambda _e: self._on_encode() or "break")
            widget.bind("<Control-d>", lambda _e: self._on_decode() or "break")

    def _text_pane(self, title: str) -> scrolledtext.ScrolledText:
        frame = tk.Frame(self.root, bg=C["bg_dark"], padx=4)
        frame.pack(fill=tk.BOTH, expand=True)
        tk.Label(
            frame, text=title, fg=C["fg_dim"], bg=C["bg_dark"],
            font=("Courier", 9), anchor=tk.W
        ).pack(fill=tk.X)
        text = scrolledtext.ScrolledText(
            frame, bg=C["bg_input"], fg=C["fg"], insertbackground=C["fg"],
            font=("Courier", 10), wrap=tk.WORD, relief=tk.FLAT, height=6,
        )
        text.pack(fill=tk.BOTH, expand=True)
        return text

    def _mode_text(self) -> str:
        keys = [f"{op}: {k}" for op, k in self.settings["hotkeys"].items() if k]
        return f"[hotkeys {', '.join(keys)}]" if keys else "[window only]"

    # ── Logging ───────────────────────────────────────────────────────────────

    def _log(self, message: str, tag: str = "info"):
        def _write():
            self.log.config(state=tk.NORMAL)
            ts = datetime.now().strftime("%H:%M:%S")
            self.log.insert(tk.END, f"[{ts}] ", "ts")
            self.log.insert(tk.END, f"{message}\n", tag)
            line_count = int(self.log.index("end-1c").split(".")[0])
            if line_count > self.MAX_LOG_LINES:
                self.log.delete("1.0", f"{line_count - self.MAX_LOG_LINES}.0")
            self.log.config(state=tk.DISABLED)
            self.log.see(tk.END)
        self.root.after(0, _write)

    def _set_status(self, text: str):
        self.root.after(0, lambda: self.statusbar.config(text=text))

    # ── Actions ───────────────────────────────────────────────────────────────

    def _source(self) -> str:
        return self.source_text.get("1.0", "end-1c")

    def _set_target(self, text: str):
        self.target_text.delete("1.0", tk.END)
        self.target_text.insert(tk.END, text)

    def _perform(self, operation: str, source: str, via: str = "window"):
        result = self.service.run(operation, source)
        stamp = datetime.now().strftime("%H:%M:%S")
        if result is None:
            self._log(f"✗ {operation} via {via} failed", "err")
            self._set_status(f"{operation.title()} failed @ {stamp}")
        else:
            self._log(f"✓ {operation} via {via}: {len(result)} chars to clipboard", "ok")
            self._set_status(
                f"OK [{operation}] @ {stamp}  |  "
                f"ok: {self.service.ok_count}  errors: {self.service.error_count}"
            )
        return result

    def _on_encode(self):
        result = self._perform("encode", self._source())
        if result is not None:
            self._set_target(result)

    def _on_decode(self):
        result = self._perform("decode", self._source())
        if result is not None:
            self._set_target(result)

    def _on_swap(self):
        result = self.target_text.get("1.0", "end-1c")
        self.source_text.delete("1.0", tk.END)
        self.source_text.insert(tk.END, result)
        self.target_text.delete("1.0", tk.END)

    def _on_clear(self):
        self.source_text.delete("1.0", tk.END)
        self.target_text.delete("1.0", tk.END)
        self._set_status("Cleared")

    # ── Hotkeys ───────────────────────────────────────────────────────────────

    def _register_hotkeys(self):
        wanted = {op: k for op, k in self.settings["hotkeys"].items()
                  if op in ("encode", "decode") and k}
        if not wanted:
            return
        if not KEYBOARD_AVAILABLE:
            self._log("'keyboard' not installed — hotkeys disabled. pip install keyboard", "warn")
            return

        for operation, combo in wanted.items():
            def _on_hotkey(operation=operation, combo=combo):
                # keyboard calls back on its own thread
                self.root.after(0, lambda: self._clipboard_in_place(operation, combo))
            try:
                keyboard.add_hotkey(combo, _on_hotkey)
            except (ValueError, ImportError, OSError) as exc:
                self._log(f"Hotkey {combo!r} for {operation} not registered: {exc}", "err")
                continue
            self.hotkeys[operation] = combo
            self._log(f"Hotkey registered: {combo} → {operation}", "ok")

    def _clipboard_in_place(self, operation: str, combo: str):
        try:
            clip = self.clipboard.get_text()
        except ClipboardError as exc:
            self.notifications.error(str(exc))
            self._log(f"Hotkey error: {exc}", "err")
            return
        self._perform(operation, clip, via=f"hotkey ({combo})")

    # ── History browser ───────────────────────────────────────────────────────

    def _open_history(self):
        # Qt gets its own process; it cannot share the Tk main loop
        try:
            subprocess.Popen(history_command(self.history))
        except OSError as exc:
            self.notifications.error(f"Could not open the history browser: {exc}")
            self._log(f"History browser failed: {exc}", "err")
            return
        self._log("History browser opened", "info")

    # ── Controls ──────────────────────────────────────────────────────────────

    def _on_close(self):
        if KEYBOARD_AVAILABLE:
            for combo in self.hotkeys.values():
                try:
                    keyboard.remove_hotkey(combo)
                except (KeyError, ValueError):
                    pass
        if self.history is not None:
            self.history.stop()
        self.root.destroy()


# ─── Entry point ──────────────────────────────────────────────────────────────

def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Encode and decode Base64 with clipboard output and fading notifications."
    )
    parser.add_argument("--config", "-c", default=default_ini_path(),
                        help="Settings file (default: <script dir>/base64clip.ini).")
    parser.add_argument("--hold", type=int, default=None,
                        help="Milliseconds a notification stays fully visible (default: 5000).")
    parser.add_argument("--no-history", action="store_true",
                        help="Do not record operations in the SQLite history.")
    parser.add_argument("--db", default=None,
                        help="History database path (default: <script dir>/base64clip.db).")
    parser.add_argument("--hotkey-encode", default=None,
                        help="Global hotkey that encodes the clipboard in place (e.g. ctrl+alt+e). "
                             "Requires: pip install keyboard")
    parser.add_argument("--hotkey-decode", default=None,
                        help="Global hotkey that decodes the clipboard in place (e.g. ctrl+alt+d).")
    parser.add_argument("--no-decode-notice", action="store_true",
                        help="Do not show a notification after a successful decode.")
    return parser.parse_args(argv)


def history_command(history: DBLogger) -> list:
    return [sys.executable, "-m", "log_browser",
            "--db", history.db_path, "--session", history.session_id]


def open_history(settings: dict):
    """Open the SQLite history; None when it is switched off or unusable."""
    if not settings["history"]["enabled"]:
        return None
    try:
        return DBLogger(settings["history"]["db"] or None,
                        settings_path=settings["path"])
    except (OSError, sqlite3.Error) as exc:
        print(f"History disabled, cannot open {settings['history']['db'] or 'default database'}: {exc}")
        return None


def main(argv=None):
    args = parse_args(argv)
    try:
        settings = apply_overrides(load_settings(args.config), args)
    except configparser.Error as exc:
        print(f"Cannot read {args.config}: {exc}")
        sys.exit(2)

    history = open_history(settings)

    root = tk.Tk()
    Base64ClipApp(root, settings, history=history)
    root.mainloop()


if __name__ == "__main__":
    main()
