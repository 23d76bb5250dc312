#!/usr/bin/env python3
"""
clipboard.py - Clipboard writers for Base64Clip.

Anything with set_text(text) can receive results. PyperclipClipboard talks
to the system clipboard; MemoryClipboard keeps everything in-process.
"""

from typing import Protocol

import pyperclip


class ClipboardError(RuntimeError):
    """The system clipboard could not be read or written."""


class ClipboardWriter(Protocol):
    def set_text(self, text: str) -> None: ...


class PyperclipClipboard:
    """Plain-text access to the system clipboard through pyperclip."""

    def set_text(self, text: str) -> None:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as exc:
            raise ClipboardError(f"Could not copy to the clipboard: {exc}") from exc

    def get_text(self) -> str:
        try:
            return pyperclip.paste()
        except pyperclip.PyperclipException as exc:
            raise ClipboardError(f"Could not read the clipboard: {exc}") from exc


class MemoryClipboard:
    def __init__(self, text: str = ""):
        self.text    = text
        self.history: list = []

    def set_text(self, text: str) -> None:
        self.text = text
        self.history.append(text)

    def get_text(self) -> str:
        return self.text
