#!/usr/bin/env python3
"""
service.py - Encode/decode operations with their side effects.

Each successful operation copies its result to the clipboard, pushes an
INFO notification and records an 'ok' history entry. run() is the UI seam:
it turns codec and clipboard failures into ERROR notifications.
"""

import codec
from clipboard import ClipboardError

ENCODED_NOTICE = "Encoded value copied to the clipboard"
DECODED_NOTICE = "Decoded value copied to the clipboard"


def _preview(text: str, width: int = 60) -> str:
    short = text[:width].replace("\n", "↵")
    return f"{short!r}{'…' if len(text) > width else ''}"


class Base64Service:
    def __init__(self, clipboard, notifications, history=None,
                 notify_on_decode: bool = True):
        self.clipboard        = clipboard
        self.notifications    = notifications
        self.history          = history
        self.notify_on_decode = notify_on_decode
        self.ok_count         = 0
        self.error_count      = 0

    def encode(self, source: str) -> str:
        result = codec.encode(source)
        self.clipboard.set_text(result)
        self.notifications.info(ENCODED_NOTICE)
        self._succeeded("encode", source, result)
        return result

    def decode(self, source: str) -> str:
        result = codec.decode(source)
        self.clipboard.set_text(result)
        if self.notify_on_decode:
            self.notifications.info(DECODED_NOTICE)
        self._succeeded("decode", source, result)
        return result

    def run(self, operation: str, source: str):
        """
        Call encode or decode by name. Returns the result, or None after
        reporting the failure as an error notification.
        """
        action = {"encode": self.encode, "decode": self.decode}.get(operation)
        if action is None:
            raise ValueError(f"Unknown operation: {operation!r}")
        try:
            return action(source)
        except (codec.CodecError, ClipboardError) as exc:
            self.error_count += 1
            self.notifications.error(str(exc))
            self._record(f"{type(exc).__name__}: {exc}", "err", operation,
                         source=source)
            return None

    def _succeeded(self, operation: str, source: str, result: str):
        self.ok_count += 1
        self._record(
            f"{_preview(source)} -> {_preview(result)} ({len(result)} chars)",
            "ok", operation, source=source, result=result,
        )

    def _record(self, message: str, tag: str, operation: str,
                source: str = "", result: str = ""):
        if self.history is not None:
            self.history.log(message, tag=tag, operation=operation,
                             source=source or "", result=result)
