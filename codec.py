#!/usr/bin/env python3
"""
codec.py - Base64 encode/decode over UTF-8 text for Base64Clip.

Both directions refuse a missing or blank source. Decoding is strict about
the standard alphabet and padding, but accepts input with the trailing '='
padding left off.
"""

import base64
import binascii

ALPHABET = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
)
PAD = "="

# ASCII controls and space; wider Unicode whitespace counts as content
TRIM_CHARS = "".join(chr(c) for c in range(0x21))


class CodecError(ValueError):
    """Base class for errors reported back to the user as-is."""


class InvalidInputError(CodecError):
    """The source is missing or blank."""


class MalformedInputError(CodecError):
    """The source is not valid Base64."""


def _require_text(source, action: str) -> str:
    if source is None:
        raise InvalidInputError(f"The string to {action} can not be null")
    if not source.strip(TRIM_CHARS):
        raise InvalidInputError(f"The string to {action} can not be empty")
    return source


def encode(source: str) -> str:
    """Return the standard Base64 encoding of the UTF-8 bytes of source."""
    _require_text(source, "encode")
    return base64.b64encode(source.encode("utf-8")).decode("ascii")


def _check_base64(source: str) -> str:
    """Validate alphabet and padding; return the input padded to a multiple of 4."""
    body = source.rstrip(PAD)
    padding = len(source) - len(body)

    for index, char in enumerate(body):
        if char not in ALPHABET:
            kind = "padding" if char == PAD else "character"
            raise MalformedInputError(
                f"Illegal base64 {kind} {char!r} at index {index}"
            )

    if padding > 2:
        raise MalformedInputError("Input has too much base64 padding")
    if len(body) % 4 == 1:
        raise MalformedInputError(
            "Last unit does not have enough valid bits"
        )
    if padding and len(source) % 4:
        raise MalformedInputError("Input has wrong 4-byte ending unit")

    return body + PAD * (-len(body) % 4)


def decode(source: str) -> str:
    """
    Decode a Base64 string into text.
    Bytes that are not valid UTF-8 come back as U+FFFD.
    """
    _require_text(source, "decode")
    padded = _check_base64(source)
    try:
        raw = base64.b64decode(padded.encode("ascii"), validate=True)
    except binascii.Error as exc:
        raise MalformedInputError(f"Invalid base64 input: {exc}") from exc
    return raw.decode("utf-8", errors="replace")
