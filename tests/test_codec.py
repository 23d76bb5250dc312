"""Unit tests for codec.py."""

import pytest

from codec import (
    CodecError,
    InvalidInputError,
    MalformedInputError,
    decode,
    encode,
)


class TestEncode:
    def test_hello(self):
        assert encode("hello") == "aGVsbG8="

    def test_utf8_text(self):
        assert encode("héllo wörld") == "aMOpbGxvIHfDtnJsZA=="

    def test_keeps_surrounding_whitespace(self):
        assert encode(" a ") == "IGEg"

    @pytest.mark.parametrize("source", [None, "", "  ", "\t\n "])
    def test_missing_or_blank_is_invalid(self, source):
        with pytest.raises(InvalidInputError):
            encode(source)

    def test_unicode_spaces_are_content(self):
        assert encode("\u00a0") == "wqA="
        assert decode("wqA=") == "\u00a0"

    def test_ascii_controls_count_as_blank(self):
        with pytest.raises(InvalidInputError):
            encode("\x00\x1f \r")

    def test_messages_name_the_action(self):
        with pytest.raises(InvalidInputError, match="encode can not be null"):
            encode(None)
        with pytest.raises(InvalidInputError, match="encode can not be empty"):
            encode("   ")


class TestDecode:
    def test_hello(self):
        assert decode("aGVsbG8=") == "hello"

    def test_padding_is_optional(self):
        assert decode("aGVsbG8") == "hello"
        assert decode("aMOpbGxvIHfDtnJsZA") == "héllo wörld"

    @pytest.mark.parametrize("source", [None, "", "   "])
    def test_missing_or_blank_is_invalid(self, source):
        with pytest.raises(InvalidInputError, match="decode"):
            decode(source)

    @pytest.mark.parametrize("source", [
        "not-valid-base64!!",
        "aGVs bG8=",        # embedded space
        "aGVsbG8_",         # url-safe alphabet
        "aGVsbG8===",       # too much padding
        "aGVsbA=",          # padded but not a multiple of 4
        "aGVs=bG8",         # padding in the middle
        "aGVsb",            # one dangling character
        " aGVsbG8=",        # not trimmed before decoding
    ])
    def test_malformed(self, source):
        with pytest.raises(MalformedInputError):
            decode(source)

    def test_malformed_message_points_at_character(self):
        with pytest.raises(MalformedInputError, match="'-' at index 3"):
            decode("not-valid-base64!!")

    def test_invalid_utf8_is_replaced(self):
        assert decode("/w==") == "�"

    def test_errors_are_value_errors(self):
        assert issubclass(InvalidInputError, CodecError)
        assert issubclass(MalformedInputError, CodecError)
        assert issubclass(CodecError, ValueError)


@pytest.mark.parametrize("text", [
    "hello",
    "a",
    "ab",
    "line one\nline two\n",
    "  padded  ",
    "日本語のテキスト",
    "emoji 🎉 and tabs\t",
])
def test_decode_reverses_encode(text):
    assert decode(encode(text)) == text
