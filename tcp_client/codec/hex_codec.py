"""
Hex codec for command payloads.

Converts operator-typed hex text ("A0 01 01 A2", "a00101a2", ...) into
raw bytes and renders bytes back as spaced uppercase hex for display.
"""
import re

from ..exceptions import InvalidHex

_WHITESPACE = re.compile(r"\s+")
_HEX_DIGITS = re.compile(r"[0-9A-Fa-f]*")


def _clean(text: str) -> str:
    return _WHITESPACE.sub("", text or "")


def normalize(text: str) -> str:
    """Strip all whitespace and upper-case."""
    return _clean(text).upper()


def format_hex(text: str) -> str:
    """
    Format hex text for display, a space every two characters.

    Presentation only: odd-length or invalid text is grouped as-is.
    """
    cleaned = _clean(text)
    return " ".join(cleaned[i:i + 2] for i in range(0, len(cleaned), 2))


def encode(text: str) -> bytes:
    """
    Convert hex text to a byte payload.

    Args:
        text: Hex digits, optionally separated by any whitespace.

    Returns:
        The decoded bytes.

    Raises:
        InvalidHex: If the cleaned text is empty, has odd length or
            contains a non-hex character.
    """
    cleaned = _clean(text)

    if not cleaned:
        raise InvalidHex("Hex code is empty", text)
    if not _HEX_DIGITS.fullmatch(cleaned):
        raise InvalidHex(f"Invalid hex characters in '{text}'", text)
    if len(cleaned) % 2:
        raise InvalidHex(
            f"Hex code must have an even number of digits, got {len(cleaned)}",
            text,
        )

    return bytes.fromhex(cleaned)


def decode(data: bytes) -> str:
    """Render bytes as two uppercase hex digits each, space separated."""
    return bytes(data).hex(" ").upper()
