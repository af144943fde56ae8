"""
Hex codec module.

Translates between operator hex text and raw socket payloads.
"""
from .hex_codec import decode, encode, format_hex, normalize

__all__ = [
    "decode",
    "encode",
    "format_hex",
    "normalize",
]
