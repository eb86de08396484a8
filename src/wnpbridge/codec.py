"""Wire codec for packed pixel colors.

The strip exchanges each pixel as an unsigned 32-bit word laid out
``[alpha:8][red:8][green:8][blue:8]`` (most significant byte first).
Alpha is written fully opaque and ignored on read.

Example:
    >>> decode(0xFF00FF00)
    Color(r=0, g=255, b=0)
    >>> hex(encode(Color(r=255, g=0, b=0)))
    '0xffff0000'
"""

from collections.abc import Iterable

from wnpbridge.models import Color

OPAQUE = 0xFF000000


def decode(word: int) -> Color:
    """Unpack a 32-bit word into a Color. The alpha byte is discarded."""
    return Color(r=(word >> 16) & 0xFF, g=(word >> 8) & 0xFF, b=word & 0xFF)


def encode(color: Color) -> int:
    """Pack a Color into a 32-bit word.

    Channels come from ``Color.rgba16()`` (16-bit scaled) and are shifted
    down to 8 bits, alpha included.
    """
    red, green, blue, alpha = color.rgba16()
    return (alpha >> 8) << 24 | (red >> 8) << 16 | (green >> 8) << 8 | blue >> 8


def decode_many(words: Iterable[int]) -> list[Color]:
    """Decode a sequence of words, preserving order and length."""
    return [decode(w) for w in words]


def encode_many(colors: Iterable[Color]) -> list[int]:
    """Encode a sequence of colors, preserving order and length."""
    return [encode(c) for c in colors]
