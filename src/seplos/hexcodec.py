"""Fixed-width hex-ASCII conversion for the Seplos wire format.

Every numeric field of a frame travels as uppercase hex characters,
most-significant nibble first.  Decoding accepts either case.

Example:
    >>> from seplos.hexcodec import encode_u8, decode_u16
    >>> encode_u8(0x4F)
    b'4F'
    >>> hex(decode_u16(b"e002"))
    '0xe002'
"""

from seplos.errors import MalformedHexError

HEX = b"0123456789ABCDEF"


def encode_u8(value: int) -> bytes:
    """Encode an 8-bit value as two hex characters."""
    return bytes([HEX[(value >> 4) & 0xF], HEX[value & 0xF]])


def encode_u16(value: int) -> bytes:
    """Encode a 16-bit value as four hex characters.

    Example:
        >>> encode_u16(0xFD37)
        b'FD37'
    """
    return bytes([
        HEX[(value >> 12) & 0xF],
        HEX[(value >> 8) & 0xF],
        HEX[(value >> 4) & 0xF],
        HEX[value & 0xF],
    ])


def decode_nibble(c: int) -> int:
    """Decode a single hex character (as an int byte value) to 0-15.

    Raises:
        MalformedHexError: If *c* is not in ``[0-9A-Fa-f]``.
    """
    if 0x30 <= c <= 0x39:  # '0'..'9'
        return c - 0x30
    if 0x41 <= c <= 0x46:  # 'A'..'F'
        return c - 0x41 + 10
    if 0x61 <= c <= 0x66:  # 'a'..'f'
        return c - 0x61 + 10
    raise MalformedHexError(c)


def _decode_fixed(chars: bytes, width: int) -> int:
    if len(chars) != width:
        raise ValueError(
            "expected {} hex characters, got {}".format(width, len(chars))
        )
    value = 0
    for c in chars:
        value = (value << 4) | decode_nibble(c)
    return value


def decode_u8(chars: bytes) -> int:
    """Decode two hex characters into an 8-bit value."""
    return _decode_fixed(chars, 2)


def decode_u16(chars: bytes) -> int:
    """Decode four hex characters into a 16-bit value."""
    return _decode_fixed(chars, 4)


def is_hex_digit(c: int) -> bool:
    """Return True if byte value *c* is in ``[0-9A-Fa-f]``."""
    return 0x30 <= c <= 0x39 or 0x41 <= c <= 0x46 or 0x61 <= c <= 0x66


def encode_bytes(data: bytes) -> bytes:
    """Hex-expand raw bytes, two uppercase characters per byte.

    Example:
        >>> encode_bytes(b"\\x00\\x1f")
        b'001F'
    """
    return data.hex().upper().encode("ascii")


def decode_bytes(chars: bytes) -> bytes:
    """Collapse hex-ASCII back into raw bytes.

    Raises:
        MalformedHexError: On the first non-hex character.
        ValueError: If the number of characters is odd.
    """
    for c in chars:
        if not is_hex_digit(c):
            raise MalformedHexError(c)
    if len(chars) % 2:
        raise ValueError(
            "odd number of hex characters: {}".format(len(chars))
        )
    return bytes.fromhex(chars.decode("ascii"))
