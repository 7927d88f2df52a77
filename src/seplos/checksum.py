"""Length-field and overall-frame checksums for Seplos protocol 2.0.

The length field packs a 4-bit checksum into its top nibble and the
info length (counted in hex characters) into the low 12 bits.  The
overall checksum is the two's-complement negation of the byte sum of
the frame body.

Example:
    >>> from seplos.checksum import length_field, frame_checksum
    >>> hex(length_field(2))
    '0xe002'
    >>> hex(frame_checksum(b"20004642E00200"))
    '0xfd37'
"""

from seplos.errors import LengthChecksumError

# Largest info length that fits in the 12-bit nibble count.
MAX_INFO_NIBBLES = 0xFFF


def length_checksum(nibbles: int) -> int:
    """Compute the 4-bit checksum of a 12-bit nibble count.

    Sums the three nibbles of *nibbles*, negates the low byte of the
    sum, and keeps the low nibble.

    Example:
        >>> length_checksum(2)
        14
    """
    total = ((nibbles >> 8) & 0xF) + ((nibbles >> 4) & 0xF) + (nibbles & 0xF)
    return (((~total) & 0xFF) + 1) & 0xF


def length_field(nibbles: int) -> int:
    """Build the 16-bit length field for an info region of *nibbles* chars.

    Raises:
        ValueError: If *nibbles* does not fit in 12 bits.
    """
    if not (0 <= nibbles <= MAX_INFO_NIBBLES):
        raise ValueError(
            "info length must be 0-{}, got {}".format(MAX_INFO_NIBBLES, nibbles)
        )
    return (length_checksum(nibbles) << 12) | (nibbles & 0x0FFF)


def info_length(field: int) -> int:
    """Validate a received length field and return its nibble count.

    Raises:
        LengthChecksumError: If the top nibble is not the checksum of
            the low 12 bits.
    """
    nibbles = field & 0x0FFF
    expected = length_checksum(nibbles)
    received = (field >> 12) & 0xF
    if received != expected:
        raise LengthChecksumError(
            "length checksum mismatch: received 0x{:X}, computed 0x{:X} "
            "(length field 0x{:04X})".format(received, expected, field)
        )
    return nibbles


def frame_checksum(body: bytes) -> int:
    """Compute the overall checksum over the ASCII frame body.

    *body* runs from the first version character through the last info
    character.  The result is ``-sum(body)`` truncated to 16 bits.
    """
    return (~sum(body) + 1) & 0xFFFF
