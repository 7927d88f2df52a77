"""Frame encoding and decoding for Seplos BMS protocol 2.0.

Frames are printable ASCII carried over RS-485::

    ~ VER ADR DEV FUN LENGTH INFO... CHKSUM \\r

VER, ADR, DEV and FUN are two hex characters each, LENGTH and CHKSUM
four.  INFO is the payload hex-expanded, two characters per byte.  The
shortest frame (empty info) is 18 bytes.

Callers deal in raw info bytes; hex expansion happens here.

Example:
    >>> from seplos.protocol import encode_frame, decode_frame
    >>> from seplos.status import Command
    >>> raw = encode_frame(0, Command.TELEMETRY_GET, b"\\x00")
    >>> raw
    b'~20004642E00200FD37\\r'
    >>> decode_frame(raw).info
    b'\\x00'
"""

from dataclasses import dataclass

from seplos.checksum import MAX_INFO_NIBBLES, frame_checksum, info_length, length_field
from seplos.errors import ChecksumError, FramingError, MalformedHexError, PayloadTooLargeError
from seplos.hexcodec import (
    decode_bytes,
    decode_u8,
    decode_u16,
    encode_bytes,
    encode_u8,
    encode_u16,
    is_hex_digit,
)

# -- Protocol constants ------------------------------------------------------

FRAME_START = 0x7E  # '~'
FRAME_END = 0x0D  # '\r'
PROTO_VERSION = 0x20  # BCD 2.0
DEVICE_BATTERY = 0x46

# START + VER + ADR + DEV + FUN + LENGTH
HEADER_LEN = 13
CHECKSUM_LEN = 4
# Frame with an empty info region.
MIN_FRAME_LEN = HEADER_LEN + CHECKSUM_LEN + 1

MAX_INFO_BYTES = MAX_INFO_NIBBLES // 2

PROTO_ADDR_MIN = 0
PROTO_ADDR_MAX = 15


def is_valid_address(addr: int) -> bool:
    """Check whether *addr* is a valid pack address (0-15)."""
    return PROTO_ADDR_MIN <= addr <= PROTO_ADDR_MAX


@dataclass
class Frame:
    """Decoded protocol frame.

    ``info`` holds raw bytes, already collapsed from hex-ASCII.
    """

    version: int
    address: int
    device: int
    function: int
    info: bytes = b""


@dataclass
class Header:
    """Fixed fields at the front of a frame, plus the info length."""

    version: int
    address: int
    device: int
    function: int
    info_nibbles: int

    @property
    def frame_len(self) -> int:
        """Total wire length of the frame this header announces."""
        return MIN_FRAME_LEN + self.info_nibbles


# -- Encoding ----------------------------------------------------------------


def encode_frame(
    address: int,
    function: int,
    info: bytes = b"",
    version: int = PROTO_VERSION,
    device: int = DEVICE_BATTERY,
) -> bytes:
    """Build a complete wire frame.

    The checksum covers every character from VER through the end of
    INFO.

    Raises:
        ValueError: If *address* is outside 0-15.
        PayloadTooLargeError: If *info* is longer than 2047 bytes.

    Example:
        >>> encode_frame(0, 0x4F, b"\\x00")
        b'~2000464FE00200FD23\\r'
    """
    if not is_valid_address(address):
        raise ValueError(
            "address must be in range {}-{}, got {}".format(
                PROTO_ADDR_MIN, PROTO_ADDR_MAX, address
            )
        )
    if len(info) > MAX_INFO_BYTES:
        raise PayloadTooLargeError(
            "info is {} bytes, maximum is {}".format(len(info), MAX_INFO_BYTES)
        )

    body = (
        encode_u8(version)
        + encode_u8(address)
        + encode_u8(device)
        + encode_u8(function)
        + encode_u16(length_field(2 * len(info)))
        + encode_bytes(info)
    )
    return (
        bytes([FRAME_START])
        + body
        + encode_u16(frame_checksum(body))
        + bytes([FRAME_END])
    )


# -- Decoding ----------------------------------------------------------------


def parse_header(data: bytes) -> Header:
    """Parse and validate the first 13 bytes of a frame.

    Only the header is examined, so this works on a partially received
    frame and tells the reader how many more bytes to expect.

    Raises:
        FramingError: Short data or missing ``~``.
        MalformedHexError: Non-hex character in a header field.
        LengthChecksumError: Length field checksum mismatch.
    """
    if len(data) < HEADER_LEN:
        raise FramingError(
            "header too short: {} bytes, need {}".format(len(data), HEADER_LEN)
        )
    if data[0] != FRAME_START:
        raise FramingError(
            "bad start byte: expected 0x{:02X}, got 0x{:02X}".format(
                FRAME_START, data[0]
            )
        )

    return Header(
        version=decode_u8(data[1:3]),
        address=decode_u8(data[3:5]),
        device=decode_u8(data[5:7]),
        function=decode_u8(data[7:9]),
        info_nibbles=info_length(decode_u16(data[9:13])),
    )


def decode_frame(data: bytes) -> Frame:
    """Parse a complete wire frame.

    Validates start byte, header hex, length checksum, total length,
    info hex, overall checksum, and terminator, in that order.

    Raises:
        FramingError: Bad start/terminator, wrong length, or an odd
            number of info characters.
        MalformedHexError: Non-hex character anywhere hex is required.
        LengthChecksumError: Length field checksum mismatch.
        ChecksumError: Overall checksum mismatch.

    Example:
        >>> frame = decode_frame(b"~20004642E00200FD37\\r")
        >>> frame.function, frame.info
        (66, b'\\x00')
    """
    header = parse_header(data)

    if len(data) != header.frame_len:
        raise FramingError(
            "length mismatch: header announces {} info characters, "
            "frame is {} bytes (expected {})".format(
                header.info_nibbles, len(data), header.frame_len
            )
        )

    info_end = HEADER_LEN + header.info_nibbles
    info_chars = data[HEADER_LEN:info_end]
    for c in info_chars:
        if not is_hex_digit(c):
            raise MalformedHexError(c)

    received = decode_u16(data[info_end : info_end + CHECKSUM_LEN])
    computed = frame_checksum(data[1:info_end])
    if received != computed:
        raise ChecksumError(
            "checksum mismatch: received 0x{:04X}, computed 0x{:04X}".format(
                received, computed
            )
        )

    if data[-1] != FRAME_END:
        raise FramingError(
            "bad terminator: expected 0x{:02X}, got 0x{:02X}".format(
                FRAME_END, data[-1]
            )
        )

    if header.info_nibbles % 2:
        raise FramingError(
            "odd info length: {} characters".format(header.info_nibbles)
        )

    return Frame(
        version=header.version,
        address=header.address,
        device=header.device,
        function=header.function,
        info=decode_bytes(info_chars),
    )
