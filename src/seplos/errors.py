"""Exception hierarchy for the Seplos driver.

Every error raised by the codec, transport, or client derives from
``SeplosError``.  Codec errors are also ``ValueError`` so callers that
only care about "bad frame" can catch that.

Example:
    >>> from seplos.errors import SeplosError, BusTimeoutError
    >>> try:
    ...     client.command(0, Command.TELEMETRY_GET)
    ... except BusTimeoutError:
    ...     print("BMS asleep")
"""


class SeplosError(Exception):
    """Base class for all Seplos driver errors."""


class FramingError(SeplosError, ValueError):
    """Missing start or terminator, short header, or bad frame length."""


class MalformedHexError(SeplosError, ValueError):
    """A byte that must be hex-ASCII is not."""

    def __init__(self, char: int, message: str | None = None):
        self.char = char
        if message is None:
            message = "non-hex character {!r} (0x{:02X})".format(
                chr(char), char
            )
        super().__init__(message)


class LengthChecksumError(SeplosError, ValueError):
    """The 4-bit checksum in the length field does not match."""


class ChecksumError(SeplosError, ValueError):
    """The overall frame checksum does not match."""


class PayloadTooLargeError(SeplosError, ValueError):
    """Info payload does not fit in the 12-bit nibble count."""


class BusTimeoutError(SeplosError, TimeoutError):
    """A bounded read did not complete before its deadline."""


class BusIOError(SeplosError, OSError):
    """The underlying transport failed (short write, device error)."""


class ProtocolStatusError(SeplosError):
    """The BMS answered with a non-Normal status.

    The reply is a valid protocol frame, so ``info`` may still carry
    something useful.
    """

    def __init__(self, status, info: bytes = b""):
        self.status = status
        self.info = info
        super().__init__(
            "BMS returned status {} (0x{:02X})".format(status.name, status.value)
        )


class UnknownStatusError(SeplosError):
    """The BMS answered with a function code outside the status set."""

    def __init__(self, code: int, info: bytes = b""):
        self.code = code
        self.info = info
        super().__init__("unknown status code 0x{:02X}".format(code))
