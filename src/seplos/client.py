"""Request/response transactions with a Seplos BMS.

One transaction is: flush, write the request, drain so the RS-485
line turns around, read the 18-byte minimum frame, read whatever the
header says is left, validate, map the status.  Nothing is retried;
every failure surfaces as an exception from ``seplos.errors``.

Example:
    >>> from seplos.client import Client
    >>> from seplos.status import Command
    >>> from seplos.transport import open_transport
    >>> client = Client(open_transport("/dev/ttyUSB0"))
    >>> reply = client.command(0, Command.TELEMETRY_GET, b"\\x00")
    >>> reply.status
    <Status.NORMAL: 0>
"""

import logging
import threading
from dataclasses import dataclass

from seplos.config import TIMEOUT_S
from seplos.errors import ProtocolStatusError
from seplos.protocol import MIN_FRAME_LEN, Frame, decode_frame, encode_frame, parse_header
from seplos.status import Command, Status, status_from_code

log = logging.getLogger(__name__)


@dataclass
class Reply:
    """Outcome of a completed transaction.

    A non-NORMAL ``status`` is still a valid reply; ``info`` may carry
    something meaningful either way.
    """

    status: Status
    info: bytes
    frame: Frame | None = None

    @property
    def ok(self) -> bool:
        return self.status == Status.NORMAL

    def raise_for_status(self) -> None:
        """Raise ``ProtocolStatusError`` unless the status is NORMAL."""
        if not self.ok:
            raise ProtocolStatusError(self.status, self.info)


def receive_frame(transport, timeout: float = TIMEOUT_S) -> bytes:
    """Read one complete frame from *transport*.

    Reads the 18-byte minimum frame first, parses its header to learn
    the info length, then reads the remaining bytes.  Each read gets
    its own *timeout*.

    Raises:
        BusTimeoutError: If either read does not complete in time.
        FramingError, MalformedHexError, LengthChecksumError: If the
            header is unusable.
    """
    head = transport.read_exact(MIN_FRAME_LEN, timeout)
    header = parse_header(head)
    tail = transport.read_exact(header.frame_len - MIN_FRAME_LEN, timeout)
    return head + tail


class Client:
    """Issues commands to the BMS packs on one bus.

    The bus is half-duplex and strictly request/response, so at most
    one transaction runs at a time; concurrent callers queue on an
    internal lock.

    Args:
        transport: Object with ``flush()``, ``write_all(data)``,
            ``drain()`` and ``read_exact(size, timeout)``.
        timeout: Seconds allowed for each read (default 10).

    Example:
        >>> client = Client(transport)
        >>> client.protocol_version(0)
        2.0
    """

    def __init__(self, transport, timeout: float = TIMEOUT_S):
        self._transport = transport
        self._timeout = timeout
        self._lock = threading.Lock()

    def command(self, address: int, function: Command, info: bytes = b"") -> Reply:
        """Send *function* with raw *info* to the pack at *address*.

        Argument and size errors are raised before the transport is
        touched.

        Returns:
            Reply: status and raw info bytes from the BMS.

        Raises:
            ValueError: Address outside 0-15 or unknown command.
            PayloadTooLargeError: *info* longer than 2047 bytes.
            BusTimeoutError: The BMS did not answer in time.
            BusIOError: The transport failed.
            FramingError, MalformedHexError, LengthChecksumError,
            ChecksumError: The reply is corrupt.
            UnknownStatusError: The reply status is not a known code.
        """
        function = Command(function)
        request = encode_frame(address, function, info)

        with self._lock:
            log.debug("pack %d: flushing transport", address)
            self._transport.flush()
            log.debug("tx %s", request)
            self._transport.write_all(request)
            self._transport.drain()
            raw = receive_frame(self._transport, self._timeout)
        log.debug("rx %s", raw)

        frame = decode_frame(raw)
        status = status_from_code(frame.function, frame.info)

        if frame.address != address:
            log.warning(
                "reply address mismatch: expected %d, got %d",
                address, frame.address,
            )
        if status != Status.NORMAL:
            log.warning(
                "pack %d: %s returned %s (0x%02X)",
                address, function.name, status.name, status.value,
            )

        return Reply(status=status, info=frame.info, frame=frame)

    def protocol_version(self, address: int, pack: int = 0) -> float:
        """Ask the pack at *address* for its protocol version.

        The BMS reads the address but ignores the pack number.  The
        version comes back in the frame's VER field as BCD.

        Raises:
            ProtocolStatusError: If the BMS does not answer NORMAL.
        """
        reply = self.command(address, Command.PROTOCOL_VERSION_GET, bytes([pack]))
        reply.raise_for_status()
        version = reply.frame.version
        return round(((version >> 4) & 0xF) + (version & 0xF) * 0.1, 1)


def command(transport, address: int, function: Command, info: bytes = b"",
            timeout: float = TIMEOUT_S) -> Reply:
    """Run a single transaction on *transport*.

    Convenience wrapper around ``Client(transport, timeout).command``.
    """
    return Client(transport, timeout).command(address, function, info)
