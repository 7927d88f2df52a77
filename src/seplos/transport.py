"""Serial transport for the Seplos RS-485 link.

Wraps pyserial with the four blocking operations the client needs:
``flush``, ``write_all``, ``drain`` and ``read_exact``.  Reads run
against a monotonic deadline taken when the read starts, so no alarm
signal is involved.

Example:
    >>> from seplos.transport import open_transport
    >>> with open_transport("/dev/ttyUSB0") as transport:
    ...     transport.write_all(frame_bytes)
    ...     transport.drain()
    ...     header = transport.read_exact(18, 10)
"""

import logging
import time

import serial

from seplos.config import DEFAULT_BAUDRATE
from seplos.errors import BusIOError, BusTimeoutError

log = logging.getLogger(__name__)


class SerialTransport:
    """Half-duplex RS-485 serial transport.

    Duck-typed -- tests can substitute any object with matching
    ``flush()``, ``write_all(data)``, ``drain()`` and
    ``read_exact(size, timeout)`` methods.

    Args:
        port: Serial port device path (e.g. ``"/dev/ttyUSB0"``).
        baudrate: Baud rate for the connection (default 19200).
    """

    def __init__(self, port: str, baudrate: int = DEFAULT_BAUDRATE):
        """Open the serial port at 8-N-1 with no flow control."""
        try:
            self._ser = serial.Serial(
                port,
                baudrate,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                xonxoff=False,
                rtscts=False,
                timeout=0,
            )
        except serial.SerialException as exc:
            raise BusIOError("cannot open {}: {}".format(port, exc)) from exc
        self.port = port

    def flush(self) -> None:
        """Discard all pending input and output."""
        try:
            self._ser.reset_input_buffer()
            self._ser.reset_output_buffer()
        except serial.SerialException as exc:
            raise BusIOError("flush failed: {}".format(exc)) from exc

    def write_all(self, data: bytes) -> None:
        """Hand all of *data* to the driver.

        Raises:
            BusIOError: On a device error or a short write.
        """
        try:
            written = self._ser.write(data)
        except serial.SerialException as exc:
            raise BusIOError("write failed: {}".format(exc)) from exc
        if written < len(data):
            raise BusIOError(
                "short write: {} of {} bytes".format(written, len(data))
            )

    def drain(self) -> None:
        """Block until every written byte has left the UART."""
        try:
            self._ser.flush()
        except serial.SerialException as exc:
            raise BusIOError("drain failed: {}".format(exc)) from exc

    def read_exact(self, size: int, timeout: float) -> bytes:
        """Read exactly *size* bytes within *timeout* seconds.

        The deadline is fixed when the call starts; partial chunks are
        accumulated until the buffer is full.

        Raises:
            BusTimeoutError: If the deadline passes first.
            BusIOError: On a device error.
        """
        deadline = time.monotonic() + timeout
        buf = bytearray()
        remaining = timeout
        if size and remaining > 0:
            self._ser.timeout = remaining
        while len(buf) < size and remaining > 0:
            try:
                chunk = self._ser.read(size - len(buf))
            except serial.SerialException as exc:
                raise BusIOError("read failed: {}".format(exc)) from exc
            if not chunk:
                # pyserial returns empty only once its timeout expired.
                break
            buf += chunk
            remaining = deadline - time.monotonic()
            if len(buf) < size and remaining > 0:
                # Only the time left applies to the rest of the buffer.
                self._ser.timeout = remaining

        if len(buf) < size:
            log.debug("read timeout: got %d of %d bytes", len(buf), size)
            raise BusTimeoutError(
                "timed out after {:.1f}s: got {} of {} bytes".format(
                    timeout, len(buf), size
                )
            )
        return bytes(buf)

    def close(self) -> None:
        """Close the serial port."""
        self._ser.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def open_transport(port: str, baudrate: int = DEFAULT_BAUDRATE) -> SerialTransport:
    """Open *port* and discard anything already buffered.

    Example:
        >>> transport = open_transport("/dev/ttyUSB0")
    """
    transport = SerialTransport(port, baudrate)
    transport.flush()
    log.debug("opened %s at %d baud", port, baudrate)
    return transport
