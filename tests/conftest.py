"""Shared pytest fixtures for seplos tests."""

from seplos.errors import BusTimeoutError
from seplos.protocol import encode_frame
from seplos.status import Status


def make_reply(address: int, status: int = Status.NORMAL, info: bytes = b"",
               version: int = 0x20) -> bytes:
    """Build a valid reply frame for testing."""
    return encode_frame(address, status, info, version=version)


class FakeTransport:
    """Test double for SerialTransport: canned input, records calls.

    *incoming* is the byte stream the "BMS" sends back.  Reads beyond
    its end raise BusTimeoutError after handing over nothing.
    """

    def __init__(self, incoming: bytes = b""):
        """Initialize with the bytes the peer will send."""
        self._incoming = bytearray(incoming)
        self.calls = []
        self.written = b""

    def flush(self) -> None:
        """Record the flush."""
        self.calls.append("flush")

    def write_all(self, data: bytes) -> None:
        """Record *data* for later inspection."""
        self.calls.append("write_all")
        self.written += data

    def drain(self) -> None:
        """Record the drain."""
        self.calls.append("drain")

    def read_exact(self, size: int, timeout: float) -> bytes:
        """Hand out *size* canned bytes, or time out if not enough remain."""
        self.calls.append(("read_exact", size))
        if len(self._incoming) < size:
            self._incoming.clear()
            raise BusTimeoutError("fake timeout")
        data = bytes(self._incoming[:size])
        del self._incoming[:size]
        return data
