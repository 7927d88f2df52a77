"""Virtual Seplos BMS for bench testing without hardware.

Listens on a serial port (typically one end of a socat PTY pair) and
answers request frames the way a pack does: the protocol version and
vendor queries succeed, every other command is refused with
CID2_ERROR, and corrupt frames get the matching error status.

Usage:
    python -m seplos.simulator <port> <addr>

Example:
    socat -d -d pty,raw,echo=0,link=/tmp/bms pty,raw,echo=0,link=/tmp/host
    python -m seplos.simulator /tmp/bms 0
    seplos-bms host.toml
"""

import argparse
import logging

from seplos.errors import BusTimeoutError, ChecksumError, LengthChecksumError, MalformedHexError
from seplos.hexcodec import decode_u8
from seplos.protocol import (
    DEVICE_BATTERY,
    FRAME_START,
    HEADER_LEN,
    MIN_FRAME_LEN,
    PROTO_VERSION,
    decode_frame,
    encode_frame,
    parse_header,
)
from seplos.status import Command, Status
from seplos.transport import open_transport

log = logging.getLogger(__name__)

# Device name (20 chars), software version (2 bytes), manufacturer (20 chars).
VENDOR_INFO = (
    b"SP15S020-L16S-200A  "
    + bytes([0x16, 0x00])
    + b"SEPLOS              "
)


class VirtualBms:
    """Answers request frames addressed to one pack.

    Args:
        address: Pack address to respond as (0-15).
        version: Protocol version byte to report and to require.
        vendor: Raw info returned for VENDOR_GET.
    """

    def __init__(self, address: int, version: int = PROTO_VERSION,
                 vendor: bytes = VENDOR_INFO):
        self.address = address
        self.version = version
        self.vendor = vendor

    def handle(self, raw: bytes) -> bytes | None:
        """Return the reply frame for request *raw*, or None to stay silent.

        Frames for other addresses, and frames too broken to tell who
        they are for, get no reply.
        """
        if len(raw) < HEADER_LEN or raw[0] != FRAME_START:
            return None
        try:
            address = decode_u8(raw[3:5])
        except MalformedHexError:
            return None
        if address != self.address:
            return None

        try:
            frame = decode_frame(raw)
        except LengthChecksumError:
            return self._reply(Status.LENGTH_CHECKSUM_ERROR)
        except ChecksumError:
            return self._reply(Status.CHECKSUM_ERROR)
        except ValueError as exc:
            log.debug("malformed request: %s", exc)
            return self._reply(Status.COMMAND_FORMAT_ERROR)

        if frame.version != self.version:
            return self._reply(Status.VERSION_ERROR)
        if frame.device != DEVICE_BATTERY:
            return self._reply(Status.CID1_ERROR)

        if frame.function == Command.PROTOCOL_VERSION_GET:
            return self._reply(Status.NORMAL)
        if frame.function == Command.VENDOR_GET:
            return self._reply(Status.NORMAL, self.vendor)
        return self._reply(Status.CID2_ERROR)

    def _reply(self, status: Status, info: bytes = b"") -> bytes:
        return encode_frame(self.address, status, info, version=self.version)


def read_request(transport, timeout: float) -> bytes:
    """Read one request frame from *transport*.

    A header whose length field fails its checksum gives no usable
    frame length, so only the 18 bytes already read are returned and
    ``VirtualBms.handle`` answers from the header alone.

    Raises:
        BusTimeoutError: If either read does not complete in time.
        FramingError, MalformedHexError: If the header is unusable.
    """
    head = transport.read_exact(MIN_FRAME_LEN, timeout)
    try:
        header = parse_header(head)
    except LengthChecksumError:
        return head
    return head + transport.read_exact(header.frame_len - MIN_FRAME_LEN, timeout)


def run(port: str, address: int) -> None:
    """Serve requests on *port* as pack *address* until interrupted."""
    bms = VirtualBms(address)
    transport = open_transport(port)
    log.info("simulator: addr=%d listening on %s", address, port)

    try:
        while True:
            try:
                raw = read_request(transport, 1.0)
            except BusTimeoutError:
                continue
            except ValueError as exc:
                log.debug("dropping unreadable input: %s", exc)
                transport.flush()
                continue

            reply = bms.handle(raw)
            if reply is not None:
                # Drops whatever is left of a frame whose length was unusable.
                transport.flush()
                transport.write_all(reply)
                transport.drain()
    except KeyboardInterrupt:
        pass
    finally:
        transport.close()


def main() -> None:
    """CLI entry point for the simulator."""
    parser = argparse.ArgumentParser(description="virtual Seplos BMS")
    parser.add_argument("port", help="serial port to listen on")
    parser.add_argument("addr", type=int, help="pack address (0-15)")
    args = parser.parse_args()

    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        level=logging.INFO,
    )
    run(args.port, args.addr)


if __name__ == "__main__":
    main()
