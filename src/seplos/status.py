"""Command identifiers and response status codes.

Requests carry a ``Command`` in the function field; replies carry a
``Status`` there instead.

Example:
    >>> from seplos.status import Command, Status, status_from_code
    >>> Command.TELEMETRY_GET
    <Command.TELEMETRY_GET: 66>
    >>> status_from_code(0xE2)
    <Status.EXECUTION_FAILURE: 226>
"""

from enum import IntEnum

from seplos.errors import UnknownStatusError


class Command(IntEnum):
    """Request function codes."""

    TELEMETRY_GET = 0x42
    TELECOMMAND_GET = 0x44
    TELECONTROL_CMD = 0x45
    TELEREGULATION_GET = 0x47
    TELEREGULATION_SET = 0x49
    HISTORY_GET = 0x4B
    TIME_GET = 0x4D
    TIME_SET = 0x4E
    PROTOCOL_VERSION_GET = 0x4F
    VENDOR_GET = 0x51
    PRODUCTION_CALIBRATION = 0xA0
    PRODUCTION_SETTING = 0xA1
    REGULAR_RECORDING = 0xA2


class Status(IntEnum):
    """Response function codes."""

    NORMAL = 0x00
    VERSION_ERROR = 0x01
    CHECKSUM_ERROR = 0x02
    LENGTH_CHECKSUM_ERROR = 0x03
    CID2_ERROR = 0x04
    COMMAND_FORMAT_ERROR = 0x05
    DATA_INVALID = 0x06
    NO_HISTORY = 0x07
    CID1_ERROR = 0xE1
    EXECUTION_FAILURE = 0xE2
    DEVICE_FAULT = 0xE3
    PERMISSION_ERROR = 0xE4


def status_from_code(code: int, info: bytes = b"") -> Status:
    """Map a reply function byte onto ``Status``.

    Raises:
        UnknownStatusError: If *code* is not in the closed status set.
            *info* is attached to the exception.
    """
    try:
        return Status(code)
    except ValueError:
        raise UnknownStatusError(code, info) from None


def command_from_name(name: str) -> Command:
    """Look up a ``Command`` by member name, ignoring case and dashes.

    Raises:
        ValueError: If no command has that name.

    Example:
        >>> command_from_name("protocol-version-get")
        <Command.PROTOCOL_VERSION_GET: 79>
    """
    key = name.strip().upper().replace("-", "_")
    try:
        return Command[key]
    except KeyError:
        raise ValueError(
            "unknown command '{}', expected one of: {}".format(
                name, ", ".join(c.name.lower() for c in Command)
            )
        ) from None
