"""Tests for seplos.status."""

import pytest

from seplos.errors import UnknownStatusError
from seplos.status import Command, Status, command_from_name, status_from_code


class TestStatusFromCode:
    """Mapping of reply function bytes to Status."""

    @pytest.mark.parametrize("code,status", [
        (0x00, Status.NORMAL),
        (0x01, Status.VERSION_ERROR),
        (0x02, Status.CHECKSUM_ERROR),
        (0x03, Status.LENGTH_CHECKSUM_ERROR),
        (0x04, Status.CID2_ERROR),
        (0x05, Status.COMMAND_FORMAT_ERROR),
        (0x06, Status.DATA_INVALID),
        (0x07, Status.NO_HISTORY),
        (0xE1, Status.CID1_ERROR),
        (0xE2, Status.EXECUTION_FAILURE),
        (0xE3, Status.DEVICE_FAULT),
        (0xE4, Status.PERMISSION_ERROR),
    ])
    def test_known_codes(self, code, status):
        assert status_from_code(code) is status

    @pytest.mark.parametrize("code", [0x08, 0x42, 0xE0, 0xE5, 0xFF])
    def test_unknown_codes(self, code):
        """Anything outside the closed set is UnknownStatusError."""
        with pytest.raises(UnknownStatusError) as excinfo:
            status_from_code(code, b"\x01")
        assert excinfo.value.code == code
        assert excinfo.value.info == b"\x01"

    def test_closed_set_size(self):
        assert len(Status) == 12


class TestCommand:
    """Command identifiers and name lookup."""

    def test_codes(self):
        assert Command.TELEMETRY_GET == 0x42
        assert Command.PROTOCOL_VERSION_GET == 0x4F
        assert Command.VENDOR_GET == 0x51
        assert Command.REGULAR_RECORDING == 0xA2
        assert len(Command) == 13

    def test_from_name(self):
        assert command_from_name("telemetry_get") is Command.TELEMETRY_GET
        assert command_from_name("TIME-SET") is Command.TIME_SET
        assert command_from_name(" vendor_get ") is Command.VENDOR_GET

    def test_from_name_unknown(self):
        with pytest.raises(ValueError, match="unknown command"):
            command_from_name("reboot")
