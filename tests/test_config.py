"""Tests for seplos.config."""

import os

import pytest

from seplos.config import DEFAULT_BAUDRATE, TIMEOUT_S, load_config


def test_timeout_is_ten_seconds():
    assert TIMEOUT_S == 10


def test_default_baudrate():
    assert DEFAULT_BAUDRATE == 19200


def _write_toml(tmp_path: str, text: str) -> str:
    """Write TOML text to a temp file and return its path."""
    path = os.path.join(tmp_path, "cfg.toml")
    with open(path, "w") as f:
        f.write(text)
    return path


class TestLoadConfig:
    """Tests for load_config()."""

    def test_full_config(self, tmp_path):
        path = _write_toml(tmp_path, (
            'port = "/dev/ttyUSB1"\n'
            'baudrate = 9600\n'
            'addresses = [0, 1, 15]\n'
            'timeout = 2.5\n'
        ))
        cfg = load_config(path)
        assert cfg == {
            "port": "/dev/ttyUSB1",
            "baudrate": 9600,
            "addresses": [0, 1, 15],
            "timeout": 2.5,
        }

    def test_defaults(self, tmp_path):
        path = _write_toml(tmp_path, 'port = "/dev/ttyUSB0"\n')
        cfg = load_config(path)
        assert cfg["baudrate"] == 19200
        assert cfg["addresses"] == [0]
        assert cfg["timeout"] == 10

    def test_missing_port(self, tmp_path):
        path = _write_toml(tmp_path, 'addresses = [0]\n')
        with pytest.raises(ValueError, match="port"):
            load_config(path)

    def test_port_wrong_type(self, tmp_path):
        path = _write_toml(tmp_path, 'port = 1\n')
        with pytest.raises(ValueError, match="port must be str"):
            load_config(path)

    def test_baudrate_wrong_type(self, tmp_path):
        path = _write_toml(tmp_path, 'port = "/dev/ttyUSB0"\nbaudrate = "fast"\n')
        with pytest.raises(ValueError, match="baudrate"):
            load_config(path)

    def test_addresses_not_list(self, tmp_path):
        path = _write_toml(tmp_path, 'port = "/dev/ttyUSB0"\naddresses = 3\n')
        with pytest.raises(ValueError, match="addresses must be a list"):
            load_config(path)

    def test_addresses_empty(self, tmp_path):
        path = _write_toml(tmp_path, 'port = "/dev/ttyUSB0"\naddresses = []\n')
        with pytest.raises(ValueError, match="must not be empty"):
            load_config(path)

    def test_address_out_of_range(self, tmp_path):
        path = _write_toml(tmp_path, 'port = "/dev/ttyUSB0"\naddresses = [0, 16]\n')
        with pytest.raises(ValueError, match=r"addresses\[1\] must be 0-15"):
            load_config(path)

    def test_address_wrong_type(self, tmp_path):
        path = _write_toml(tmp_path, 'port = "/dev/ttyUSB0"\naddresses = ["a"]\n')
        with pytest.raises(ValueError, match=r"addresses\[0\] must be int"):
            load_config(path)

    def test_timeout_not_positive(self, tmp_path):
        path = _write_toml(tmp_path, 'port = "/dev/ttyUSB0"\ntimeout = 0\n')
        with pytest.raises(ValueError, match="timeout must be positive"):
            load_config(path)

    def test_timeout_wrong_type(self, tmp_path):
        path = _write_toml(tmp_path, 'port = "/dev/ttyUSB0"\ntimeout = "10"\n')
        with pytest.raises(ValueError, match="timeout must be a number"):
            load_config(path)
