"""Project-wide configuration constants and config-file loading.

Central place for tuneable parameters shared across modules.
Import individual names where needed.

Example:
    >>> from seplos.config import load_config, TIMEOUT_S
    >>> cfg = load_config("seplos.toml")
    >>> cfg["addresses"]
    [0, 1]
"""

import tomllib

# Per-read deadline in seconds.  A BMS that is off or hibernating
# shows up as a timeout here.
TIMEOUT_S = 10

DEFAULT_BAUDRATE = 19200


def load_config(path: str) -> dict:
    """Read a TOML config file and validate its keys.

    Keys: ``port`` (str, required), ``baudrate`` (int, default 19200),
    ``addresses`` (list[int] in 0-15, default ``[0]``), ``timeout``
    (positive number of seconds, default ``TIMEOUT_S``).

    Raises:
        ValueError: If any required key is missing or has the wrong type.

    Example:
        >>> cfg = load_config("seplos.toml")
        >>> cfg["port"]
        '/dev/ttyUSB0'
    """
    with open(path, "rb") as f:
        raw = tomllib.load(f)

    _require_str(raw, "port")

    baudrate = raw.get("baudrate", DEFAULT_BAUDRATE)
    if not isinstance(baudrate, int) or isinstance(baudrate, bool):
        raise ValueError("baudrate must be int, got %s" % type(baudrate).__name__)

    addresses = raw.get("addresses", [0])
    _check_addresses(addresses)

    timeout = raw.get("timeout", TIMEOUT_S)
    if not isinstance(timeout, (int, float)) or isinstance(timeout, bool):
        raise ValueError("timeout must be a number, got %s" % type(timeout).__name__)
    if timeout <= 0:
        raise ValueError("timeout must be positive, got %s" % timeout)

    return {
        "port": raw["port"],
        "baudrate": baudrate,
        "addresses": list(addresses),
        "timeout": timeout,
    }


def _check_addresses(addresses: object) -> None:
    """Validate a non-empty list of pack addresses (0-15)."""
    if not isinstance(addresses, list):
        raise ValueError("addresses must be a list of ints")
    for i, v in enumerate(addresses):
        if not isinstance(v, int) or isinstance(v, bool):
            raise ValueError("addresses[%d] must be int, got %s" % (i, type(v).__name__))
        if v < 0 or v > 15:
            raise ValueError("addresses[%d] must be 0-15, got %d" % (i, v))
    if len(addresses) == 0:
        raise ValueError("addresses must not be empty")


def _require_str(raw: dict[str, object], key: str) -> None:
    """Validate that *key* exists in *raw* and is a str."""
    if key not in raw:
        raise ValueError("missing required key: %s" % key)
    if not isinstance(raw[key], str):
        raise ValueError("%s must be str, got %s" % (key, type(raw[key]).__name__))
