"""Command-line tool -- query Seplos packs on an RS-485 bus.

Without ``--command``, prints the protocol version of every configured
pack.  With ``--command``, sends that raw command and prints the
status and info bytes of each reply.

Example:
    Run from the command line::

        seplos-bms seplos.toml
        seplos-bms seplos.toml -v --command telemetry_get --info 00
"""

import argparse
import logging
import sys

from seplos.client import Client
from seplos.config import load_config
from seplos.errors import SeplosError
from seplos.status import Command, command_from_name
from seplos.transport import open_transport

log = logging.getLogger(__name__)


def query_versions(client: Client, addresses: list[int]) -> int:
    """Print ``address version`` for each pack.  Returns the failure count."""
    failures = 0
    for addr in addresses:
        try:
            version = client.protocol_version(addr)
        except SeplosError as exc:
            log.error("pack %d: %s", addr, exc)
            failures += 1
            continue
        print("%d %.1f" % (addr, version))
    return failures


def send_command(client: Client, addresses: list[int], function: Command,
                 info: bytes) -> int:
    """Print ``address status info`` for each pack.  Returns the failure count."""
    failures = 0
    for addr in addresses:
        try:
            reply = client.command(addr, function, info)
        except SeplosError as exc:
            log.error("pack %d: %s", addr, exc)
            failures += 1
            continue
        print("%d %s %s" % (addr, reply.status.name, reply.info.hex().upper()))
        if not reply.ok:
            failures += 1
    return failures


def main(argv: list[str] | None = None) -> int:
    """CLI entry point -- parse args, load config, run the queries."""
    parser = argparse.ArgumentParser(description="Seplos BMS protocol 2.0 client")
    parser.add_argument("config", help="path to TOML config file")
    parser.add_argument(
        "--command", help="raw command to send, e.g. telemetry_get",
    )
    parser.add_argument(
        "--info", default="", help="info payload as hex, e.g. 00",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="enable debug logging",
    )
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        level=level,
    )

    function = None
    if args.command is not None:
        try:
            function = command_from_name(args.command)
        except ValueError as exc:
            parser.error(str(exc))
    try:
        info = bytes.fromhex(args.info)
    except ValueError:
        parser.error("--info must be a hex string, got '%s'" % args.info)

    try:
        cfg = load_config(args.config)
    except OSError as exc:
        parser.error("cannot read config: %s" % exc)
    except ValueError as exc:
        parser.error("bad config %s: %s" % (args.config, exc))
    log.debug(
        "port=%s baudrate=%d addresses=%s timeout=%ss",
        cfg["port"], cfg["baudrate"], cfg["addresses"], cfg["timeout"],
    )

    try:
        transport = open_transport(cfg["port"], cfg["baudrate"])
    except SeplosError as exc:
        log.error("%s", exc)
        return 1

    client = Client(transport, cfg["timeout"])
    try:
        if function is None:
            failures = query_versions(client, cfg["addresses"])
        else:
            failures = send_command(client, cfg["addresses"], function, info)
    finally:
        transport.close()

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
