"""Command-line entry point: ``vallox-mqtt`` / ``python -m valloxmqtt``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from valloxmqtt import __version__
from valloxmqtt.bridge import ValloxBridge
from valloxmqtt.config import BridgeConfig
from valloxmqtt.exceptions import ValloxConfigError, ValloxTransportError

_LOG = logging.getLogger("valloxmqtt")
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class _BelowLevel(logging.Filter):
    def __init__(self, level: int) -> None:
        super().__init__()
        self._level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self._level


def configure_logging(debug: bool) -> None:
    """Send records below WARNING to stdout and the rest to stderr."""
    formatter = logging.Formatter(_FORMAT)

    stdout = logging.StreamHandler(sys.stdout)
    stdout.addFilter(_BelowLevel(logging.WARNING))
    stdout.setFormatter(formatter)

    stderr = logging.StreamHandler(sys.stderr)
    stderr.setLevel(logging.WARNING)
    stderr.setFormatter(formatter)

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        handlers=[stdout, stderr],
        force=True,
    )


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="vallox-mqtt",
        description="Bridge a Vallox ventilation unit's RS-485 bus to MQTT. "
        "Configuration is read from VALLOX_* environment variables.",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging (overrides VALLOX_DEBUG)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


async def _run(config: BridgeConfig) -> None:
    async with ValloxBridge(config, logger=_LOG) as bridge:
        await bridge.run()


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        overrides = {"debug": True} if args.debug else {}
        config = BridgeConfig.from_env(**overrides)
    except ValloxConfigError as exc:
        configure_logging(args.debug)
        _LOG.error("Invalid configuration: %s", exc)
        return 1

    configure_logging(config.debug)
    _LOG.info("Starting vallox-mqtt %s", __version__)
    try:
        asyncio.run(_run(config))
    except (ValloxConfigError, ValloxTransportError) as exc:
        _LOG.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        _LOG.info("Interrupted, shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
