"""Parsing of inbound broker payloads."""

from __future__ import annotations

import re
from enum import StrEnum

from valloxmqtt.exceptions import ValloxCommandError

_SPEED_PATTERN = re.compile(r"0[xX][0-9a-fA-F]+|[0-9]+")


class ConsumerStatus(StrEnum):
    """Birth/last-will status of the downstream consumer."""

    ONLINE = "online"
    OFFLINE = "offline"
    UNKNOWN = "unknown"


def _decode(payload: bytes) -> str:
    try:
        return payload.decode("utf-8").strip()
    except UnicodeDecodeError as exc:
        raise ValloxCommandError(f"payload is not UTF-8: {payload!r}", payload=payload) from exc


def parse_speed_payload(payload: bytes) -> int:
    """Parse a speed command: decimal (``"5"``) or hexadecimal (``"0x05"``).

    Raises
    ------
    ValloxCommandError
        The payload is not an integer in the 0-255 range.
    """
    text = _decode(payload)
    if not _SPEED_PATTERN.fullmatch(text):
        raise ValloxCommandError(f"cannot parse speed from {text!r}", payload=payload)
    value = int(text, 0) if text[:2].lower() == "0x" else int(text, 10)
    if not 0 <= value <= 0xFF:
        raise ValloxCommandError(f"speed {value} does not fit in a byte", payload=payload)
    return value


def parse_status_payload(payload: bytes) -> ConsumerStatus:
    """Map a status topic payload to :class:`ConsumerStatus`.

    Matching is exact; anything other than ``online`` or ``offline`` is
    ``UNKNOWN``.
    """
    try:
        text = payload.decode("utf-8")
    except UnicodeDecodeError:
        return ConsumerStatus.UNKNOWN
    if text == ConsumerStatus.ONLINE:
        return ConsumerStatus.ONLINE
    if text == ConsumerStatus.OFFLINE:
        return ConsumerStatus.OFFLINE
    return ConsumerStatus.UNKNOWN
