"""Vallox RS-485 frame encoding and value decoding.

Every frame on the bus is six bytes::

    [domain, sender, receiver, register, value, checksum]

``domain`` is always ``0x01`` and ``checksum`` is the sum of the first
five bytes modulo 256. A frame whose register byte is ``0x00`` is a
query: its value byte names the register being asked for.
"""

from __future__ import annotations

from valloxmqtt.device.registers import FAN_SPEED_REGISTERS, HUMIDITY_REGISTERS, TEMPERATURE_REGISTERS
from valloxmqtt.models.register import RegisterEvent

DOMAIN = 0x01
FRAME_LENGTH = 6
QUERY_REGISTER = 0x00

MAINBOARDS = 0x10
MAINBOARD_1 = 0x11
PANELS = 0x20

SPEED_MIN = 1
SPEED_MAX = 8

# Fan speed n is transmitted as the n lowest bits set.
_SPEED_MASKS: tuple[int, ...] = (0x01, 0x03, 0x07, 0x0F, 0x1F, 0x3F, 0x7F, 0xFF)

# NTC sensor byte -> degrees Celsius.
_NTC_TEMPERATURES: tuple[int, ...] = (
    -74, -70, -66, -62, -59, -56, -54, -52, -50, -48, -47, -46, -44, -43, -42, -41,
    -40, -39, -38, -37, -36, -35, -34, -33, -33, -32, -31, -30, -30, -29, -28, -28,
    -27, -27, -26, -25, -25, -24, -24, -23, -23, -22, -22, -21, -21, -20, -20, -19,
    -19, -19, -18, -18, -17, -17, -16, -16, -16, -15, -15, -14, -14, -14, -13, -13,
    -12, -12, -12, -11, -11, -11, -10, -10, -9, -9, -9, -8, -8, -8, -7, -7,
    -7, -6, -6, -6, -5, -5, -5, -4, -4, -4, -3, -3, -3, -2, -2, -2,
    -1, -1, -1, -1, 0, 0, 0, 1, 1, 1, 2, 2, 2, 3, 3, 3,
    4, 4, 4, 5, 5, 5, 5, 6, 6, 6, 7, 7, 7, 8, 8, 8,
    9, 9, 9, 10, 10, 10, 11, 11, 11, 12, 12, 12, 13, 13, 13, 14,
    14, 14, 15, 15, 15, 16, 16, 16, 17, 17, 18, 18, 18, 19, 19, 19,
    20, 20, 21, 21, 21, 22, 22, 22, 23, 23, 24, 24, 24, 25, 25, 26,
    26, 27, 27, 27, 28, 28, 29, 29, 30, 30, 31, 31, 32, 32, 33, 33,
    34, 34, 35, 35, 35, 36, 36, 37, 37, 38, 38, 39, 40, 40, 41, 41,
    42, 43, 43, 44, 45, 45, 46, 47, 48, 48, 49, 50, 51, 52, 53, 53,
    54, 55, 56, 57, 59, 60, 61, 62, 63, 65, 66, 68, 69, 71, 73, 75,
    77, 79, 81, 82, 86, 90, 93, 97, 100, 100, 100, 100, 100, 100, 100, 100,
)  # fmt: skip


def checksum(data: bytes | bytearray) -> int:
    """Return the frame checksum over *data* (normally the first five bytes)."""
    return sum(data) & 0xFF


def encode_frame(sender: int, receiver: int, register: int, value: int) -> bytes:
    body = bytes((DOMAIN, sender, receiver, register, value))
    return body + bytes((checksum(body),))


def encode_query(sender: int, register: int) -> bytes:
    """Build a request asking the first mainboard for *register*."""
    return encode_frame(sender, MAINBOARD_1, QUERY_REGISTER, register)


def is_valid_frame(frame: bytes | bytearray) -> bool:
    return len(frame) == FRAME_LENGTH and frame[0] == DOMAIN and checksum(frame[:5]) == frame[5]


def speed_to_raw(speed: int) -> int:
    """Encode a fan speed (1-8) as its bus bit mask.

    Raises :class:`ValueError` for speeds outside 1-8.
    """
    if not SPEED_MIN <= speed <= SPEED_MAX:
        raise ValueError(f"speed must be between {SPEED_MIN} and {SPEED_MAX}, got {speed}")
    return _SPEED_MASKS[speed - 1]


def raw_to_speed(raw: int) -> int:
    return raw.bit_length()


def raw_to_temperature(raw: int) -> int:
    return _NTC_TEMPERATURES[raw]


def raw_to_humidity(raw: int) -> int:
    return max(0, round((raw - 51) / 2.04))


def decode_value(register: int, raw: int) -> int:
    """Decode a register byte into its physical quantity."""
    if register in FAN_SPEED_REGISTERS:
        return raw_to_speed(raw)
    if register in TEMPERATURE_REGISTERS:
        return raw_to_temperature(raw)
    if register in HUMIDITY_REGISTERS:
        return raw_to_humidity(raw)
    return raw


def decode_frame(frame: bytes | bytearray) -> RegisterEvent | None:
    """Turn a valid frame into a :class:`RegisterEvent`.

    Returns ``None`` for query frames, which carry no observation.
    """
    _domain, sender, receiver, register, raw, _checksum = frame
    if register == QUERY_REGISTER:
        return None
    return RegisterEvent(
        register=register,
        raw_value=raw,
        value=decode_value(register, raw),
        source=sender,
        destination=receiver,
    )


class FrameDecoder:
    """Incremental decoder that extracts valid frames from a byte stream.

    Bytes that do not start a valid frame are discarded one at a time so
    the decoder resynchronises after line noise or a partial frame.
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    def feed(self, data: bytes) -> list[bytes]:
        self._buffer.extend(data)
        frames: list[bytes] = []
        while len(self._buffer) >= FRAME_LENGTH:
            window = self._buffer[:FRAME_LENGTH]
            if is_valid_frame(window):
                frames.append(bytes(window))
                del self._buffer[:FRAME_LENGTH]
            else:
                del self._buffer[0]
        return frames

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet forming a frame."""
        return len(self._buffer)
