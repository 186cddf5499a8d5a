from __future__ import annotations

import pytest

from valloxmqtt.device.protocol import (
    FrameDecoder,
    checksum,
    decode_frame,
    decode_value,
    encode_frame,
    encode_query,
    is_valid_frame,
    raw_to_humidity,
    raw_to_speed,
    raw_to_temperature,
    speed_to_raw,
)
from valloxmqtt.device.registers import (
    REGISTER_CURRENT_FAN_SPEED,
    REGISTER_OUTDOOR_TEMP,
    REGISTER_RH1,
    REGISTER_STATUS,
)


def test_encode_frame_appends_checksum() -> None:
    frame = encode_frame(0x27, 0x10, REGISTER_CURRENT_FAN_SPEED, 0x0F)

    assert frame == bytes((0x01, 0x27, 0x10, 0x29, 0x0F, 0x70))
    assert checksum(frame[:5]) == frame[5]
    assert is_valid_frame(frame)


def test_encode_query_targets_first_mainboard() -> None:
    assert encode_query(0x27, REGISTER_CURRENT_FAN_SPEED) == bytes((0x01, 0x27, 0x11, 0x00, 0x29, 0x62))


def test_checksum_wraps_at_one_byte() -> None:
    assert checksum(bytes((0x01, 0xFF, 0xFF, 0xFF, 0xFF))) == 0xFD


def test_invalid_frames() -> None:
    good = encode_frame(0x11, 0x20, REGISTER_STATUS, 0x01)

    assert not is_valid_frame(good[:5])
    assert not is_valid_frame(bytes((0x02,)) + good[1:])
    assert not is_valid_frame(good[:5] + bytes(((good[5] + 1) & 0xFF,)))


@pytest.mark.parametrize(("speed", "raw"), [(1, 0x01), (2, 0x03), (4, 0x0F), (8, 0xFF)])
def test_speed_bit_masks(speed: int, raw: int) -> None:
    assert speed_to_raw(speed) == raw
    assert raw_to_speed(raw) == speed


@pytest.mark.parametrize("speed", [0, 9, -1])
def test_speed_out_of_range(speed: int) -> None:
    with pytest.raises(ValueError):
        speed_to_raw(speed)


def test_temperature_table_bounds() -> None:
    assert raw_to_temperature(0x00) == -74
    assert raw_to_temperature(0x64) == 0
    assert raw_to_temperature(0xFF) == 100


def test_humidity_conversion_clamps_at_zero() -> None:
    assert raw_to_humidity(0xFF) == 100
    assert raw_to_humidity(51) == 0
    assert raw_to_humidity(10) == 0


def test_decode_value_by_register() -> None:
    assert decode_value(REGISTER_CURRENT_FAN_SPEED, 0x07) == 3
    assert decode_value(REGISTER_OUTDOOR_TEMP, 0x64) == 0
    assert decode_value(REGISTER_RH1, 0xFF) == 100
    assert decode_value(REGISTER_STATUS, 0x85) == 0x85


def test_decode_frame() -> None:
    event = decode_frame(encode_frame(0x11, 0x20, REGISTER_CURRENT_FAN_SPEED, 0x1F))

    assert event is not None
    assert event.register_id == REGISTER_CURRENT_FAN_SPEED
    assert event.raw_value == 0x1F
    assert event.value == 5
    assert event.source == 0x11
    assert event.destination == 0x20


def test_query_frame_carries_no_observation() -> None:
    assert decode_frame(encode_query(0x21, REGISTER_STATUS)) is None


def test_decoder_splits_concatenated_frames_across_chunks() -> None:
    first = encode_frame(0x11, 0x20, REGISTER_STATUS, 0x01)
    second = encode_frame(0x11, 0x27, REGISTER_CURRENT_FAN_SPEED, 0x03)
    stream = first + second
    decoder = FrameDecoder()

    assert decoder.feed(stream[:4]) == []
    assert decoder.pending == 4
    assert decoder.feed(stream[4:9]) == [first]
    assert decoder.feed(stream[9:]) == [second]
    assert decoder.pending == 0


def test_decoder_resynchronises_after_noise() -> None:
    frame = encode_frame(0x11, 0x20, REGISTER_STATUS, 0x01)
    decoder = FrameDecoder()

    assert decoder.feed(bytes((0x55, 0x01, 0x99)) + frame) == [frame]
    assert decoder.pending == 0
