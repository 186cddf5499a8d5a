from __future__ import annotations

from valloxmqtt.device.registers import (
    REGISTER_CURRENT_FAN_SPEED,
    REGISTER_IO08,
    REGISTER_OUTDOOR_TEMP,
    REGISTER_POST_HEATING_TARGET,
    REGISTER_STATUS,
)
from valloxmqtt.models.register import RegisterEvent
from valloxmqtt.topics import (
    FAN_SPEED_COMMAND_TOPIC,
    STATUS_TOPIC,
    TOPIC_FLAG_MAP,
    TOPIC_IO8_ERROR_RELAY,
    TOPIC_IO8_RAW,
    TOPIC_IO8_SUMMER_MODE,
    TOPIC_MAP,
    TOPIC_POST_HEATING_TARGET_TEMP,
    TOPIC_TEMP_OUTDOOR,
    format_value,
    publications_for,
    raw_topic,
)


def test_fixed_topics() -> None:
    assert FAN_SPEED_COMMAND_TOPIC == "vallox/fan/currentSpeed/set"
    assert STATUS_TOPIC == "homeassistant/status"
    assert raw_topic(0x0A) == "vallox/raw/a"
    assert raw_topic(REGISTER_STATUS) == "vallox/raw/a3"


def test_format_value() -> None:
    assert format_value(True) == "true"
    assert format_value(False) == "false"
    assert format_value(-3) == "-3"


def test_direct_value_is_published_first() -> None:
    event = RegisterEvent(register=REGISTER_OUTDOOR_TEMP, raw_value=0x64, value=0)

    assert publications_for(event) == [(TOPIC_TEMP_OUTDOOR, "0")]


def test_post_heating_target_feeds_its_announced_sensor() -> None:
    event = RegisterEvent(register=REGISTER_POST_HEATING_TARGET, raw_value=0x83, value=10)

    assert publications_for(event) == [(TOPIC_POST_HEATING_TARGET_TEMP, "10")]


def test_flags_follow_direct_value_and_raw_comes_last() -> None:
    event = RegisterEvent(register=REGISTER_IO08, raw_value=0b0000_0010, value=2)

    publications = publications_for(event, enable_raw=True)

    assert publications[0] == (TOPIC_IO8_RAW, "2")
    assert publications[-1] == ("vallox/raw/8", "2")
    flags = dict(publications[1:-1])
    assert len(flags) == len(TOPIC_FLAG_MAP[REGISTER_IO08])
    assert flags[TOPIC_IO8_SUMMER_MODE] == "true"
    assert flags[TOPIC_IO8_ERROR_RELAY] == "false"


def test_unknown_register_publishes_only_raw_when_enabled() -> None:
    event = RegisterEvent(register=0xFE, raw_value=7, value=7)

    assert publications_for(event) == []
    assert publications_for(event, enable_raw=True) == [("vallox/raw/fe", "7")]


def test_every_flag_register_has_a_raw_topic() -> None:
    assert set(TOPIC_FLAG_MAP) <= set(TOPIC_MAP)
    assert REGISTER_CURRENT_FAN_SPEED in TOPIC_MAP
