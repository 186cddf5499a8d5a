from __future__ import annotations

import pytest

from valloxmqtt.config import BridgeConfig, DeviceIdentity
from valloxmqtt.exceptions import ValloxConfigError

_REQUIRED = {
    "VALLOX_SERIAL_DEVICE": "/dev/ttyUSB0",
    "VALLOX_MQTT_URL": "tcp://broker:1883",
}


def test_from_env_defaults() -> None:
    config = BridgeConfig.from_env(dict(_REQUIRED))

    assert config.serial_device == "/dev/ttyUSB0"
    assert config.mqtt_url == "tcp://broker:1883"
    assert config.mqtt_user is None
    assert config.mqtt_password is None
    assert config.mqtt_client_id == "vallox"
    assert config.mqtt_keepalive == 150
    assert config.debug is False
    assert config.enable_write is False
    assert config.enable_raw is False
    assert config.panel_address == 0x27
    assert config.device == DeviceIdentity()


def test_from_env_reads_every_variable() -> None:
    env = dict(_REQUIRED)
    env.update(
        {
            "VALLOX_MQTT_USER": "bridge",
            "VALLOX_MQTT_PASSWORD": "secret",
            "VALLOX_MQTT_CLIENT_ID": "vallox-attic",
            "VALLOX_MQTT_KEEPALIVE": "60",
            "VALLOX_DEBUG": "yes",
            "VALLOX_ENABLE_WRITE": "1",
            "VALLOX_ENABLE_RAW": "on",
            "VALLOX_PANEL_ADDRESS": "0x22",
            "VALLOX_DEVICE_ID": "ahu",
            "VALLOX_DEVICE_NAME": "Attic unit",
        }
    )
    config = BridgeConfig.from_env(env)

    assert config.mqtt_user == "bridge"
    assert config.mqtt_password == "secret"
    assert config.mqtt_client_id == "vallox-attic"
    assert config.mqtt_keepalive == 60
    assert config.debug is True
    assert config.enable_write is True
    assert config.enable_raw is True
    assert config.panel_address == 0x22
    assert config.device.identifier == "ahu"
    assert config.device.name == "Attic unit"
    assert config.device.manufacturer == "Vallox"


def test_overrides_take_precedence() -> None:
    env = dict(_REQUIRED, VALLOX_DEBUG="false")
    config = BridgeConfig.from_env(env, debug=True, mqtt_url="ssl://other:8883")

    assert config.debug is True
    assert config.mqtt_url == "ssl://other:8883"


@pytest.mark.parametrize("missing", ["VALLOX_SERIAL_DEVICE", "VALLOX_MQTT_URL"])
def test_missing_required_value_is_fatal(missing: str) -> None:
    env = dict(_REQUIRED)
    del env[missing]

    with pytest.raises(ValloxConfigError, match=missing):
        BridgeConfig.from_env(env)


def test_unparseable_integer_is_rejected() -> None:
    with pytest.raises(ValloxConfigError, match="VALLOX_MQTT_KEEPALIVE"):
        BridgeConfig.from_env(dict(_REQUIRED, VALLOX_MQTT_KEEPALIVE="soon"))


@pytest.mark.parametrize("address", ["0x20", "0x30", "0x11"])
def test_panel_address_out_of_range_is_rejected(address: str) -> None:
    with pytest.raises(ValloxConfigError, match="panel_address"):
        BridgeConfig.from_env(dict(_REQUIRED, VALLOX_PANEL_ADDRESS=address))


def test_non_positive_keepalive_is_rejected() -> None:
    with pytest.raises(ValloxConfigError):
        BridgeConfig(serial_device="/dev/ttyUSB0", mqtt_url="tcp://broker", mqtt_keepalive=0)


def test_config_is_frozen() -> None:
    config = BridgeConfig.from_env(dict(_REQUIRED))

    with pytest.raises(AttributeError):
        config.debug = True  # type: ignore[misc]
