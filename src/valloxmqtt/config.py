"""Bridge configuration for valloxmqtt."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from valloxmqtt._constants import DEFAULT_CLIENT_ID, DEFAULT_KEEPALIVE, DEFAULT_PANEL_ADDRESS
from valloxmqtt.exceptions import ValloxConfigError

_ENV_PREFIX = "VALLOX_"

# Panels 1-15 on the Vallox bus.
_PANEL_ADDRESS_MIN = 0x21
_PANEL_ADDRESS_MAX = 0x2F


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_int(name: str, value: str) -> int:
    try:
        return int(value.strip(), 0)
    except ValueError as exc:
        raise ValloxConfigError(f"{name} must be an integer, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class DeviceIdentity:
    """Device identity block shared by every discovery descriptor."""

    identifier: str = "vallox"
    name: str = "Vallox Digit SE"
    model: str = "Digit SE"
    manufacturer: str = "Vallox"


@dataclasses.dataclass(frozen=True)
class BridgeConfig:
    """Bridge configuration.

    Parameters
    ----------
    serial_device : str
        Serial port of the RS-485 adapter (e.g. ``/dev/ttyUSB0``).
    mqtt_url : str
        Broker address, ``tcp://host:1883`` or ``ssl://host:8883``.
    mqtt_user : str or None
        Broker username. Only sent when non-empty.
    mqtt_password : str or None
        Broker password. Only sent when non-empty.
    mqtt_client_id : str
        MQTT client identifier.
    mqtt_keepalive : int
        MQTT keepalive in seconds.
    debug : bool
        Enable verbose logging.
    enable_write : bool
        Allow writes (speed changes and register queries) to the bus.
        When disabled the bridge is a passive listener.
    enable_raw : bool
        Additionally publish every raw register value under
        ``vallox/raw/<register>``.
    panel_address : int
        Bus address this bridge uses as a remote panel (``0x21``-``0x2F``).
    device : DeviceIdentity
        Identity announced in discovery descriptors.
    """

    serial_device: str
    mqtt_url: str
    mqtt_user: str | None = None
    mqtt_password: str | None = None
    mqtt_client_id: str = DEFAULT_CLIENT_ID
    mqtt_keepalive: int = DEFAULT_KEEPALIVE
    debug: bool = False
    enable_write: bool = False
    enable_raw: bool = False
    panel_address: int = DEFAULT_PANEL_ADDRESS
    device: DeviceIdentity = dataclasses.field(default_factory=DeviceIdentity)

    def __post_init__(self) -> None:
        if not self.serial_device.strip():
            raise ValloxConfigError("serial_device must be non-empty")
        if not self.mqtt_url.strip():
            raise ValloxConfigError("mqtt_url must be non-empty")
        if not _PANEL_ADDRESS_MIN <= self.panel_address <= _PANEL_ADDRESS_MAX:
            raise ValloxConfigError(
                f"panel_address must be between {_PANEL_ADDRESS_MIN:#x} and {_PANEL_ADDRESS_MAX:#x}, "
                f"got {self.panel_address:#x}"
            )
        if self.mqtt_keepalive <= 0:
            raise ValloxConfigError(f"mqtt_keepalive must be positive, got {self.mqtt_keepalive}")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None, **overrides: Any) -> BridgeConfig:
        """Create configuration from ``VALLOX_*`` environment variables.

        Explicit keyword arguments override environment values.

        Raises
        ------
        ValloxConfigError
            A required value is missing or a value cannot be parsed.
        """
        env = os.environ if environ is None else environ

        device_kwargs: dict[str, str] = {}
        _ENV_DEVICE_MAP = {
            "VALLOX_DEVICE_ID": "identifier",
            "VALLOX_DEVICE_NAME": "name",
            "VALLOX_DEVICE_MODEL": "model",
            "VALLOX_DEVICE_MANUFACTURER": "manufacturer",
        }
        for env_key, field_name in _ENV_DEVICE_MAP.items():
            val = env.get(env_key)
            if val:
                device_kwargs[field_name] = val

        device_overrides = overrides.pop("device", None)
        if isinstance(device_overrides, dict):
            device_kwargs.update(device_overrides)
        elif isinstance(device_overrides, DeviceIdentity):
            device_kwargs = dataclasses.asdict(device_overrides)

        config_kwargs: dict[str, Any] = {"device": DeviceIdentity(**device_kwargs)}

        _ENV_CONFIG_MAP = {
            "VALLOX_SERIAL_DEVICE": "serial_device",
            "VALLOX_MQTT_URL": "mqtt_url",
            "VALLOX_MQTT_USER": "mqtt_user",
            "VALLOX_MQTT_PASSWORD": "mqtt_password",
            "VALLOX_MQTT_CLIENT_ID": "mqtt_client_id",
        }
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = val

        for env_key, field_name in (
            ("VALLOX_DEBUG", "debug"),
            ("VALLOX_ENABLE_WRITE", "enable_write"),
            ("VALLOX_ENABLE_RAW", "enable_raw"),
        ):
            if field_name not in overrides:
                config_kwargs[field_name] = _env_bool(env.get(env_key), False)

        for env_key, field_name in (
            ("VALLOX_MQTT_KEEPALIVE", "mqtt_keepalive"),
            ("VALLOX_PANEL_ADDRESS", "panel_address"),
        ):
            val = env.get(env_key)
            if val and field_name not in overrides:
                config_kwargs[field_name] = _env_int(env_key, val)

        config_kwargs.update(overrides)

        for required in ("serial_device", "mqtt_url"):
            if not config_kwargs.get(required):
                raise ValloxConfigError(f"{_ENV_PREFIX}{required.upper()} is required")

        return cls(**config_kwargs)
